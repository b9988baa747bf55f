"""Admin registration for catalog models."""

from django.contrib import admin

from .models import Product, ProductImage


class ProductImageInline(admin.TabularInline):
    model = ProductImage
    extra = 0
    fields = ("url", "sort_order")
    ordering = ("sort_order",)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "size", "selling_price", "status", "qty_on_hand", "sort_order")
    search_fields = ("name", "long_name", "keywords")
    list_filter = ("status", "type", "temperature", "unlimited_stock")
    inlines = [ProductImageInline]
