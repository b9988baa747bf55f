"""Admin registration for delivery pricing rules."""

from django.contrib import admin

from .models import DeliveryPricing


@admin.register(DeliveryPricing)
class DeliveryPricingAdmin(admin.ModelAdmin):
    list_display = ("postal_code", "area_name", "min_order_free_delivery_php", "delivery_fee_below_min_php")
    search_fields = ("postal_code", "area_name")
    ordering = ("postal_code", "area_name")
