"""Admin registration for cart models."""

from django.contrib import admin, messages

from .models import Cart, CartLine
from .services import CartError, clear_cart


class CartLineInline(admin.TabularInline):
    model = CartLine
    extra = 0
    fields = ("product", "qty", "created_at", "updated_at")
    readonly_fields = ("created_at", "updated_at")
    raw_id_fields = ("product",)


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "session_id", "updated_at", "created_at")
    search_fields = ("session_id",)
    ordering = ("-updated_at",)
    readonly_fields = ("created_at", "updated_at")
    inlines = [CartLineInline]
    actions = ["action_clear_cart"]

    @admin.action(description="Clear cart")
    def action_clear_cart(self, request, queryset):
        successes = 0
        failures = 0
        for cart in queryset:
            try:
                clear_cart(session_id=cart.session_id)
                successes += 1
            except CartError:
                failures += 1
        if successes:
            messages.success(request, f"Cleared {successes} cart(s).")
        if failures:
            messages.error(request, f"Failed to clear {failures} cart(s).")
