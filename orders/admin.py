from django.contrib import admin

from .models import IdempotencyKey, Order, OrderLine


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    can_delete = False
    fields = ("product_ref", "name", "size", "temperature", "price", "qty", "line_total")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "number",
        "status",
        "delivery_status",
        "email",
        "postal_code",
        "delivery_date",
        "total",
        "created_at",
    )
    list_filter = ("status", "delivery_status", "placed_for_someone_else", "express_delivery", "created_at")
    search_fields = ("number", "email", "session_id")
    date_hierarchy = "created_at"
    readonly_fields = ("id", "number", "session_id", "customer", "subtotal", "delivery_fee", "thermal_bag_fee", "total")
    inlines = [OrderLineInline]


@admin.register(IdempotencyKey)
class IdempotencyKeyAdmin(admin.ModelAdmin):
    list_display = ("id", "key", "scope", "path", "method", "response_code", "expires_at")
    list_filter = ("method", "response_code")
    search_fields = ("key", "scope", "path")
