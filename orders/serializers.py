"""DRF serializers for Orders.

Orders expose their stored snapshots; nothing is recomputed from the
current catalog.
"""

from rest_framework import serializers

from .models import Order, OrderLine


class OrderLineSerializer(serializers.ModelSerializer):
    product_id = serializers.CharField(source="product_ref", read_only=True)

    class Meta:
        model = OrderLine
        fields = ["id", "product_id", "name", "size", "temperature", "price", "qty", "line_total"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    lines = OrderLineSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "number",
            "status",
            "delivery_status",
            "email",
            "customer",
            "placed_for_someone_else",
            "postal_code",
            "delivery_date",
            "delivery_slot",
            "express_delivery",
            "add_thermal_bag",
            "lines",
            "subtotal",
            "delivery_fee",
            "thermal_bag_fee",
            "total",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class OrderStatusUpdateSerializer(serializers.Serializer):
    """Staff update of the lifecycle status, the delivery status, or both."""

    status = serializers.CharField(required=False)
    delivery_status = serializers.CharField(required=False)

    def validate(self, attrs):
        if not attrs.get("status") and not attrs.get("delivery_status"):
            raise serializers.ValidationError("Provide status or delivery_status.")
        return attrs


class OrderEmailPayloadSerializer(serializers.Serializer):
    """Documented shape of the send-order-email request body."""

    email = serializers.CharField(required=False)
    orderId = serializers.CharField(required=False)
    name = serializers.CharField(required=False, allow_null=True)
    orderNumber = serializers.CharField(required=False, allow_null=True)
    origin = serializers.CharField(required=False, allow_null=True)
