"""Cart serializers for read and write operations."""

from rest_framework import serializers

from .projection import build_cart_items, cart_totals
from .selectors import fetch_cart_view


class CartItemReadSerializer(serializers.Serializer):
    """Read serializer for a projected cart item."""

    product_id = serializers.CharField()
    name = serializers.CharField()
    country = serializers.CharField(allow_null=True)
    type = serializers.CharField(allow_null=True)
    size = serializers.CharField(allow_null=True)
    temperature = serializers.CharField(allow_null=True)
    thumbnail_url = serializers.CharField(allow_null=True)
    unlimited_stock = serializers.BooleanField()
    qty_available = serializers.IntegerField(allow_null=True)
    out_of_stock = serializers.BooleanField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    qty = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2)


class CartReadSerializer(serializers.Serializer):
    """Read serializer for the cart items and totals."""

    session_id = serializers.CharField()
    items = CartItemReadSerializer(many=True)
    total_units = serializers.IntegerField()
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2)

    @classmethod
    def for_session(cls, *, session_id: str):
        items = build_cart_items(fetch_cart_view(session_id=session_id))
        totals = cart_totals(items)
        return cls(
            {
                "session_id": session_id,
                "items": items,
                "total_units": totals.total_units,
                "subtotal": totals.subtotal,
            }
        )


class SetLineQtySerializer(serializers.Serializer):
    """Write serializer for setting a cart line quantity. Zero removes the line."""

    qty = serializers.IntegerField(min_value=0)
