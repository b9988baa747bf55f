"""Read-only queries for checkout."""

from typing import List

from cart.projection import build_cart_items, cart_totals
from cart.selectors import fetch_cart_view

from .models import DeliveryPricing
from .pricing import DeliveryRule


def list_delivery_rules() -> List[DeliveryRule]:
    return [row.as_rule() for row in DeliveryPricing.objects.all()]


def cart_subtotal(*, session_id: str):
    return cart_totals(build_cart_items(fetch_cart_view(session_id=session_id))).subtotal
