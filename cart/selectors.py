"""Selectors for read-only cart queries."""

from decimal import Decimal
from typing import Dict, List, Optional

from .models import Cart, CartLine


def get_cart_for_session(*, session_id: str) -> Optional[Cart]:
    return Cart.objects.filter(session_id=session_id).first()


def get_or_create_cart(*, session_id: str) -> Cart:
    """Return the session's cart, creating it if missing."""

    cart, _ = Cart.objects.get_or_create(session_id=session_id)
    return cart


def fetch_cart_view(*, session_id: str) -> List[Dict]:
    """Return denormalized cart rows for a session, oldest line first.

    Each row joins the line with the current product data and carries
    ``line_total = price * qty``. Products without a selling price show a
    price of zero. Unknown sessions yield no rows.
    """

    lines = CartLine.objects.select_related("product").filter(cart__session_id=session_id).order_by("id")
    rows = []
    for line in lines:
        product = line.product
        price = product.selling_price if product.selling_price is not None else Decimal("0.00")
        rows.append(
            {
                "session_id": session_id,
                "product_id": str(product.id),
                "qty": line.qty,
                "name": product.name,
                "size": product.size,
                "country": product.country_of_origin,
                "type": product.type,
                "temperature": product.temperature,
                "thumbnail_url": product.thumbnail_url,
                "unlimited_stock": product.unlimited_stock,
                "qty_available": product.qty_available,
                "out_of_stock": product.out_of_stock,
                "price": price,
                "line_total": price * line.qty,
            }
        )
    return rows
