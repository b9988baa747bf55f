"""Cart services: quantity mutations keyed by storefront session."""

import logging

from catalog.selectors import get_product
from common.session import is_cart_session
from django.db import transaction

from .models import Cart, CartLine
from .selectors import get_or_create_cart


class CartError(Exception):
    """Raised for cart mutation failures."""


logger = logging.getLogger("storefront.cart")


def _require_session(session_id: str) -> None:
    if not is_cart_session(session_id):
        raise CartError("Invalid session id")


@transaction.atomic
def set_line_qty(*, session_id: str, product_id, qty) -> int:
    """Set the quantity of ``product_id`` in the session's cart.

    Quantities below one remove the line. Returns the stored quantity.
    Concurrent writers are not coordinated; the last write wins.
    """

    _require_session(session_id)
    try:
        next_qty = max(int(qty or 0), 0)
    except (TypeError, ValueError):
        raise CartError("Quantity must be a whole number")
    # Hidden products can still be removed, never added.
    product = get_product(product_id, include_inactive=next_qty == 0)
    if product is None:
        raise CartError("Unknown product")

    cart = get_or_create_cart(session_id=session_id)
    if next_qty == 0:
        deleted, _ = CartLine.objects.filter(cart=cart, product=product).delete()
        if deleted:
            logger.info(
                "cart.line_removed",
                extra={"event": "cart.line_removed", "cart_id": cart.id, "product_id": product.id},
            )
        return 0

    line, created = CartLine.objects.update_or_create(cart=cart, product=product, defaults={"qty": next_qty})
    Cart.objects.filter(id=cart.id).update(updated_at=line.updated_at)
    logger.info(
        "cart.line_set",
        extra={
            "event": "cart.line_set",
            "cart_id": cart.id,
            "product_id": product.id,
            "qty": next_qty,
            "line_created": created,
        },
    )
    return next_qty


@transaction.atomic
def clear_cart(*, session_id: str) -> int:
    """Remove every line from the session's cart. Returns the number removed."""

    _require_session(session_id)
    deleted, _ = CartLine.objects.filter(cart__session_id=session_id).delete()
    logger.info("cart.cleared", extra={"event": "cart.cleared", "session_id": session_id, "lines": deleted})
    return deleted
