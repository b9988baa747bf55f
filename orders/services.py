"""Order lifecycle services: checkout snapshot, status transitions, idempotency."""

import hashlib
import json
import logging
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Optional, Sequence, Tuple

from cart.models import Cart, CartLine
from cart.projection import build_cart_items
from cart.selectors import fetch_cart_view
from catalog.models import Product
from checkout.pricing import CheckoutPricing, CustomerDraft, DeliveryRule, PricingConfig, compute_checkout_pricing
from common.choices import DeliveryStatus, OrderStatus
from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import IdempotencyKey, Order, OrderLine, OrderStatusError

logger = logging.getLogger("storefront.orders")

LEGAL_TRANSITIONS = {
    OrderStatus.DRAFT: {OrderStatus.SUBMITTED, OrderStatus.CANCELLED},
    OrderStatus.SUBMITTED: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: set(),
    OrderStatus.CANCELLED: set(),
}

STATUS_ALIASES = {"pending": OrderStatus.SUBMITTED}


class CheckoutError(Exception):
    """Raised when a cart cannot be turned into an order."""


def normalize_order_status(value) -> str:
    """Return the canonical status for ``value`` or raise ``OrderStatusError``."""

    raw = str(value or "").strip().lower()
    raw = STATUS_ALIASES.get(raw, raw)
    if raw not in OrderStatus.values:
        raise OrderStatusError(f"Unknown order status: {value!r}")
    return raw


def generate_order_number(order: Order) -> str:
    return f"TP-{timezone.localtime(order.created_at):%y%m%d}-{order.id.hex[:6].upper()}"


@transaction.atomic
def create_order_from_cart(
    *,
    session_id: str,
    draft: CustomerDraft,
    rules: Optional[Sequence[DeliveryRule]] = None,
    config: Optional[PricingConfig] = None,
) -> Order:
    """Create a draft Order from the session's cart and clear the cart.

    Each line snapshots the product's current name, size, temperature and
    selling price. Carts that are empty or hold products that cannot be sold
    (inactive, unpriced, out of stock) are rejected.
    """

    items = build_cart_items(fetch_cart_view(session_id=session_id))
    if not items:
        raise CheckoutError("Cart is empty")

    products = Product.objects.select_for_update().in_bulk([int(item.product_id) for item in items])
    snapshots = []
    for item in items:
        product = products.get(int(item.product_id))
        if product is None or not product.is_purchasable:
            raise CheckoutError(f"Product {item.product_id} is not available")
        if product.out_of_stock:
            raise CheckoutError(f"Product {item.product_id} is out of stock")
        price = product.selling_price
        snapshots.append((product, price, item.qty, price * item.qty))

    subtotal = sum((line_total for *_, line_total in snapshots), Decimal("0.00"))
    pricing: CheckoutPricing = compute_checkout_pricing(subtotal, draft, rules or [], config)

    order = Order.objects.create(
        session_id=session_id,
        status=Order.STATUS_DRAFT,
        email=draft.email,
        customer=draft.snapshot(),
        placed_for_someone_else=bool(draft.placed_for_someone_else),
        postal_code=draft.normalized_postal_code,
        delivery_date=draft.delivery_date,
        delivery_slot=draft.delivery_slot,
        express_delivery=draft.express_delivery,
        add_thermal_bag=draft.add_refer_bag,
        subtotal=pricing.subtotal,
        delivery_fee=pricing.delivery_fee,
        thermal_bag_fee=pricing.thermal_bag_fee,
        total=pricing.total,
    )
    OrderLine.objects.bulk_create(
        [
            OrderLine(
                order=order,
                product=product,
                product_ref=str(product.id),
                name=product.name,
                size=product.size,
                temperature=product.temperature,
                price=price,
                qty=qty,
                line_total=line_total,
            )
            for product, price, qty, line_total in snapshots
        ]
    )
    order.number = generate_order_number(order)
    order.save(update_fields=["number"])

    CartLine.objects.filter(cart__session_id=session_id).delete()
    Cart.objects.filter(session_id=session_id).update(updated_at=timezone.now())

    logger.info(
        "order.placed",
        extra={
            "event": "order.placed",
            "order_id": str(order.id),
            "order_number": order.number,
            "lines": len(snapshots),
            "total": str(order.total),
        },
    )
    return order


def transition_order_status(order: Order, new_status) -> Order:
    """Move ``order`` to ``new_status`` if the lifecycle allows it.

    Re-applying the current status is a no-op. Unknown statuses and illegal
    transitions raise ``OrderStatusError``.
    """

    target = normalize_order_status(new_status)
    if order.status == target:
        return order
    if target not in LEGAL_TRANSITIONS.get(order.status, set()):
        raise OrderStatusError(f"Cannot move order from {order.status} to {target}")
    prev = order.status
    order.status = target
    order.save(update_fields=["status", "updated_at"])
    logger.info(
        "order.status_changed",
        extra={
            "event": "order.status_changed",
            "order_id": str(order.id),
            "status_from": prev,
            "status_to": target,
        },
    )
    return order


def update_delivery_status(order: Order, value) -> Order:
    """Record fulfilment progress. Never touches the lifecycle ``status``."""

    target = str(value or "").strip().lower()
    if target not in DeliveryStatus.values:
        raise OrderStatusError(f"Unknown delivery status: {value!r}")
    if order.delivery_status == target:
        return order
    prev = order.delivery_status
    order.delivery_status = target
    order.save(update_fields=["delivery_status", "updated_at"])
    logger.info(
        "order.delivery_status_changed",
        extra={
            "event": "order.delivery_status_changed",
            "order_id": str(order.id),
            "delivery_from": prev,
            "delivery_to": target,
        },
    )
    return order


def with_idempotency(
    *,
    key: str,
    scope: str,
    path: str,
    method: str,
    handler: Callable[[], Tuple[dict, int]],
    request_hash: Optional[str] = None,
) -> Tuple[dict, int]:
    """Run handler idempotently and persist its response for the given key and scope.

    - If a record exists and the stored `request_hash` differs from the provided one, returns 409.
    - If a record exists but response is not yet stored, returns 409 to indicate in-progress.
    - If the handler raises, the record is released so the key can be retried.
    """

    method = str(method).upper()
    path = str(path)

    try:
        with transaction.atomic():
            idem = IdempotencyKey.objects.create(
                key=key,
                scope=scope,
                path=path,
                method=method,
                request_hash=request_hash,
                expires_at=timezone.now() + timedelta(hours=24),
            )
    except IntegrityError:
        idem = IdempotencyKey.objects.get(key=key, scope=scope, path=path, method=method)
        if idem.request_hash and request_hash and idem.request_hash != request_hash:
            return {"detail": "Idempotency key reused with different request payload"}, 409
        if idem.response_json is not None and idem.response_code is not None:
            return idem.response_json, int(idem.response_code)
        return {"detail": "Request in progress"}, 409

    try:
        body, code = handler()
    except Exception:
        IdempotencyKey.objects.filter(id=idem.id).delete()
        raise
    safe_body = json.loads(json.dumps(body, default=str))
    IdempotencyKey.objects.filter(id=idem.id).update(response_json=safe_body, response_code=code)
    return body, code


def compute_request_hash(data) -> Optional[str]:
    """Canonical SHA256 of the request body (sorted keys). None when empty."""

    if not data:
        return None
    payload = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()
