"""Order confirmation email delivered through the Resend HTTP API.

Links point at the storefront order page (``/order?id=<order id>``) on the
caller-supplied origin, defaulting to ``STOREFRONT_ORIGIN``.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import quote

import httpx
from django.conf import settings
from django.template.loader import render_to_string

logger = logging.getLogger("storefront.orders")


class OrderEmailError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class OrderEmailValidationError(OrderEmailError):
    status_code = 400


class OrderEmailConfigurationError(OrderEmailError):
    status_code = 500


class OrderEmailDeliveryError(OrderEmailError):
    status_code = 502


@dataclass(frozen=True)
class OrderEmailRequest:
    email: str
    order_id: str
    name: Optional[str] = None
    order_number: Optional[str] = None
    origin: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Mapping) -> "OrderEmailRequest":
        def text(*keys) -> str:
            for key in keys:
                value = payload.get(key)
                if value is not None:
                    return str(value).strip()
            return ""

        return cls(
            email=text("email"),
            order_id=text("orderId", "order_id"),
            name=text("name") or None,
            order_number=text("orderNumber", "order_number") or None,
            origin=text("origin") or None,
        )

    @classmethod
    def for_order(cls, order, *, origin: Optional[str] = None) -> "OrderEmailRequest":
        return cls(
            email=order.email or "",
            order_id=str(order.id),
            name=order.display_name or None,
            order_number=order.number,
            origin=origin,
        )


def build_order_url(origin: Optional[str], order_id: str) -> str:
    base = (origin or "").strip() or settings.STOREFRONT_ORIGIN
    return f"{base.rstrip('/')}/order?id={quote(str(order_id), safe='')}"


def order_label(order_number: Optional[str]) -> str:
    return f"Order {order_number}" if order_number else "Your order"


def render_order_email(request: OrderEmailRequest) -> dict:
    """Return the subject and HTML body for an order confirmation."""

    label = order_label(request.order_number)
    html = render_to_string(
        "orders/emails/order_placed.html",
        {
            "display_name": request.name or "there",
            "order_label": label,
            "order_url": build_order_url(request.origin, request.order_id),
        },
    )
    return {"subject": f"{label} has been placed", "html": html}


def send_order_email(request: OrderEmailRequest, *, client: Optional[httpx.Client] = None) -> None:
    """Send the order confirmation. Raises ``OrderEmailError`` subclasses.

    Validation happens before any provider call. Provider failures are not
    retried.
    """

    if not request.email:
        raise OrderEmailValidationError("Missing email.")
    if not request.order_id:
        raise OrderEmailValidationError("Missing order id.")
    api_key = settings.RESEND_API_KEY
    if not api_key:
        raise OrderEmailConfigurationError("Missing RESEND_API_KEY.")

    payload = {"from": settings.RESEND_FROM, "to": request.email, **render_order_email(request)}
    cc = [address for address in settings.ADMIN_CC_EMAILS if address]
    if cc:
        payload["cc"] = cc
    headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}

    try:
        if client is None:
            with httpx.Client(timeout=settings.RESEND_TIMEOUT_SECONDS) as http:
                response = http.post(settings.RESEND_API_URL, json=payload, headers=headers)
        else:
            response = client.post(settings.RESEND_API_URL, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning(
            "order.email_transport_error",
            extra={"event": "order.email_transport_error", "order_id": request.order_id},
        )
        raise OrderEmailDeliveryError("Resend request failed.", details=str(exc)) from exc

    if not response.is_success:
        logger.warning(
            "order.email_rejected",
            extra={
                "event": "order.email_rejected",
                "order_id": request.order_id,
                "status_code": response.status_code,
            },
        )
        raise OrderEmailDeliveryError("Resend request failed.", details=response.text)

    logger.info("order.email_sent", extra={"event": "order.email_sent", "order_id": request.order_id})


def notify_order_placed(order, *, origin: Optional[str] = None) -> bool:
    """Fire-and-forget confirmation after checkout. Returns True when sent."""

    try:
        send_order_email(OrderEmailRequest.for_order(order, origin=origin))
    except OrderEmailError as exc:
        logger.warning(
            "order.email_failed",
            extra={"event": "order.email_failed", "order_id": str(order.id), "error": exc.message},
        )
        return False
    return True
