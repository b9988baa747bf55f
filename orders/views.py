"""Orders API endpoints.

Checkout submission, order lookup, externally driven status changes and the
order confirmation email.
"""

import uuid

from checkout.pricing import PricingConfig
from checkout.selectors import list_delivery_rules
from checkout.serializers import CheckoutSubmissionSerializer
from common.session import is_cart_session, resolve_session_id
from common.throttling import SessionScopedRateThrottle
from django.db import transaction
from django.http import Http404
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .emails import OrderEmailError, OrderEmailRequest, notify_order_placed, send_order_email
from .models import Order, OrderStatusError
from .serializers import OrderEmailPayloadSerializer, OrderSerializer, OrderStatusUpdateSerializer
from .services import (
    CheckoutError,
    compute_request_hash,
    create_order_from_cart,
    normalize_order_status,
    transition_order_status,
    update_delivery_status,
    with_idempotency,
)

IDEMPOTENCY_PARAMETER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Makes the request idempotent within scope+path+method",
    type=str,
)


def _get_order_or_404(order_id) -> Order:
    try:
        return Order.objects.prefetch_related("lines").get(pk=uuid.UUID(str(order_id)))
    except (Order.DoesNotExist, ValueError):
        raise Http404("Not found.")


def _run_idempotent(request, scope: str, handler):
    idem_key = request.headers.get("Idempotency-Key")
    if not idem_key:
        return handler()
    return with_idempotency(
        key=idem_key,
        scope=scope,
        path=str(request.path),
        method=str(request.method),
        request_hash=compute_request_hash(getattr(request, "data", None)),
        handler=handler,
    )


class OrderCheckoutView(APIView):
    """Place an order from the session's cart.

    Idempotent when `Idempotency-Key` is provided. Returns 409 on key reuse with different payload.
    """

    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Checkout",
        description=(
            "Validates the customer draft, snapshots the cart into a new order, clears the cart and "
            "sends the confirmation email (best effort)."
        ),
        parameters=[IDEMPOTENCY_PARAMETER],
        request=CheckoutSubmissionSerializer,
        responses={
            201: OrderSerializer,
            400: inline_serializer(name="CheckoutError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[
            OpenApiExample("Checkout Error", value={"detail": "Unable to place order."}, response_only=True),
        ],
    )
    def post(self, request):
        session_id = resolve_session_id(request)
        if not is_cart_session(session_id):
            return Response({"detail": "Invalid session id."}, status=400)
        rules = list_delivery_rules()
        serializer = CheckoutSubmissionSerializer(data=request.data, context={"rules": rules})
        serializer.is_valid(raise_exception=True)
        draft = serializer.to_draft()

        def _handler():
            try:
                order = create_order_from_cart(
                    session_id=session_id, draft=draft, rules=rules, config=PricingConfig.from_settings()
                )
            except CheckoutError as exc:
                return {"detail": "Unable to place order.", "reason": str(exc)}, 400
            notify_order_placed(order, origin=request.headers.get("Origin"))
            return OrderSerializer(order, context={"request": request}).data, 201

        body, code = _run_idempotent(request, f"session:{session_id}", _handler)
        return Response(body, status=code)


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"


class OrderListView(generics.ListAPIView):
    """List the current session's orders, newest first.

    Orders placed for someone else are only listed for staff callers.

    Filters:
    - `status`: one of the OrderStatus values
    - `number`: exact match of order number
    """

    permission_classes = [AllowAny]
    serializer_class = OrderSerializer
    pagination_class = DefaultPagination
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "orders"

    def get_queryset(self):
        session_id = resolve_session_id(self.request)
        if not is_cart_session(session_id):
            return Order.objects.none()
        qs = Order.objects.filter(session_id=session_id).order_by("-created_at").prefetch_related("lines")
        if not getattr(self.request.user, "is_staff", False):
            qs = qs.exclude(placed_for_someone_else=True)
        status = self.request.query_params.get("status")
        if status:
            try:
                qs = qs.filter(status=normalize_order_status(status))
            except OrderStatusError:
                return Order.objects.none()
        number = self.request.query_params.get("number")
        if number:
            qs = qs.filter(number=number)
        return qs

    @extend_schema(
        tags=["Orders"],
        summary="List orders",
        description="List the current session's orders with optional filters and pagination.",
        parameters=[
            OpenApiParameter(name="status", description="Order status filter", required=False, type=str),
            OpenApiParameter(name="number", description="Order number exact match", required=False, type=str),
            OpenApiParameter(name="page", description="Page number", required=False, type=int),
            OpenApiParameter(name="page_size", description="Items per page", required=False, type=int),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class OrderDetailView(APIView):
    """Retrieve a single order by id (the target of confirmation email links)."""

    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "orders"

    @extend_schema(tags=["Orders"], summary="Get order detail", responses={200: OrderSerializer})
    def get(self, request, order_id):
        order = _get_order_or_404(order_id)
        return Response(OrderSerializer(order, context={"request": request}).data)


class OrderStatusView(APIView):
    """Apply externally driven status changes (staff only).

    `status` follows the order lifecycle; `delivery_status` records fulfilment
    and is independent of it. Both may be sent together.
    """

    permission_classes = [IsAdminUser]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Change order status",
        description=(
            "Allowed moves: draft to submitted or cancelled, submitted to paid or cancelled. "
            "Re-applying the current status is a no-op; `pending` is accepted as `submitted`. "
            "`delivery_status` (undelivered or delivered) is updated without touching `status`."
        ),
        parameters=[IDEMPOTENCY_PARAMETER],
        request=OrderStatusUpdateSerializer,
        responses={200: OrderSerializer},
        examples=[
            OpenApiExample("Submit", value={"status": "submitted"}, request_only=True),
            OpenApiExample("Delivered", value={"delivery_status": "delivered"}, request_only=True),
            OpenApiExample("Mutation Error", value={"detail": "Unable to update order."}, response_only=True),
        ],
    )
    def post(self, request, order_id):
        order = _get_order_or_404(order_id)
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data

        def _handler():
            try:
                with transaction.atomic():
                    updated = order
                    if data.get("status"):
                        updated = transition_order_status(updated, data["status"])
                    if data.get("delivery_status"):
                        updated = update_delivery_status(updated, data["delivery_status"])
            except OrderStatusError as exc:
                order.refresh_from_db()
                return {"detail": "Unable to update order.", "reason": str(exc)}, 400
            return OrderSerializer(updated, context={"request": request}).data, 200

        body, code = _run_idempotent(request, f"user:{request.user.id}", _handler)
        return Response(body, status=code)


class OrderPaymentWebhookView(APIView):
    """Webhook endpoint to mark orders as paid from payment provider events.

    In real deployments, verify signatures and restrict by IP or shared
    secret. Idempotent when `Idempotency-Key` header is provided.
    """

    permission_classes = [AllowAny]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Payment webhook",
        description=(
            "Consumes a payment provider webhook and marks a submitted order as paid.\n"
            "Expects JSON with `order_id` and `event`='payment_succeeded'."
        ),
        parameters=[IDEMPOTENCY_PARAMETER],
        examples=[
            OpenApiExample(
                "Webhook Success",
                value={"order_id": "0f4b2a8e-3f1d-4a55-9a8e-1c2d3e4f5a6b", "event": "payment_succeeded"},
                request_only=True,
            ),
        ],
    )
    def post(self, request):
        data = getattr(request, "data", {}) or {}
        order_id = data.get("order_id")
        event = data.get("event")
        if not order_id or not event:
            return Response({"detail": "Missing order_id or event"}, status=400)
        if str(event).lower() not in {"payment_succeeded", "payment.succeeded"}:
            return Response({"detail": "Unsupported event"}, status=400)
        order = _get_order_or_404(order_id)

        def _handler():
            try:
                updated = transition_order_status(order, Order.STATUS_PAID)
            except OrderStatusError:
                return {"detail": "Unable to update order."}, 400
            return OrderSerializer(updated, context={"request": request}).data, 200

        body, code = _run_idempotent(request, "webhook", _handler)
        return Response(body, status=code)


class SendOrderEmailView(APIView):
    """Send the order confirmation email for an order placed on the storefront."""

    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "orders_write"

    @extend_schema(
        tags=["Orders"],
        summary="Send order confirmation email",
        request=OrderEmailPayloadSerializer,
        responses={
            200: inline_serializer(name="OrderEmailSent", fields={"ok": rf_serializers.BooleanField()}),
            400: inline_serializer(
                name="OrderEmailFailed",
                fields={
                    "ok": rf_serializers.BooleanField(),
                    "error": rf_serializers.CharField(),
                    "details": rf_serializers.CharField(required=False),
                },
            ),
        },
        examples=[
            OpenApiExample(
                "Request",
                value={
                    "email": "juan@example.com",
                    "orderId": "0f4b2a8e-3f1d-4a55-9a8e-1c2d3e4f5a6b",
                    "orderNumber": "TP-251017-0F4B2A",
                    "name": "Juan",
                },
                request_only=True,
            ),
            OpenApiExample("Sent", value={"ok": True}, response_only=True),
            OpenApiExample(
                "Provider failure",
                value={"ok": False, "error": "Resend request failed.", "details": "{\"message\": \"...\"}"},
                response_only=True,
                status_codes=["502"],
            ),
        ],
    )
    def post(self, request):
        payload = request.data if hasattr(request.data, "get") else {}
        try:
            send_order_email(OrderEmailRequest.from_payload(payload))
        except OrderEmailError as exc:
            body = {"ok": False, "error": exc.message}
            if exc.details is not None:
                body["details"] = exc.details
            return Response(body, status=exc.status_code)
        return Response({"ok": True})
