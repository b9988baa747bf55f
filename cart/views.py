"""DRF views for cart operations.

Carts are addressed by the storefront session: the ``X-Session-Id`` header
when present, otherwise the id kept in the caller's Django session.
"""

from common.session import is_cart_session, resolve_session_id
from common.throttling import SessionScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CartReadSerializer, SetLineQtySerializer
from .services import CartError, clear_cart, set_line_qty

SESSION_PARAMETER = OpenApiParameter(
    name="X-Session-Id",
    location=OpenApiParameter.HEADER,
    required=False,
    description="Storefront session id; defaults to the id stored in the Django session",
    type=str,
)

INVALID_SESSION = {"detail": "Invalid session id."}


class CartSessionMixin:
    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]

    def cart_session_id(self, request):
        session_id = resolve_session_id(request)
        return session_id if is_cart_session(session_id) else None


class CartSessionView(CartSessionMixin, APIView):
    """Return the caller's storefront session id, creating one if needed."""

    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get storefront session id",
        parameters=[SESSION_PARAMETER],
        responses={200: inline_serializer(name="SessionIdResponse", fields={"session_id": rf_serializers.CharField()})},
        examples=[OpenApiExample("Session", value={"session_id": "0b8f7c52-5a3e-4c1e-9f0d-0a6c2b8f3e11"})],
    )
    def get(self, request):
        session_id = self.cart_session_id(request)
        if session_id is None:
            return Response(INVALID_SESSION, status=status.HTTP_400_BAD_REQUEST)
        return Response({"session_id": session_id}, status=status.HTTP_200_OK)


class CartDetailView(CartSessionMixin, APIView):
    """Return the session's cart items and totals."""

    throttle_scope = "cart"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Get cart",
        description="Returns cart lines joined with current product data, plus unit count and subtotal.",
        parameters=[SESSION_PARAMETER],
        responses={200: CartReadSerializer},
        examples=[
            OpenApiExample(
                "Cart",
                value={
                    "session_id": "0b8f7c52-5a3e-4c1e-9f0d-0a6c2b8f3e11",
                    "items": [
                        {
                            "product_id": "12",
                            "name": "Wagyu Striploin",
                            "country": "Japan",
                            "type": "Beef",
                            "size": "300g",
                            "temperature": "Frozen",
                            "thumbnail_url": "https://cdn.example.com/wagyu.jpg",
                            "unlimited_stock": False,
                            "qty_available": 8,
                            "out_of_stock": False,
                            "price": "2450.00",
                            "qty": 2,
                            "line_total": "4900.00",
                        }
                    ],
                    "total_units": 2,
                    "subtotal": "4900.00",
                },
            )
        ],
    )
    def get(self, request):
        session_id = self.cart_session_id(request)
        if session_id is None:
            return Response(INVALID_SESSION, status=status.HTTP_400_BAD_REQUEST)
        return Response(CartReadSerializer.for_session(session_id=session_id).data, status=status.HTTP_200_OK)


class CartLineView(CartSessionMixin, APIView):
    """Set the quantity of a product in the cart."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Set cart line quantity",
        description="Creates, updates or (with qty 0) removes the cart line for a product.",
        parameters=[SESSION_PARAMETER],
        request=SetLineQtySerializer,
        responses={
            200: inline_serializer(
                name="CartLineResponse",
                fields={"product_id": rf_serializers.CharField(), "qty": rf_serializers.IntegerField()},
            ),
            400: inline_serializer(name="CartMutationError", fields={"detail": rf_serializers.CharField()}),
        },
        examples=[OpenApiExample("Updated", value={"product_id": "12", "qty": 3}, response_only=True)],
    )
    def put(self, request, product_id: int):
        session_id = self.cart_session_id(request)
        if session_id is None:
            return Response(INVALID_SESSION, status=status.HTTP_400_BAD_REQUEST)
        serializer = SetLineQtySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            qty = set_line_qty(session_id=session_id, product_id=product_id, qty=serializer.validated_data["qty"])
        except CartError:
            return Response({"detail": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"product_id": str(product_id), "qty": qty}, status=status.HTTP_200_OK)


class CartClearView(CartSessionMixin, APIView):
    """Remove every line from the cart (idempotent)."""

    throttle_scope = "cart_write"

    @extend_schema(
        tags=["Cart Endpoints"],
        summary="Clear cart",
        parameters=[SESSION_PARAMETER],
        request=None,
        responses={200: inline_serializer(name="CartClearResponse", fields={"status": rf_serializers.CharField()})},
        examples=[OpenApiExample("Cleared", value={"status": "cleared"})],
    )
    def post(self, request):
        session_id = self.cart_session_id(request)
        if session_id is None:
            return Response(INVALID_SESSION, status=status.HTTP_400_BAD_REQUEST)
        try:
            clear_cart(session_id=session_id)
        except CartError:
            return Response({"detail": "Unable to update cart."}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"status": "cleared"}, status=status.HTTP_200_OK)
