"""Checkout quote endpoints."""

from common.session import is_cart_session, resolve_session_id
from common.throttling import SessionScopedRateThrottle
from drf_spectacular.utils import OpenApiExample, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .pricing import PricingConfig, compute_checkout_pricing
from .selectors import cart_subtotal, list_delivery_rules
from .serializers import CheckoutPricingSerializer, CustomerDraftSerializer, DeliveryRuleSerializer


class CheckoutQuoteView(APIView):
    """Price the session's cart for the given delivery details."""

    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "checkout"

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="Quote checkout totals",
        description=(
            "Computes delivery fee (including any express surcharge), thermal bag fee and total for the "
            "current cart. Uses configured delivery rules, or the built-in zone table when none exist."
        ),
        request=CustomerDraftSerializer,
        responses={200: CheckoutPricingSerializer},
        examples=[
            OpenApiExample(
                "Quote",
                value={
                    "subtotal": "1500.00",
                    "delivery_fee": "200.00",
                    "express_surcharge": "100.00",
                    "thermal_bag_fee": "200.00",
                    "total": "1900.00",
                    "postal_supported": True,
                    "free_delivery_target": "2000.00",
                    "rule": {
                        "postal_code": "1709",
                        "area_name": "Merville/Moonwalk",
                        "min_order_free_delivery": "2000.00",
                        "delivery_fee_below_min": "100.00",
                    },
                },
                response_only=True,
            )
        ],
    )
    def post(self, request):
        session_id = resolve_session_id(request)
        if not is_cart_session(session_id):
            return Response({"detail": "Invalid session id."}, status=status.HTTP_400_BAD_REQUEST)
        serializer = CustomerDraftSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        pricing = compute_checkout_pricing(
            cart_subtotal(session_id=session_id),
            serializer.to_draft(),
            list_delivery_rules(),
            PricingConfig.from_settings(),
        )
        return Response(CheckoutPricingSerializer(pricing).data, status=status.HTTP_200_OK)


class DeliveryRuleListView(APIView):
    """List configured delivery pricing rules."""

    permission_classes = [AllowAny]
    throttle_classes = [SessionScopedRateThrottle]
    throttle_scope = "checkout"

    @extend_schema(
        tags=["Checkout Endpoints"],
        summary="List delivery rules",
        responses={200: DeliveryRuleSerializer(many=True)},
    )
    def get(self, request):
        return Response(DeliveryRuleSerializer(list_delivery_rules(), many=True).data, status=status.HTTP_200_OK)
