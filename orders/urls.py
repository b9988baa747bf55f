"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    OrderCheckoutView,
    OrderDetailView,
    OrderListView,
    OrderPaymentWebhookView,
    OrderStatusView,
    SendOrderEmailView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("checkout/", OrderCheckoutView.as_view(), name="order-checkout"),
    path("send-order-email/", SendOrderEmailView.as_view(), name="send-order-email"),
    path("webhooks/payment/", OrderPaymentWebhookView.as_view(), name="order-webhook-payment"),
    path("<uuid:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<uuid:order_id>/status/", OrderStatusView.as_view(), name="order-status"),
]
