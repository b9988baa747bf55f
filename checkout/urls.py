"""Checkout URL routes (v1)."""

from django.urls import path

from .views import CheckoutQuoteView, DeliveryRuleListView

app_name = "checkout"

urlpatterns = [
    path("quote/", CheckoutQuoteView.as_view(), name="checkout-quote"),
    path("delivery-rules/", DeliveryRuleListView.as_view(), name="delivery-rules"),
]
