"""Cart URL routes (v1)."""

from django.urls import path

from .views import CartClearView, CartDetailView, CartLineView, CartSessionView

app_name = "cart"

urlpatterns = [
    path("", CartDetailView.as_view(), name="cart-detail"),
    path("session/", CartSessionView.as_view(), name="cart-session"),
    path("lines/<int:product_id>/", CartLineView.as_view(), name="cart-line"),
    path("clear/", CartClearView.as_view(), name="cart-clear"),
]
