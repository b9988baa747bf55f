"""Django app configuration for checkout."""

from django.apps import AppConfig


class CheckoutConfig(AppConfig):
    """Delivery pricing rules and checkout quotes."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "checkout"
