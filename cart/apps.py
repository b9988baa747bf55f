"""Django app configuration for the Cart app."""

from django.apps import AppConfig


class CartConfig(AppConfig):
    """Server-side carts keyed by storefront session id."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "cart"
    verbose_name = "Carts"
