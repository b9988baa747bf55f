"""Django app configuration for orders."""

from django.apps import AppConfig


class OrdersConfig(AppConfig):
    """Placed orders, their line snapshots and confirmation emails."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "orders"
