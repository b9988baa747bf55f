"""Shared enumerations and choices used across apps."""

from django.db import models


class ProductStatus(models.TextChoices):
    """Canonical catalog statuses. Stored values may differ in case."""

    ACTIVE = "Active", "Active"
    DISABLED = "Disabled", "Disabled"
    ARCHIVED = "Archived", "Archived"


class OrderStatus(models.TextChoices):
    """Lifecycle statuses for orders."""

    DRAFT = "draft", "Draft"
    SUBMITTED = "submitted", "Submitted"
    PAID = "paid", "Paid"
    CANCELLED = "cancelled", "Cancelled"


class DeliveryStatus(models.TextChoices):
    """Fulfilment state, tracked apart from the order lifecycle."""

    UNDELIVERED = "undelivered", "Undelivered"
    DELIVERED = "delivered", "Delivered"


class ThemeMode(models.TextChoices):
    DARK = "dark", "Dark"
    LIGHT = "light", "Light"
