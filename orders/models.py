import uuid
from decimal import Decimal

from common.choices import DeliveryStatus, OrderStatus
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class OrderStatusError(ValueError):
    """Raised for unknown order statuses and illegal transitions."""


class Order(TimeStampedModel):
    """Order placed from a storefront session.

    Customer details, lines and pricing are snapshots taken at checkout so
    later catalog edits never change a placed order. The UUID primary key
    doubles as the capability in order deep links.
    """

    STATUS_DRAFT = OrderStatus.DRAFT
    STATUS_SUBMITTED = OrderStatus.SUBMITTED
    STATUS_PAID = OrderStatus.PAID
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_CHOICES = OrderStatus.choices

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.CharField(max_length=32, unique=True, null=True, blank=True, db_index=True)
    session_id = models.CharField(max_length=64, db_index=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_DRAFT, db_index=True)
    delivery_status = models.CharField(
        max_length=16, choices=DeliveryStatus.choices, default=DeliveryStatus.UNDELIVERED, db_index=True
    )
    email = models.EmailField(blank=True)
    customer = models.JSONField(default=dict, blank=True)
    placed_for_someone_else = models.BooleanField(default=False)
    postal_code = models.CharField(max_length=16, blank=True)
    delivery_date = models.DateField(null=True, blank=True)
    delivery_slot = models.CharField(max_length=8, blank=True)
    express_delivery = models.BooleanField(default=False)
    add_thermal_bag = models.BooleanField(default=False)
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    delivery_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    thermal_bag_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    total = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["session_id", "status", "created_at"]),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order {self.number or self.id} status={self.status}"

    def save(self, *args, **kwargs):
        if self.status not in OrderStatus.values:
            raise OrderStatusError(f"Unknown order status: {self.status!r}")
        if self.delivery_status not in DeliveryStatus.values:
            raise OrderStatusError(f"Unknown delivery status: {self.delivery_status!r}")
        super().save(*args, **kwargs)

    @property
    def display_name(self) -> str:
        return (self.customer or {}).get("full_name") or ""


class OrderLine(TimeStampedModel):
    """Snapshot of one purchased product. Immutable once stored."""

    order = models.ForeignKey(Order, related_name="lines", on_delete=models.CASCADE)
    product = models.ForeignKey(
        "catalog.Product", related_name="order_lines", null=True, blank=True, on_delete=models.SET_NULL
    )
    product_ref = models.CharField(max_length=64)
    name = models.CharField(max_length=200)
    size = models.CharField(max_length=64, blank=True)
    temperature = models.CharField(max_length=32, blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    qty = models.PositiveIntegerField()
    line_total = models.DecimalField(max_digits=14, decimal_places=2)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(name="orderline_price_non_negative", condition=models.Q(price__gte=0)),
            models.CheckConstraint(name="orderline_qty_positive", condition=models.Q(qty__gte=1)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"OrderLine#{self.id} order={self.order_id} product={self.product_ref} qty={self.qty}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Order lines cannot be changed once placed")
        super().save(*args, **kwargs)


class IdempotencyKey(TimeStampedModel):
    """Stores idempotent request results to prevent duplicate processing."""

    key = models.CharField(max_length=128)
    scope = models.CharField(max_length=128)
    path = models.CharField(max_length=255)
    method = models.CharField(max_length=16)
    request_hash = models.CharField(max_length=64, null=True, blank=True)
    response_code = models.IntegerField(null=True, blank=True)
    response_json = models.JSONField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["key", "scope", "path", "method"], name="uniq_idem_scope_path_method"),
        ]
