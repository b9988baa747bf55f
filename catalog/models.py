from decimal import Decimal

from common.choices import ProductStatus
from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Sellable catalog item.

    ``status`` is free text maintained by merchandisers; only values equal to
    ``Active`` (any case) are visible to shoppers. A null ``selling_price``
    marks a product that is listed but not for sale yet.
    """

    STATUS_ACTIVE = ProductStatus.ACTIVE
    STATUS_DISABLED = ProductStatus.DISABLED
    STATUS_ARCHIVED = ProductStatus.ARCHIVED

    name = models.CharField(max_length=200)
    long_name = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=64, blank=True)
    cut = models.CharField(max_length=64, blank=True)
    preparation = models.CharField(max_length=64, blank=True)
    packaging = models.CharField(max_length=64, blank=True)
    size_g = models.PositiveIntegerField(null=True, blank=True)
    size = models.CharField(max_length=64, blank=True)
    temperature = models.CharField(max_length=32, blank=True)
    country_of_origin = models.CharField(max_length=64, blank=True)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    product_cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    thumbnail_url = models.URLField(max_length=500, blank=True)
    keywords = models.TextField(blank=True)
    status = models.CharField(max_length=32, default=STATUS_ACTIVE, db_index=True)
    unlimited_stock = models.BooleanField(default=False)
    qty_on_hand = models.IntegerField(default=0)
    qty_allocated = models.IntegerField(default=0)
    sort_order = models.IntegerField(null=True, blank=True)

    class Meta:
        ordering = [models.F("sort_order").asc(nulls_last=True), "id"]
        constraints = [
            models.CheckConstraint(
                name="product_price_non_negative",
                condition=models.Q(selling_price__isnull=True) | models.Q(selling_price__gte=0),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return self.name

    @property
    def is_active(self) -> bool:
        return (self.status or "").strip().lower() == "active"

    @property
    def is_purchasable(self) -> bool:
        return self.is_active and self.selling_price is not None

    @property
    def qty_available(self) -> int:
        return max(int(self.qty_on_hand or 0) - int(self.qty_allocated or 0), 0)

    @property
    def out_of_stock(self) -> bool:
        return not self.unlimited_stock and self.qty_available <= 0

    @property
    def price(self) -> Decimal:
        return self.selling_price if self.selling_price is not None else Decimal("0.00")


class ProductImage(TimeStampedModel):
    """Gallery image for a product; the lowest ``sort_order`` is primary."""

    product = models.ForeignKey(Product, related_name="images", on_delete=models.CASCADE)
    url = models.URLField(max_length=500)
    sort_order = models.IntegerField(default=0)

    class Meta:
        ordering = ["sort_order", "id"]
        indexes = [
            models.Index(fields=["product", "sort_order"]),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"ProductImage#{self.id} product={self.product_id}"
