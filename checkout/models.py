from decimal import Decimal

from django.db import models

from .pricing import DeliveryRule


class DeliveryPricing(models.Model):
    """Delivery fee rule for a postal code, optionally narrowed to an area."""

    postal_code = models.CharField(max_length=16, db_index=True)
    area_name = models.CharField(max_length=120, blank=True)
    min_order_free_delivery_php = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    delivery_fee_below_min_php = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["postal_code", "area_name"]
        verbose_name = "delivery pricing rule"
        constraints = [
            models.CheckConstraint(
                name="delivery_pricing_amounts_non_negative",
                condition=models.Q(min_order_free_delivery_php__gte=0) & models.Q(delivery_fee_below_min_php__gte=0),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.postal_code} {self.area_name}".strip()

    def as_rule(self) -> DeliveryRule:
        return DeliveryRule(
            postal_code=self.postal_code,
            area_name=self.area_name or "",
            min_order_free_delivery=self.min_order_free_delivery_php,
            delivery_fee_below_min=self.delivery_fee_below_min_php,
        )
