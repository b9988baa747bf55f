"""Cart app models.

A cart belongs to one storefront session and maps products to quantities.
Prices are not stored on lines; the cart view always reflects the current
catalog price.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Cart(TimeStampedModel):
    """Shopping cart bound to a storefront session id."""

    session_id = models.CharField(max_length=64, unique=True)

    class Meta:
        ordering = ["-updated_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"Cart#{self.id} ({self.session_id})"


class CartLine(TimeStampedModel):
    """Quantity of one product in a cart."""

    cart = models.ForeignKey(Cart, related_name="lines", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="cart_lines", on_delete=models.CASCADE)
    qty = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["cart", "product"], name="unique_product_per_cart"),
            models.CheckConstraint(
                name="cart_line_qty_positive",
                condition=models.Q(qty__gte=1),
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"CartLine#{self.id} cart={self.cart_id} product={self.product_id} qty={self.qty}"
