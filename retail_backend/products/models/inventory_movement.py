# products/models/inventory_movement.py

"""
INVENTORY LEDGER

Immutable inventory ledger entry.

GUARANTEES:
- Append-only (no updates, no deletes)
- quantity is a signed delta (+ adds to on-hand, - removes)
- RETURN movements carry a positive delta and reference the ReturnLine
  that produced them
"""

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from .product import Product


class InventoryMovement(models.Model):
    class MovementType(models.TextChoices):
        RECEIVE = "RECEIVE", "Stock Received"
        ADJUST = "ADJUST", "Manual Adjustment"
        WASTE = "WASTE", "Waste / Write-off"
        RETURN = "RETURN", "Customer Return"

    product = models.ForeignKey(
        Product, on_delete=models.PROTECT, related_name="movements"
    )

    movement_type = models.CharField(max_length=10, choices=MovementType.choices)

    quantity = models.DecimalField(max_digits=14, decimal_places=3)

    return_line = models.ForeignKey(
        "returns.ReturnLine",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="inventory_movements",
    )

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="inventory_movements",
    )

    note = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["product", "created_at"], name="products_mv_product_idx"),
            models.Index(fields=["movement_type"], name="products_mv_type_idx"),
        ]

    def clean(self):
        if self.quantity is None or Decimal(self.quantity) == 0:
            raise ValidationError("quantity cannot be zero")

        if self.movement_type == self.MovementType.RETURN:
            if not self.return_line_id:
                raise ValidationError("RETURN movements must reference a return line")
            if Decimal(self.quantity) <= 0:
                raise ValidationError("RETURN movements must add stock")
        elif self.return_line_id:
            raise ValidationError("Only RETURN movements may reference a return line")

        if self.movement_type == self.MovementType.WASTE and Decimal(self.quantity) > 0:
            raise ValidationError("WASTE movements must remove stock")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("InventoryMovement records are immutable")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(
            "InventoryMovement records are immutable and cannot be deleted"
        )

    def __str__(self):
        return f"{self.product_id} | {self.movement_type} | {self.quantity}"
