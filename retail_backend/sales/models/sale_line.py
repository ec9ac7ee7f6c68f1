# sales/models/sale_line.py

"""
SALE LINE (IMMUTABLE SNAPSHOT)

Represents an immutable snapshot of a sold line item.

Notes:
- quantity is the quantity sold (3 dp; weighed goods are fractional)
- line_discount is the discount applied to the WHOLE line, not per unit
- returns allocate line_discount proportionally to the returned quantity
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from products.models import Product

from .sale import Sale


class SaleLine(models.Model):
    sale = models.ForeignKey(
        Sale,
        on_delete=models.PROTECT,
        related_name="lines",
    )

    product = models.ForeignKey(
        Product,
        on_delete=models.PROTECT,
        related_name="sale_lines",
    )

    quantity = models.DecimalField(max_digits=12, decimal_places=3)

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    line_discount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    tax = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    total = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def clean(self):
        if self.quantity is None or Decimal(self.quantity) <= 0:
            raise ValidationError("quantity must be greater than zero")
        if self.line_discount is not None and Decimal(self.line_discount) < 0:
            raise ValidationError("line_discount cannot be negative")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("SaleLine records are immutable")

        if self.total is None:
            self.total = (
                Decimal(self.unit_price) * Decimal(self.quantity)
                - Decimal(self.line_discount or 0)
                + Decimal(self.tax or 0)
            ).quantize(Decimal("0.01"))

        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("SaleLine records cannot be deleted")

    def __str__(self):
        return f"{self.product_id} x {self.quantity}"
