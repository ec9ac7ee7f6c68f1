# returns/models/return_line.py

"""
======================================================
PATH: returns/models/return_line.py
======================================================
RETURN LINE (RETURN LEDGER ROW)

Purpose:
- Immutable record of a returned quantity for a specific SaleLine.
- The sum of ReturnLine.quantity per sale_line is the return ledger;
  there is no separate running counter to drift out of sync.

Design guarantees:
- Append-only (no updates, no deletes)
- Multiple returns per sale line allowed
- Over-returning is prevented by the validator, re-run inside the writer's
  transaction
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from .return_transaction import ReturnTransaction


class ReturnLine(models.Model):
    class ReasonCode(models.TextChoices):
        DAMAGED = "DAMAGED", "Damaged"
        EXPIRED = "EXPIRED", "Expired"
        WRONG_ITEM = "WRONG_ITEM", "Wrong item"
        CUSTOMER_CHANGE = "CUSTOMER_CHANGE", "Customer changed mind"
        OTHER = "OTHER", "Other"

    return_transaction = models.ForeignKey(
        ReturnTransaction,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    sale_line = models.ForeignKey(
        "sales.SaleLine",
        on_delete=models.PROTECT,
        related_name="return_lines",
    )

    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="return_lines",
    )

    quantity = models.DecimalField(max_digits=12, decimal_places=3)

    # Snapshot of the original sale line's unit price
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    line_refund = models.DecimalField(max_digits=12, decimal_places=2)

    reason_code = models.CharField(
        max_length=20,
        choices=ReasonCode.choices,
        default=ReasonCode.OTHER,
    )

    restock = models.BooleanField(default=True)

    class Meta:
        ordering = ["id"]
        indexes = [
            models.Index(fields=["sale_line"], name="returns_rl_sale_line_idx"),
        ]

    def clean(self):
        if self.quantity is None or Decimal(self.quantity) <= 0:
            raise ValidationError("Return quantity must be greater than zero")

        if self.line_refund is not None and Decimal(self.line_refund) < 0:
            raise ValidationError("line_refund cannot be negative")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("ReturnLine records are immutable")

        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ReturnLine records cannot be deleted")

    def __str__(self):
        return f"Return line | sale_line={self.sale_line_id} | qty={self.quantity}"
