# returns/models/return_transaction.py

"""
======================================================
PATH: returns/models/return_transaction.py
======================================================
RETURN TRANSACTION (HEADER)

Purpose:
- One customer return against exactly one original Sale.
- Holds who processed it, who authorized it, and how the money went back.

Design guarantees:
- Append-only: created once by returns.services.writer, never edited or deleted
- Corrections are new returns, never in-place edits
- refund_cash + refund_card + refund_wallet + refund_store_credit equals the
  sum of its lines' line_refund (enforced by the writer)
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL

RECEIPT_PREFIX = "RET-"


class ReturnTransaction(models.Model):
    class RefundMethod(models.TextChoices):
        CASH = "CASH", "Cash"
        CARD = "CARD", "Card"
        WALLET = "WALLET", "Wallet"

    class Language(models.TextChoices):
        EN = "EN", "English"
        SI = "SI", "Sinhala"
        TA = "TA", "Tamil"

    original_sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.PROTECT,
        related_name="returns",
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    cashier = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="returns_processed",
    )

    # Present only when the refund needed a manager's approval
    manager = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="returns_authorized",
    )

    refund_method = models.CharField(
        max_length=10,
        choices=RefundMethod.choices,
        default=RefundMethod.CASH,
    )

    refund_cash = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    refund_card = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    refund_wallet = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    refund_store_credit = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))

    reason_summary = models.CharField(max_length=255, blank=True, default="")

    language = models.CharField(max_length=2, choices=Language.choices, default=Language.EN)

    terminal_name = models.CharField(max_length=64, blank=True, default="")

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["original_sale", "created_at"], name="returns_rt_sale_idx"),
            models.Index(fields=["refund_method"], name="returns_rt_method_idx"),
        ]

    # --------------------------------------------------
    # IMMUTABILITY
    # --------------------------------------------------

    def clean(self):
        for field in ("refund_cash", "refund_card", "refund_wallet", "refund_store_credit"):
            if Decimal(getattr(self, field) or 0) < 0:
                raise ValidationError(f"{field} cannot be negative")

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("ReturnTransaction records are immutable")

        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ReturnTransaction records cannot be deleted")

    # --------------------------------------------------
    # READ HELPERS
    # --------------------------------------------------

    @property
    def receipt_id(self) -> str:
        return format_receipt_id(self.pk)

    @property
    def refund_total(self) -> Decimal:
        return (
            Decimal(self.refund_cash)
            + Decimal(self.refund_card)
            + Decimal(self.refund_wallet)
            + Decimal(self.refund_store_credit)
        )

    def __str__(self):
        return f"{self.receipt_id} | sale={self.original_sale_id} | {self.refund_total}"


def format_receipt_id(return_id) -> str:
    return f"{RECEIPT_PREFIX}{int(return_id):06d}"
