# sales/models/sale.py

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class Sale(models.Model):
    """
    Represents a completed POS transaction (the original sale a return points to).

    GUARANTEES:
    - Immutable financial record once saved
    - The only allowed update is the one-time COMPLETED -> VOIDED transition
      (status, voided_at, voided_by), see sales.services.lifecycle.void_sale
    - Returns never modify the sale; they are recorded in the returns app
    """

    STATUS_COMPLETED = "COMPLETED"
    STATUS_VOIDED = "VOIDED"

    STATUS_CHOICES = [
        (STATUS_COMPLETED, "Completed"),
        (STATUS_VOIDED, "Voided"),
    ]

    class PriceTier(models.TextChoices):
        RETAIL = "RETAIL", "Retail"
        WHOLESALE = "WHOLESALE", "Wholesale"
        CREDIT = "CREDIT", "Credit"
        OTHER = "OTHER", "Other"

    class PaymentMethod(models.TextChoices):
        CASH = "CASH", "Cash"
        CARD = "CARD", "Card"
        WALLET = "WALLET", "Wallet"

    class Language(models.TextChoices):
        EN = "EN", "English"
        SI = "SI", "Sinhala"
        TA = "TA", "Tamil"

    invoice_number = models.CharField(
        max_length=64,
        unique=True,
        help_text="Invoice / receipt number printed at checkout",
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    cashier = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="sales",
        help_text="Cashier who processed the sale",
    )

    customer_name = models.CharField(max_length=255, blank=True, default="")

    price_tier = models.CharField(
        max_length=16, choices=PriceTier.choices, default=PriceTier.RETAIL
    )
    payment_method = models.CharField(
        max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )

    subtotal_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    tax_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )

    language = models.CharField(
        max_length=2, choices=Language.choices, default=Language.EN
    )
    terminal_name = models.CharField(max_length=64, blank=True, default="")

    status = models.CharField(
        max_length=16,
        choices=STATUS_CHOICES,
        default=STATUS_COMPLETED,
    )
    voided_at = models.DateTimeField(null=True, blank=True)
    voided_by = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales_voided",
        help_text="Manager who authorized the void",
    )

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="sales_sale_status_idx"),
        ]

    _MUTABLE_ON_VOID = ("status", "voided_at", "voided_by_id")

    @property
    def is_voided(self) -> bool:
        return self.status == self.STATUS_VOIDED

    def _validate_immutable(self, previous: "Sale"):
        if not (
            previous.status == self.STATUS_COMPLETED
            and self.status == self.STATUS_VOIDED
        ):
            raise ValidationError(
                f"Sale is immutable once {previous.status}. "
                f"Status change {previous.status} -> {self.status} is not allowed."
            )

        for field in self._meta.concrete_fields:
            if field.attname in self._MUTABLE_ON_VOID:
                continue
            if getattr(self, field.attname) != getattr(previous, field.attname):
                raise ValidationError(
                    f"Sale is immutable once {previous.status}. "
                    f"Field '{field.name}' cannot be changed."
                )

    def save(self, *args, **kwargs):
        if not self._state.adding:
            previous = Sale.objects.filter(pk=self.pk).first()
            if previous is not None:
                self._validate_immutable(previous)

        if self.status == self.STATUS_VOIDED and not self.voided_at:
            self.voided_at = timezone.now()

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Sale records cannot be deleted")

    def __str__(self):
        return f"{self.invoice_number} | {self.total_amount}"
