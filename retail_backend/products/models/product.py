# products/models/product.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class Product(models.Model):
    """
    Represents a sellable product.

    STOCK MODEL:
    - stock_quantity is the on-hand quantity, maintained only by services
      (restocks use F() increments so concurrent writers never lose updates).
    - Every change is mirrored by an InventoryMovement row.

    NAMES:
    - name_en is required; name_si / name_ta are optional translations used on
      Sinhala / Tamil receipts (falls back to name_en).
    """

    class Unit(models.TextChoices):
        PIECE = "pc", "Piece"
        KILOGRAM = "kg", "Kilogram"
        GRAM = "g", "Gram"
        LITRE = "l", "Litre"
        PACK = "pack", "Pack"

    sku = models.CharField(max_length=64, unique=True, db_index=True)

    name_en = models.CharField(max_length=255, db_index=True)
    name_si = models.CharField(max_length=255, blank=True, default="")
    name_ta = models.CharField(max_length=255, blank=True, default="")

    unit = models.CharField(max_length=8, choices=Unit.choices, default=Unit.PIECE)

    # Current/default selling price
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)

    stock_quantity = models.DecimalField(
        max_digits=14,
        decimal_places=3,
        default=Decimal("0.000"),
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name_en"]

    def __str__(self):
        return f"{self.name_en} ({self.sku})"

    def clean(self):
        if self.unit_price is None or Decimal(self.unit_price) < 0:
            raise ValidationError("Unit price cannot be negative")
