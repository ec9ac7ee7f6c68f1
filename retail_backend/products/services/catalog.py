# products/services/catalog.py

"""
PRODUCT CATALOG LOOKUP

Read-only helpers used by receipts, the returns screens and reports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from products.models import Product

LANGUAGE_FIELDS = {
    "EN": "name_en",
    "SI": "name_si",
    "TA": "name_ta",
}


@dataclass(frozen=True)
class ProductSummary:
    id: int
    sku: str
    name_en: str
    name_si: str
    name_ta: str
    unit: str


def summarize(product: Product) -> ProductSummary:
    return ProductSummary(
        id=product.pk,
        sku=product.sku,
        name_en=product.name_en,
        name_si=product.name_si,
        name_ta=product.name_ta,
        unit=product.unit,
    )


def product_summary(product_id) -> Optional[ProductSummary]:
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        return None
    return summarize(product)


def localized_name(product, language: str = "EN") -> str:
    """Product name in the receipt language, falling back to English."""
    field = LANGUAGE_FIELDS.get((language or "EN").upper(), "name_en")
    return getattr(product, field, "") or product.name_en
