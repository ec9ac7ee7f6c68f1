# returns/services/eligibility.py

"""
======================================================
PATH: returns/services/eligibility.py
======================================================
ELIGIBILITY CHECKER

Purpose:
- Decide whether a sale may be returned at all.
- Expose per-line returnable quantities (sold - already returned).

Rules (fail closed, first match wins):
1) returns disabled by policy
2) sale does not exist
3) sale voided
4) sale older than the return window
5) nothing left to return on any line
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from sales.models import Sale

from .exceptions import SaleNotFoundError
from .ledger import ledger_for
from .policy import ReturnPolicy, resolve_policy

ZERO_QTY = Decimal("0.000")


@dataclass(frozen=True)
class EligibilityResult:
    allowed: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class ReturnableLine:
    sale_line_id: int
    product_id: int
    sku: str
    product_name: str
    quantity_sold: Decimal
    quantity_returned: Decimal
    quantity_returnable: Decimal
    unit_price: Decimal
    line_discount: Decimal
    tax: Decimal


def lines_for_sale(sale: Sale) -> list[ReturnableLine]:
    ledger = ledger_for(sale_id=sale.pk)
    result = []

    for line in sale.lines.select_related("product").order_by("id"):
        returned = ledger.get(line.pk, ZERO_QTY)
        returnable = max(Decimal(line.quantity) - returned, ZERO_QTY)
        result.append(
            ReturnableLine(
                sale_line_id=line.pk,
                product_id=line.product_id,
                sku=line.product.sku,
                product_name=line.product.name_en,
                quantity_sold=Decimal(line.quantity),
                quantity_returned=returned,
                quantity_returnable=returnable,
                unit_price=Decimal(line.unit_price),
                line_discount=Decimal(line.line_discount),
                tax=Decimal(line.tax),
            )
        )

    return result


def returnable_lines(*, sale_id) -> list[ReturnableLine]:
    sale = Sale.objects.filter(pk=sale_id).first()
    if sale is None:
        raise SaleNotFoundError()
    return lines_for_sale(sale)


def can_refund(*, sale_id, policy: Optional[ReturnPolicy] = None, now=None) -> EligibilityResult:
    policy = resolve_policy(policy)

    if not policy.enabled:
        return EligibilityResult(allowed=False, reason="Returns are disabled")

    sale = Sale.objects.filter(pk=sale_id).first()
    if sale is None:
        return EligibilityResult(allowed=False, reason="Sale not found")

    if sale.is_voided:
        return EligibilityResult(allowed=False, reason="Sale has been voided")

    now = now or timezone.now()
    if now - sale.created_at > timedelta(days=policy.return_window_days):
        return EligibilityResult(
            allowed=False,
            reason=f"Return window of {policy.return_window_days} days has expired",
        )

    if not any(line.quantity_returnable > 0 for line in lines_for_sale(sale)):
        return EligibilityResult(
            allowed=False,
            reason="All items on this sale have already been returned",
        )

    return EligibilityResult(allowed=True)
