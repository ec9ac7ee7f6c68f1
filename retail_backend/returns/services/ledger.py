# returns/services/ledger.py

"""
======================================================
PATH: returns/services/ledger.py
======================================================
RETURN LEDGER READER

Purpose:
- Answer "how much of each sale line has already been returned?"

Rules:
- Derived from ReturnLine rows on every call (no cache, no stored counter),
  so two validations issued close together both see the current state.
- A sale with no returns (or an unknown sale id) yields an empty mapping.
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Sum

from returns.models import ReturnLine

from .amounts import THREEPLACES


def ledger_for(*, sale_id) -> dict[int, Decimal]:
    """
    Returns {sale_line_id: returned_quantity} for the sale.
    """
    rows = (
        ReturnLine.objects.filter(return_transaction__original_sale_id=sale_id)
        .values("sale_line_id")
        .annotate(returned=Sum("quantity"))
        .order_by()
    )
    return {
        row["sale_line_id"]: Decimal(row["returned"] or 0).quantize(THREEPLACES)
        for row in rows
    }


def returned_quantity(*, sale_id, sale_line_id) -> Decimal:
    return ledger_for(sale_id=sale_id).get(int(sale_line_id), Decimal("0.000"))
