# returns/services/history.py

"""
======================================================
PATH: returns/services/history.py
======================================================
REFUND HISTORY

Purpose:
- List committed returns for the back office / reports screen.

Rules:
- Newest first
- refund_net is the header tender total (equal to the sum of its lines)
- restock_count counts lines that went back on the shelf
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Mapping, Optional

from django.db.models import Count, DecimalField, ExpressionWrapper, F, Q, QuerySet

from returns.filters import ReturnTransactionFilter
from returns.models import ReturnTransaction

from .exceptions import ReturnValidationError


@dataclass(frozen=True)
class ReturnSummary:
    id: int
    receipt_id: str
    refund_datetime: datetime
    original_invoice: str
    customer_name: str
    cashier_name: str
    manager_name: Optional[str]
    terminal: str
    method: str
    restock_count: int
    refund_net: Decimal
    reason: str


def history_queryset() -> QuerySet:
    refund_net = ExpressionWrapper(
        F("refund_cash") + F("refund_card") + F("refund_wallet") + F("refund_store_credit"),
        output_field=DecimalField(max_digits=14, decimal_places=2),
    )
    return (
        ReturnTransaction.objects
        .select_related("original_sale", "cashier", "manager")
        .annotate(
            refund_net=refund_net,
            restock_count=Count("lines", filter=Q(lines__restock=True)),
        )
        .order_by("-created_at", "-id")
    )


def _normalize(filters: Optional[Mapping]) -> dict:
    data = {k: v for k, v in dict(filters or {}).items() if v not in (None, "")}
    if "method" in data:
        data["method"] = str(data["method"]).strip().upper()
    return data


def summarize(rt: ReturnTransaction) -> ReturnSummary:
    return ReturnSummary(
        id=rt.pk,
        receipt_id=rt.receipt_id,
        refund_datetime=rt.created_at,
        original_invoice=rt.original_sale.invoice_number,
        customer_name=rt.original_sale.customer_name,
        cashier_name=rt.cashier.display_name,
        manager_name=rt.manager.display_name if rt.manager_id else None,
        terminal=rt.terminal_name,
        method=rt.refund_method,
        restock_count=rt.restock_count,
        refund_net=Decimal(rt.refund_net).quantize(Decimal("0.01")),
        reason=rt.reason_summary,
    )


def list_refunds(filters: Optional[Mapping] = None) -> list[ReturnSummary]:
    filterset = ReturnTransactionFilter(_normalize(filters), queryset=history_queryset())
    if not filterset.is_valid():
        raise ReturnValidationError(
            [f"{name}: {' '.join(messages)}" for name, messages in filterset.errors.items()]
        )
    return [summarize(rt) for rt in filterset.qs]
