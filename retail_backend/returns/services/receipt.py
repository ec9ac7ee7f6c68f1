# returns/services/receipt.py

"""
======================================================
PATH: returns/services/receipt.py
======================================================
RETURN RECEIPT FORMATTER

Purpose:
- Project a committed return into the printable receipt payload.

Rules:
- Read-only: nothing here writes or recomputes refunds
- totals.net is the sum of the stored line refunds
- product names are carried in all three languages; the printer picks one
  using invoice.language
"""

from __future__ import annotations

from decimal import Decimal

from returns.models import ReturnTransaction

from .amounts import format_quantity
from .exceptions import ReturnNotFoundError


def _money(value) -> str:
    return f"{Decimal(value or 0):.2f}"


def _person(user):
    if user is None:
        return None
    return user.display_name


def format_return_receipt(*, return_id) -> dict:
    rt = (
        ReturnTransaction.objects
        .select_related("original_sale", "cashier", "manager")
        .filter(pk=return_id)
        .first()
    )
    if rt is None:
        raise ReturnNotFoundError()

    items = []
    net = Decimal("0.00")
    for line in rt.lines.select_related("product").order_by("id"):
        product = line.product
        net += Decimal(line.line_refund)
        items.append(
            {
                "sale_line_id": line.sale_line_id,
                "product_id": line.product_id,
                "sku": product.sku,
                "name_en": product.name_en,
                "name_si": product.name_si,
                "name_ta": product.name_ta,
                "unit": product.unit,
                "qty": format_quantity(line.quantity),
                "unit_price": _money(line.unit_price),
                "line_refund": _money(line.line_refund),
                "reason_code": line.reason_code,
                "restock": line.restock,
            }
        )

    return {
        "type": "return",
        "invoice": {
            "id": rt.receipt_id,
            "datetime": rt.created_at.isoformat(),
            "original_sale_id": rt.original_sale_id,
            "original_invoice": rt.original_sale.invoice_number,
            "cashier": _person(rt.cashier),
            "manager": _person(rt.manager),
            "language": rt.language,
            "terminal": rt.terminal_name,
            "reason_summary": rt.reason_summary,
            "items": items,
            "totals": {"net": _money(net)},
            "payments": {
                "cash": _money(rt.refund_cash),
                "card": _money(rt.refund_card),
                "wallet": _money(rt.refund_wallet),
                "store_credit": _money(rt.refund_store_credit),
            },
            "refund_method": rt.refund_method,
        },
    }
