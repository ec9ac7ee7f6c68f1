# returns/services/validator.py

"""
======================================================
PATH: returns/services/validator.py
======================================================
RETURN VALIDATOR

Purpose:
- Check a proposed set of {sale_line_id, qty} pairs against the live ledger.

Rules (evaluated in this order, ALL errors accumulated):
1) empty request
2) non-positive quantity, finer than 0.001, or line not on this sale
3) quantity above what is still returnable (sold - already returned)
4) nothing positive requested overall

Never writes. Safe to call repeatedly, including inside the writer's
transaction right before the insert.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from sales.models import Sale, SaleLine

from .amounts import format_quantity, parse_quantity
from .ledger import ledger_for

ZERO_QTY = Decimal("0.000")


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: list[str] = field(default_factory=list)


def item_line_id(item: Mapping):
    return item.get("sale_line_id")


def item_quantity(item: Mapping) -> Optional[Decimal]:
    raw = item.get("qty", item.get("quantity"))
    return parse_quantity(raw)


def parse_line_id(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def sale_lines_by_id(sale: Sale) -> dict[int, SaleLine]:
    return {line.pk: line for line in sale.lines.select_related("product")}


def validate_return(*, sale: Sale, items: Iterable[Mapping]) -> ValidationResult:
    items = list(items or [])
    errors: list[str] = []

    # 1) empty
    if not items:
        errors.append("No items selected for return")

    lines = sale_lines_by_id(sale)

    # 2) per-item quantity + ownership
    requested: dict[int, Decimal] = {}
    for item in items:
        raw_id = item_line_id(item)
        line = lines.get(parse_line_id(raw_id))
        if line is None:
            errors.append(f"Sale line {raw_id} is not part of this sale")
            continue

        qty = item_quantity(item)
        if qty is None or qty <= 0:
            errors.append(f"Return quantity must be positive for {line.product.name_en}")
            continue

        if qty.normalize().as_tuple().exponent < -3:
            errors.append(
                f"Return quantity for {line.product.name_en} cannot have more than 3 decimal places"
            )
            continue

        requested[line.pk] = requested.get(line.pk, ZERO_QTY) + qty

    # 3) ceilings against the freshly read ledger
    if requested:
        ledger = ledger_for(sale_id=sale.pk)
        for line_id, qty in requested.items():
            line = lines[line_id]
            sold = Decimal(line.quantity)
            already = ledger.get(line_id, ZERO_QTY)
            available = sold - already
            if qty > available:
                errors.append(
                    f"Cannot return {format_quantity(qty)} of {line.product.name_en}. "
                    f"Only {format_quantity(max(available, ZERO_QTY))} available "
                    f"(sold: {format_quantity(sold)}, already returned: {format_quantity(already)})"
                )

    # 4) overall total
    if sum(requested.values(), ZERO_QTY) <= 0:
        errors.append("Total return quantity must be greater than zero")

    return ValidationResult(ok=not errors, errors=errors)
