# returns/services/amounts.py

"""
Decimal helpers shared by the validator, calculator and writer.

- money: 2 dp, ROUND_HALF_UP
- quantities: 3 dp (weighed goods)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

TWOPLACES = Decimal("0.01")
THREEPLACES = Decimal("0.001")
ZERO = Decimal("0")


def money(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def parse_quantity(value) -> Optional[Decimal]:
    """Decimal quantity, or None when the value is missing or not a finite number."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        qty = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not qty.is_finite():
        return None
    return qty


def format_quantity(value) -> str:
    """2.000 -> "2", 1.500 -> "1.5"."""
    qty = Decimal(value)
    if qty == qty.to_integral_value():
        return str(qty.to_integral_value())
    return format(qty.normalize(), "f")
