# returns/services/calculator.py

"""
======================================================
PATH: returns/services/calculator.py
======================================================
REFUND CALCULATOR

Purpose:
- Price a return line by line and classify manager authorization.

Rules:
- line_refund = unit_price * qty - line_discount * (qty / quantity_sold)
  (returning half the units gives back half of that line's discount)
- partial returns are priced on cumulative quantities: the refund is
  value(already_returned + qty) - value(already_returned), each side
  rounded to 2 dp ROUND_HALF_UP, so a line never refunds more than it sold for
- total = sum of lines
- requires_manager_authorization = total >= policy.manager_pin_required_above
- the tender split is chosen by the caller and checked by the writer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from sales.models import Sale, SaleLine

from .amounts import money
from .exceptions import ReturnValidationError
from .ledger import ledger_for
from .policy import ReturnPolicy, resolve_policy
from .validator import item_line_id, item_quantity, parse_line_id, sale_lines_by_id


@dataclass(frozen=True)
class RefundLine:
    sale_line_id: int
    product_id: int
    qty: Decimal
    unit_price: Decimal
    line_refund: Decimal


@dataclass(frozen=True)
class RefundCalculation:
    lines: list[RefundLine] = field(default_factory=list)
    total: Decimal = Decimal("0.00")
    requires_manager_authorization: bool = False


def _line_value(line: SaleLine, qty: Decimal) -> Decimal:
    unit_price = Decimal(line.unit_price)
    sold = Decimal(line.quantity)
    discount = Decimal(line.line_discount or 0)

    discount_share = discount * (qty / sold) if sold else Decimal("0")
    return money(unit_price * qty - discount_share)


def line_refund_for(*, line: SaleLine, qty: Decimal, already_returned: Decimal = Decimal("0")) -> Decimal:
    """
    Refund for returning qty units on top of already_returned units.

    Consecutive partial returns of one line add up to exactly the
    rounded value of the cumulative quantity.
    """
    already = Decimal(already_returned or 0)
    return _line_value(line, already + qty) - _line_value(line, already)


def calculate_refund(
    *,
    sale: Sale,
    items: Iterable[Mapping],
    policy: Optional[ReturnPolicy] = None,
) -> RefundCalculation:
    policy = resolve_policy(policy)
    lines = sale_lines_by_id(sale)
    returned = dict(ledger_for(sale_id=sale.pk))

    priced: list[RefundLine] = []
    for item in items or []:
        raw_id = item_line_id(item)
        line = lines.get(parse_line_id(raw_id))
        if line is None:
            raise ReturnValidationError([f"Sale line {raw_id} is not part of this sale"])

        qty = item_quantity(item)
        if qty is None or qty <= 0:
            continue

        already = returned.get(line.pk, Decimal("0"))
        returned[line.pk] = already + qty

        priced.append(
            RefundLine(
                sale_line_id=line.pk,
                product_id=line.product_id,
                qty=qty,
                unit_price=Decimal(line.unit_price),
                line_refund=line_refund_for(line=line, qty=qty, already_returned=already),
            )
        )

    total = money(sum((p.line_refund for p in priced), Decimal("0.00")))

    return RefundCalculation(
        lines=priced,
        total=total,
        requires_manager_authorization=policy.requires_manager(total),
    )
