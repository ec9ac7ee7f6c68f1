# products/services/stock.py

"""
STOCK SERVICE

Purpose:
- The only code path that changes Product.stock_quantity.
- Every change writes an immutable InventoryMovement row.

Rules:
- quantity is a signed Decimal delta (3 dp), never zero
- on-hand is updated with an F() increment, never read-modify-write
- WASTE / negative ADJUST cannot take on-hand below zero
- RETURN movements are created by restock_return_line() only
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from django.db import transaction
from django.db.models import F

from products.models import InventoryMovement, Product

QTY_PLACES = Decimal("0.001")


class StockError(Exception):
    """Domain error for stock changes."""


@dataclass(frozen=True)
class StockChange:
    product_id: int
    movement: InventoryMovement
    quantity_delta: Decimal


def _to_delta(value) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        raise StockError("quantity is required")
    try:
        delta = Decimal(str(value)).quantize(QTY_PLACES)
    except (InvalidOperation, ValueError):
        raise StockError("quantity must be a number")
    if delta == 0:
        raise StockError("quantity cannot be 0")
    return delta


def _apply(*, product_id, movement_type, delta: Decimal, user=None, return_line=None, note="") -> StockChange:
    movement = InventoryMovement.objects.create(
        product_id=product_id,
        movement_type=movement_type,
        quantity=delta,
        return_line=return_line,
        performed_by=user,
        note=note,
    )
    Product.objects.filter(pk=product_id).update(stock_quantity=F("stock_quantity") + delta)
    return StockChange(product_id=product_id, movement=movement, quantity_delta=delta)


@transaction.atomic
def adjust_stock(*, product: Product, movement_type: str, quantity, user=None, note: str = "") -> StockChange:
    """
    Manual stock change (RECEIVE / ADJUST / WASTE).

    quantity:
      RECEIVE -> positive
      WASTE   -> positive amount written off (stored as a negative delta)
      ADJUST  -> signed
    """
    if movement_type == InventoryMovement.MovementType.RETURN:
        raise StockError("RETURN movements are created from return lines")

    delta = _to_delta(quantity)

    if movement_type == InventoryMovement.MovementType.RECEIVE and delta < 0:
        raise StockError("Received quantity must be positive")
    if movement_type == InventoryMovement.MovementType.WASTE:
        delta = -abs(delta)

    if delta < 0:
        locked = Product.objects.select_for_update().get(pk=product.pk)
        if locked.stock_quantity + delta < 0:
            raise StockError(
                f"Cannot reduce stock below zero. On hand: {locked.stock_quantity}, Requested OUT: {abs(delta)}"
            )

    return _apply(
        product_id=product.pk,
        movement_type=movement_type,
        delta=delta,
        user=user,
        note=note,
    )


def restock_return_line(*, return_line, user=None) -> StockChange:
    """
    Put a returned line back on the shelf.

    Runs inside the caller's transaction (the return writer); any failure
    propagates so the whole return rolls back.
    """
    return _apply(
        product_id=return_line.product_id,
        movement_type=InventoryMovement.MovementType.RETURN,
        delta=Decimal(return_line.quantity),
        user=user,
        return_line=return_line,
    )
