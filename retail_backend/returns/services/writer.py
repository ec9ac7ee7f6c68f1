"""
======================================================
PATH: returns/services/writer.py
======================================================
RETURN TRANSACTION WRITER (APPLICATION SERVICE)

Purpose:
- Persist one customer return as a single all-or-nothing unit:
    header (ReturnTransaction)
    lines (ReturnLine)
    restock movements (InventoryMovement, RETURN)
    on-hand increments (Product.stock_quantity, F() expression)

Sequence (one transaction.atomic block):
1) lock the sale row, re-check it still accepts returns, re-run the validator
   against the live ledger, price the return, check the tender split and the
   manager authorization
2) insert the header
3) insert one ReturnLine per requested line
4) restock lines flagged restock=True
5) append the RETURN_CREATED audit event
6) commit

Failure semantics:
- Step 1 rejections raise their own domain errors (nothing written).
- Any database / model error in steps 2-5 rolls the whole block back and
  surfaces as ReturnWriteError("Failed to create return transaction").
- No automatic retry; retrying is the caller's decision.

Concurrency:
- select_for_update() on the sale serializes writers for the same sale on
  PostgreSQL, and the validator re-reads the ledger after the lock, so two
  overlapping returns can never both consume the same remaining quantity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from permissions.roles import CAP_POS_REFUND_APPROVE, user_has_capability
from products.services.stock import restock_return_line
from returns.models import ReturnAuditEvent, ReturnLine, ReturnTransaction
from returns.models.return_transaction import format_receipt_id
from sales.models import Sale

from .amounts import money
from .audit import record_event
from .calculator import RefundCalculation, calculate_refund
from .exceptions import (
    ManagerAuthorizationError,
    ManagerAuthorizationRequired,
    ReturnValidationError,
    ReturnWriteError,
    SaleNotFoundError,
)
from .policy import ReturnPolicy, resolve_policy
from .validator import item_line_id, parse_line_id, validate_return

logger = logging.getLogger(__name__)

TENDERS = ("cash", "card", "wallet", "store_credit")


@dataclass(frozen=True)
class CommitResult:
    return_id: int
    refund_total: Decimal
    lines_processed: int
    inventory_updated: int

    @property
    def receipt_id(self) -> str:
        return format_receipt_id(self.return_id)


# ======================================================
# INPUT NORMALIZATION (step 1 helpers)
# ======================================================

def _ensure_sale_accepts_returns(*, sale: Sale, policy: ReturnPolicy) -> None:
    if not policy.enabled:
        raise ReturnValidationError(["Returns are disabled"])

    if sale.is_voided:
        raise ReturnValidationError(["Sale has been voided"])

    if timezone.now() - sale.created_at > timedelta(days=policy.return_window_days):
        raise ReturnValidationError(
            [f"Return window of {policy.return_window_days} days has expired"]
        )


def _tender_split(payments: Optional[Mapping]) -> dict[str, Decimal]:
    payments = payments or {}
    split = {}
    for tender in TENDERS:
        try:
            amount = money(payments.get(tender))
        except ArithmeticError:
            raise ReturnValidationError([f"Refund amount for {tender} must be a number"])
        if amount < 0:
            raise ReturnValidationError([f"Refund amount for {tender} cannot be negative"])
        split[tender] = amount
    return split


def _resolve_refund_method(refund_method, split: dict[str, Decimal]) -> str:
    choices = set(ReturnTransaction.RefundMethod.values)

    if refund_method:
        method = str(refund_method).strip().upper()
        if method not in choices:
            raise ReturnValidationError([f"Unsupported refund method: {refund_method}"])
        return method

    for tender in ("cash", "card", "wallet"):
        if split[tender] > 0:
            return tender.upper()

    return ReturnTransaction.RefundMethod.CASH


def _resolve_language(language) -> str:
    lang = str(language or "EN").strip().upper()
    if lang not in ReturnTransaction.Language.values:
        raise ReturnValidationError([f"Unsupported language: {language}"])
    return lang


def _reason_code(item: Mapping) -> str:
    code = str(item.get("reason_code") or ReturnLine.ReasonCode.OTHER).strip().upper()
    if code not in ReturnLine.ReasonCode.values:
        raise ReturnValidationError([f"Unsupported reason code: {item.get('reason_code')}"])
    return code


def _restock_flag(item: Mapping, policy: ReturnPolicy) -> bool:
    value = item.get("restock")
    if value is None:
        return policy.default_restock
    return bool(value)


def _bounded_text(value, *, field: str) -> str:
    text = (value or "").strip()
    limit = ReturnTransaction._meta.get_field(field).max_length
    if len(text) > limit:
        raise ReturnValidationError([f"{field} cannot be longer than {limit} characters"])
    return text


def _paired_lines(prepared: list, calc: RefundCalculation) -> list:
    """
    Pairs each requested item with its priced line, in request order.
    """
    pairs = list(zip(prepared, calc.lines))
    if len(prepared) != len(calc.lines) or any(
        parse_line_id(item_line_id(item)) != priced.sale_line_id
        for (item, _, _), priced in pairs
    ):
        raise ReturnWriteError("Priced lines do not match the requested lines")
    return pairs


def _authorizing_manager(*, calc: RefundCalculation, manager, policy: ReturnPolicy):
    """
    Returns the manager to record on the header (None when not required).
    """
    if not calc.requires_manager_authorization:
        return None

    if manager is None:
        raise ManagerAuthorizationRequired(
            refund_total=calc.total,
            threshold=policy.manager_pin_required_above,
        )

    if not user_has_capability(manager, CAP_POS_REFUND_APPROVE):
        raise ManagerAuthorizationError(
            f"User {manager} is not allowed to approve refunds"
        )

    return manager


# ======================================================
# WRITER
# ======================================================

def commit_return(
    *,
    sale_id,
    lines: Iterable[Mapping],
    payments: Optional[Mapping],
    cashier,
    reason_summary: str = "",
    language: str = "EN",
    terminal_name: str = "",
    manager=None,
    refund_method: Optional[str] = None,
    policy: Optional[ReturnPolicy] = None,
) -> CommitResult:
    policy = resolve_policy(policy)
    lines = list(lines or [])

    with transaction.atomic():
        # --------------------------------------------------
        # 1) lock + re-validate against the live ledger
        # --------------------------------------------------
        sale = Sale.objects.select_for_update().filter(pk=sale_id).first()
        if sale is None:
            raise SaleNotFoundError()

        _ensure_sale_accepts_returns(sale=sale, policy=policy)

        validation = validate_return(sale=sale, items=lines)
        if not validation.ok:
            logger.warning(
                "Return rejected by validation",
                extra={"sale_id": sale.pk, "errors": validation.errors},
            )
            raise ReturnValidationError(validation.errors)

        calc = calculate_refund(sale=sale, items=lines, policy=policy)

        split = _tender_split(payments)
        paid = sum(split.values(), Decimal("0.00"))
        if paid != calc.total:
            raise ReturnValidationError(
                [f"Refund payments ({paid}) must equal the refund total ({calc.total})"]
            )

        approved_by = _authorizing_manager(calc=calc, manager=manager, policy=policy)
        method = _resolve_refund_method(refund_method, split)
        lang = _resolve_language(language)
        summary = _bounded_text(reason_summary, field="reason_summary")
        terminal = _bounded_text(terminal_name, field="terminal_name")
        prepared = [
            (item, _reason_code(item), _restock_flag(item, policy))
            for item in lines
        ]
        pairs = _paired_lines(prepared, calc)
        sale_lines = {line.pk: line for line in sale.lines.all()}

        # --------------------------------------------------
        # 2-5) header, lines, restock, audit
        # --------------------------------------------------
        try:
            header = ReturnTransaction.objects.create(
                original_sale=sale,
                cashier=cashier,
                manager=approved_by,
                refund_method=method,
                refund_cash=split["cash"],
                refund_card=split["card"],
                refund_wallet=split["wallet"],
                refund_store_credit=split["store_credit"],
                reason_summary=summary,
                language=lang,
                terminal_name=terminal,
            )

            restocked = 0
            for (_, reason_code, restock), priced in pairs:
                sale_line = sale_lines[priced.sale_line_id]

                return_line = ReturnLine.objects.create(
                    return_transaction=header,
                    sale_line=sale_line,
                    product_id=sale_line.product_id,
                    quantity=priced.qty,
                    unit_price=priced.unit_price,
                    line_refund=priced.line_refund,
                    reason_code=reason_code,
                    restock=restock,
                )

                if restock:
                    restock_return_line(return_line=return_line, user=cashier)
                    restocked += 1

            record_event(
                action=ReturnAuditEvent.Action.RETURN_CREATED,
                actor=cashier,
                sale=sale,
                return_transaction=header,
                details={
                    "refund_total": str(calc.total),
                    "refund_method": method,
                    "lines": len(pairs),
                    "restocked": restocked,
                    "manager_id": str(approved_by.pk) if approved_by else None,
                    "terminal_name": terminal,
                },
            )

        except (DatabaseError, DjangoValidationError) as exc:
            logger.exception(
                "Failed to create return transaction",
                extra={"sale_id": sale.pk, "cashier_id": str(getattr(cashier, "pk", ""))},
            )
            raise ReturnWriteError() from exc

    logger.info(
        "Return committed",
        extra={
            "return_id": header.pk,
            "sale_id": sale.pk,
            "refund_total": str(calc.total),
            "lines": len(prepared),
            "restocked": restocked,
            "manager_id": str(approved_by.pk) if approved_by else None,
        },
    )

    return CommitResult(
        return_id=header.pk,
        refund_total=calc.total,
        lines_processed=len(prepared),
        inventory_updated=restocked,
    )
