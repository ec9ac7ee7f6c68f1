# returns/tests/test_writer.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.db.models import Sum
from django.test import TestCase
from django.utils import timezone

from products.models import InventoryMovement
from returns.models import ReturnAuditEvent, ReturnLine, ReturnTransaction
from returns.services.exceptions import (
    ManagerAuthorizationError,
    ManagerAuthorizationRequired,
    ReturnValidationError,
    ReturnWriteError,
    SaleNotFoundError,
)
from returns.services import ledger as ledger_module
from returns.services.calculator import RefundCalculation, calculate_refund
from returns.services.ledger import ledger_for
from returns.services.policy import ReturnPolicy
from returns.services.validator import validate_return
from returns.services.writer import commit_return
from sales.services.lifecycle import void_sale

from .helpers import make_product, make_sale, make_user, sale_line


class CommitReturnTests(TestCase):
    """
    GUARANTEES:
    - Header, lines, movements and on-hand change are written together
    - Nothing is written when any step fails
    - The ledger ceiling holds across repeated partial returns
    """

    def setUp(self):
        self.cashier = make_user()
        self.manager = make_user(role="manager", pin="2468")
        self.flour = make_product(name="Flour", unit_price="10.00", stock="20")
        self.eggs = make_product(name="Eggs", unit_price="1.00", stock="100")
        self.sale = make_sale(
            cashier=self.cashier,
            lines=[(self.flour, "5", "10.00", "5.00"), (self.eggs, "12", "1.00")],
            customer_name="Nimal",
        )
        self.flour_line = sale_line(self.sale, self.flour)
        self.eggs_line = sale_line(self.sale, self.eggs)

    # --------------------------------------------------
    # SUCCESS PATH
    # --------------------------------------------------

    def test_commit_writes_header_lines_and_restock(self):
        result = commit_return(
            sale_id=self.sale.pk,
            lines=[
                {"sale_line_id": self.flour_line.pk, "qty": 2, "reason_code": "DAMAGED"},
                {"sale_line_id": self.eggs_line.pk, "qty": 6},
            ],
            payments={"cash": "24.00"},
            cashier=self.cashier,
            reason_summary="Torn bag",
            terminal_name="POS-1",
        )

        self.assertEqual(result.refund_total, Decimal("24.00"))
        self.assertEqual(result.lines_processed, 2)
        self.assertEqual(result.inventory_updated, 2)
        self.assertEqual(result.receipt_id, f"RET-{result.return_id:06d}")

        rt = ReturnTransaction.objects.get(pk=result.return_id)
        self.assertEqual(rt.original_sale_id, self.sale.pk)
        self.assertEqual(rt.refund_method, ReturnTransaction.RefundMethod.CASH)
        self.assertEqual(rt.refund_total, Decimal("24.00"))
        self.assertIsNone(rt.manager)
        self.assertEqual(rt.terminal_name, "POS-1")

        lines = list(rt.lines.order_by("id"))
        self.assertEqual([line.line_refund for line in lines], [Decimal("18.00"), Decimal("6.00")])
        self.assertEqual(lines[0].reason_code, ReturnLine.ReasonCode.DAMAGED)
        self.assertEqual(lines[1].reason_code, ReturnLine.ReasonCode.OTHER)

        self.flour.refresh_from_db()
        self.eggs.refresh_from_db()
        self.assertEqual(self.flour.stock_quantity, Decimal("22.000"))
        self.assertEqual(self.eggs.stock_quantity, Decimal("106.000"))

        movements = InventoryMovement.objects.filter(
            movement_type=InventoryMovement.MovementType.RETURN
        )
        self.assertEqual(movements.count(), 2)
        self.assertEqual(
            set(movements.values_list("return_line_id", flat=True)),
            {line.pk for line in lines},
        )

        event = ReturnAuditEvent.objects.get()
        self.assertEqual(event.action, ReturnAuditEvent.Action.RETURN_CREATED)
        self.assertEqual(event.return_transaction_id, result.return_id)
        self.assertEqual(event.sale, self.sale)
        self.assertEqual(event.actor, self.cashier)
        self.assertEqual(event.details["refund_total"], "24.00")

    def test_no_restock_leaves_stock_untouched(self):
        result = commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": self.eggs_line.pk, "qty": 3, "restock": False}],
            payments={"card": "3.00"},
            cashier=self.cashier,
        )

        self.assertEqual(result.inventory_updated, 0)
        self.eggs.refresh_from_db()
        self.assertEqual(self.eggs.stock_quantity, Decimal("100.000"))
        self.assertFalse(InventoryMovement.objects.exists())
        self.assertEqual(
            ReturnTransaction.objects.get(pk=result.return_id).refund_method,
            ReturnTransaction.RefundMethod.CARD,
        )

    def test_default_restock_follows_policy(self):
        result = commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
            payments={"cash": "1.00"},
            cashier=self.cashier,
            policy=ReturnPolicy(default_restock=False),
        )
        self.assertEqual(result.inventory_updated, 0)
        self.assertFalse(ReturnLine.objects.get().restock)

    def test_repeated_partial_returns_respect_ceiling(self):
        for _ in range(3):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 4}],
                payments={"cash": "4.00"},
                cashier=self.cashier,
            )

        self.assertEqual(ledger_for(sale_id=self.sale.pk)[self.eggs_line.pk], Decimal("12.000"))

        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
            )
        self.assertEqual(
            ctx.exception.errors,
            ["Cannot return 1 of Eggs. Only 0 available (sold: 12, already returned: 12)"],
        )
        self.assertEqual(ReturnTransaction.objects.count(), 3)

    def test_unit_by_unit_returns_refund_exactly_the_discounted_line(self):
        rice = make_product(name="Rice", unit_price="10.00", stock="0")
        sale = make_sale(cashier=self.cashier, lines=[(rice, "3", "10.00", "10.00")])
        line = sale_line(sale, rice)

        for cash in ("6.67", "6.66", "6.67"):
            commit_return(
                sale_id=sale.pk,
                lines=[{"sale_line_id": line.pk, "qty": 1}],
                payments={"cash": cash},
                cashier=self.cashier,
            )

        refunded = ReturnLine.objects.filter(sale_line=line).aggregate(total=Sum("line_refund"))["total"]
        self.assertEqual(refunded, Decimal("20.00"))

    def test_ledger_is_reread_after_the_caller_validated(self):
        items = [{"sale_line_id": self.eggs_line.pk, "qty": 4}]
        self.assertTrue(validate_return(sale=self.sale, items=items).ok)

        # another till takes 10 of the 12 eggs before this commit gets the lock
        commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": self.eggs_line.pk, "qty": 10}],
            payments={"cash": "10.00"},
            cashier=make_user(),
        )

        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=items,
                payments={"cash": "4.00"},
                cashier=self.cashier,
            )
        self.assertEqual(
            ctx.exception.errors,
            ["Cannot return 4 of Eggs. Only 2 available (sold: 12, already returned: 10)"],
        )
        self.assertEqual(ReturnTransaction.objects.count(), 1)

    def test_return_committed_while_writer_waits_is_seen(self):
        other_cashier = make_user()
        real_ledger_for = ledger_module.ledger_for

        def ledger_after_competing_return(*, sale_id):
            if not ReturnLine.objects.exists():
                rt = ReturnTransaction.objects.create(
                    original_sale=self.sale,
                    cashier=other_cashier,
                    refund_cash=Decimal("10.00"),
                )
                ReturnLine.objects.create(
                    return_transaction=rt,
                    sale_line=self.eggs_line,
                    product=self.eggs,
                    quantity=Decimal("10"),
                    unit_price=Decimal("1.00"),
                    line_refund=Decimal("10.00"),
                )
            return real_ledger_for(sale_id=sale_id)

        with mock.patch(
            "returns.services.validator.ledger_for",
            side_effect=ledger_after_competing_return,
        ):
            with self.assertRaises(ReturnValidationError) as ctx:
                commit_return(
                    sale_id=self.sale.pk,
                    lines=[{"sale_line_id": self.eggs_line.pk, "qty": 4}],
                    payments={"cash": "4.00"},
                    cashier=self.cashier,
                )

        self.assertEqual(
            ctx.exception.errors,
            ["Cannot return 4 of Eggs. Only 2 available (sold: 12, already returned: 10)"],
        )
        self.assertEqual(ReturnTransaction.objects.count(), 1)

    # --------------------------------------------------
    # REJECTIONS (nothing written)
    # --------------------------------------------------

    def test_unknown_sale(self):
        with self.assertRaises(SaleNotFoundError):
            commit_return(sale_id=987654, lines=[], payments={}, cashier=self.cashier)

    def test_voided_sale_is_rejected(self):
        void_sale(sale=self.sale, manager=make_user(role="manager"))
        with self.assertRaises(ReturnValidationError):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
            )

    def test_expired_sale_is_rejected(self):
        old = make_sale(
            cashier=self.cashier,
            lines=[(self.eggs, "1", "1.00")],
            created_at=timezone.now() - timedelta(days=31),
        )
        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=old.pk,
                lines=[{"sale_line_id": sale_line(old, self.eggs).pk, "qty": 1}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
            )
        self.assertEqual(ctx.exception.errors, ["Return window of 30 days has expired"])

    def test_payments_must_match_total(self):
        with self.assertRaises(ReturnValidationError):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 2}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
            )
        self.assertFalse(ReturnTransaction.objects.exists())

    def test_negative_tender_is_rejected(self):
        with self.assertRaises(ReturnValidationError):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 2}],
                payments={"cash": "4.00", "card": "-2.00"},
                cashier=self.cashier,
            )

    def test_manager_required_at_threshold(self):
        policy = ReturnPolicy(manager_pin_required_above=Decimal("6.00"))

        with self.assertRaises(ManagerAuthorizationRequired) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 6}],
                payments={"cash": "6.00"},
                cashier=self.cashier,
                policy=policy,
            )
        self.assertEqual(ctx.exception.refund_total, Decimal("6.00"))
        self.assertFalse(ReturnTransaction.objects.exists())

        result = commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": self.eggs_line.pk, "qty": 6}],
            payments={"cash": "6.00"},
            cashier=self.cashier,
            manager=self.manager,
            policy=policy,
        )
        self.assertEqual(ReturnTransaction.objects.get(pk=result.return_id).manager, self.manager)

    def test_manager_without_approval_capability(self):
        other_cashier = make_user()
        with self.assertRaises(ManagerAuthorizationError):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 6}],
                payments={"cash": "6.00"},
                cashier=self.cashier,
                manager=other_cashier,
                policy=ReturnPolicy(manager_pin_required_above=Decimal("1.00")),
            )

    def test_manager_not_recorded_below_threshold(self):
        result = commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
            payments={"cash": "1.00"},
            cashier=self.cashier,
            manager=self.manager,
        )
        self.assertIsNone(ReturnTransaction.objects.get(pk=result.return_id).manager)

    def test_quantity_finer_than_three_places_is_a_validation_error(self):
        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": "0.0005"}],
                payments={"cash": "0.00"},
                cashier=self.cashier,
            )
        self.assertEqual(
            ctx.exception.errors,
            [
                "Return quantity for Eggs cannot have more than 3 decimal places",
                "Total return quantity must be greater than zero",
            ],
        )
        self.assertFalse(ReturnTransaction.objects.exists())

    def test_overlong_text_is_rejected_not_truncated(self):
        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
                terminal_name="T" * 65,
            )
        self.assertEqual(ctx.exception.errors, ["terminal_name cannot be longer than 64 characters"])

        with self.assertRaises(ReturnValidationError) as ctx:
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
                reason_summary="x" * 256,
            )
        self.assertEqual(ctx.exception.errors, ["reason_summary cannot be longer than 255 characters"])
        self.assertFalse(ReturnTransaction.objects.exists())

    def test_unsupported_reason_code(self):
        with self.assertRaises(ReturnValidationError):
            commit_return(
                sale_id=self.sale.pk,
                lines=[{"sale_line_id": self.eggs_line.pk, "qty": 1, "reason_code": "BORED"}],
                payments={"cash": "1.00"},
                cashier=self.cashier,
            )

    # --------------------------------------------------
    # ATOMICITY
    # --------------------------------------------------

    def test_failing_restock_rolls_everything_back(self):
        with mock.patch(
            "returns.services.writer.restock_return_line",
            side_effect=DatabaseError("disk full"),
        ):
            with self.assertRaises(ReturnWriteError) as ctx:
                commit_return(
                    sale_id=self.sale.pk,
                    lines=[
                        {"sale_line_id": self.eggs_line.pk, "qty": 2},
                        {"sale_line_id": self.flour_line.pk, "qty": 1},
                    ],
                    payments={"cash": "11.00"},
                    cashier=self.cashier,
                )

        self.assertEqual(str(ctx.exception), "Failed to create return transaction")
        self.assertIsInstance(ctx.exception.__cause__, DatabaseError)
        self.assertEqual(ledger_for(sale_id=self.sale.pk), {})
        self.assertFalse(ReturnTransaction.objects.exists())
        self.assertFalse(ReturnLine.objects.exists())
        self.eggs.refresh_from_db()
        self.assertEqual(self.eggs.stock_quantity, Decimal("100.000"))
        self.assertFalse(ReturnAuditEvent.objects.exists())

    def test_priced_lines_out_of_request_order_are_refused(self):
        def reordered(**kwargs):
            calc = calculate_refund(**kwargs)
            return RefundCalculation(
                lines=list(reversed(calc.lines)),
                total=calc.total,
                requires_manager_authorization=calc.requires_manager_authorization,
            )

        with mock.patch("returns.services.writer.calculate_refund", side_effect=reordered):
            with self.assertRaises(ReturnWriteError) as ctx:
                commit_return(
                    sale_id=self.sale.pk,
                    lines=[
                        {"sale_line_id": self.eggs_line.pk, "qty": 2},
                        {"sale_line_id": self.flour_line.pk, "qty": 1},
                    ],
                    payments={"cash": "11.00"},
                    cashier=self.cashier,
                )

        self.assertEqual(str(ctx.exception), "Priced lines do not match the requested lines")
        self.assertFalse(ReturnTransaction.objects.exists())
