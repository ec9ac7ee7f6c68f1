# returns/tests/test_eligibility.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from returns.services.eligibility import can_refund, returnable_lines
from returns.services.exceptions import SaleNotFoundError
from returns.services.policy import ReturnPolicy
from returns.services.writer import commit_return
from sales.services.lifecycle import void_sale

from .helpers import make_product, make_sale, make_user, sale_line


class CanRefundTests(TestCase):
    def setUp(self):
        self.cashier = make_user()
        self.bread = make_product(name="Bread", unit_price="4.00")
        self.sale = make_sale(cashier=self.cashier, lines=[(self.bread, "2", "4.00")])

    def test_fresh_sale_is_allowed(self):
        result = can_refund(sale_id=self.sale.pk)
        self.assertTrue(result.allowed)
        self.assertIsNone(result.reason)

    def test_disabled_policy_wins(self):
        result = can_refund(sale_id=987654, policy=ReturnPolicy(enabled=False))
        self.assertEqual(result.reason, "Returns are disabled")

    def test_unknown_sale(self):
        result = can_refund(sale_id=987654)
        self.assertFalse(result.allowed)
        self.assertEqual(result.reason, "Sale not found")

    def test_voided_sale(self):
        void_sale(sale=self.sale, manager=make_user(role="manager"))
        result = can_refund(sale_id=self.sale.pk)
        self.assertEqual(result.reason, "Sale has been voided")

    def test_window_boundary(self):
        policy = ReturnPolicy(return_window_days=30)
        now = self.sale.created_at + timedelta(days=30)

        self.assertTrue(can_refund(sale_id=self.sale.pk, policy=policy, now=now).allowed)

        late = can_refund(
            sale_id=self.sale.pk,
            policy=policy,
            now=now + timedelta(seconds=1),
        )
        self.assertFalse(late.allowed)
        self.assertEqual(late.reason, "Return window of 30 days has expired")

    def test_old_sale_is_rejected(self):
        old = make_sale(
            cashier=self.cashier,
            lines=[(self.bread, "1", "4.00")],
            created_at=timezone.now() - timedelta(days=45),
        )
        self.assertFalse(can_refund(sale_id=old.pk).allowed)

    def test_fully_returned_sale(self):
        commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": sale_line(self.sale, self.bread).pk, "qty": 2}],
            payments={"cash": "8.00"},
            cashier=self.cashier,
        )
        result = can_refund(sale_id=self.sale.pk)
        self.assertFalse(result.allowed)
        self.assertEqual(result.reason, "All items on this sale have already been returned")


class ReturnableLinesTests(TestCase):
    def setUp(self):
        self.cashier = make_user()
        self.apple = make_product(name="Apple", unit_price="1.50", unit="kg", sku="APL")
        self.sale = make_sale(cashier=self.cashier, lines=[(self.apple, "2.5", "1.50")])

    def test_unknown_sale_raises(self):
        with self.assertRaises(SaleNotFoundError):
            returnable_lines(sale_id=987654)

    def test_reports_remaining_quantity(self):
        line = sale_line(self.sale, self.apple)
        commit_return(
            sale_id=self.sale.pk,
            lines=[{"sale_line_id": line.pk, "qty": "1.25"}],
            payments={"cash": "1.88"},
            cashier=self.cashier,
        )

        [row] = returnable_lines(sale_id=self.sale.pk)

        self.assertEqual(row.sku, "APL")
        self.assertEqual(row.product_name, "Apple")
        self.assertEqual(row.quantity_sold, Decimal("2.500"))
        self.assertEqual(row.quantity_returned, Decimal("1.250"))
        self.assertEqual(row.quantity_returnable, Decimal("1.250"))
