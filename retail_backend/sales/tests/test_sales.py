# sales/tests/test_sales.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from returns.models import ReturnLine, ReturnTransaction
from returns.tests.helpers import make_product, make_sale, make_user, sale_line
from sales.models import Sale, SaleLine
from sales.services.lifecycle import (
    InvalidSaleTransitionError,
    SaleLifecycleError,
    VoidNotAuthorizedError,
    can_transition,
    void_sale,
)
from sales.services.lookup import find_sale_by_reference


class SaleLookupTests(TestCase):
    def setUp(self):
        self.cashier = make_user()
        self.product = make_product()
        self.sale = make_sale(
            cashier=self.cashier,
            lines=[(self.product, "1", "10.00")],
            invoice_number="INV-0042",
        )

    def test_exact_invoice_match(self):
        self.assertEqual(find_sale_by_reference("INV-0042"), self.sale)
        self.assertEqual(find_sale_by_reference("  INV-0042 "), self.sale)

    def test_barcode_digits_resolve_to_id(self):
        self.assertEqual(find_sale_by_reference(f"S-{self.sale.pk:06d}"), self.sale)
        self.assertEqual(find_sale_by_reference(str(self.sale.pk)), self.sale)

    def test_unknown_or_blank(self):
        self.assertIsNone(find_sale_by_reference(""))
        self.assertIsNone(find_sale_by_reference(None))
        self.assertIsNone(find_sale_by_reference("no-digits"))
        self.assertIsNone(find_sale_by_reference("987654"))

    def test_voided_sales_are_hidden(self):
        void_sale(sale=self.sale, manager=make_user(role="manager"))
        self.assertIsNone(find_sale_by_reference("INV-0042"))
        self.assertIsNone(find_sale_by_reference(str(self.sale.pk)))


class SaleImmutabilityTests(TestCase):
    """
    GUARANTEES:
    - Sale lines are append-only
    - A sale can only move COMPLETED -> VOIDED
    - Sales cannot be deleted
    """

    def setUp(self):
        self.cashier = make_user()
        self.product = make_product(unit_price="2.50")
        self.sale = make_sale(cashier=self.cashier, lines=[(self.product, "4", "2.50", "1.00")])

    def test_line_total_is_computed(self):
        line = SaleLine.objects.get(sale=self.sale)
        self.assertEqual(line.total, Decimal("9.00"))

    def test_line_cannot_be_edited_or_deleted(self):
        line = SaleLine.objects.get(sale=self.sale)
        line.quantity = Decimal("1")
        with self.assertRaises(ValidationError):
            line.save()
        with self.assertRaises(ValidationError):
            line.delete()

    def test_completed_sale_fields_are_frozen(self):
        self.sale.customer_name = "Changed"
        with self.assertRaises(ValidationError):
            self.sale.save()

    def test_sale_cannot_be_deleted(self):
        with self.assertRaises(ValidationError):
            self.sale.delete()

    def test_void_sets_timestamp(self):
        voided = void_sale(sale=self.sale, manager=make_user(role="manager"))
        self.assertEqual(voided.status, Sale.STATUS_VOIDED)
        self.assertIsNotNone(voided.voided_at)

    def test_void_is_terminal(self):
        void_sale(sale=self.sale, manager=make_user(role="manager"))
        self.assertFalse(
            can_transition(from_status=Sale.STATUS_VOIDED, to_status=Sale.STATUS_COMPLETED)
        )
        with self.assertRaises(InvalidSaleTransitionError):
            void_sale(sale=self.sale, manager=make_user(role="manager"))


class VoidSaleTests(TestCase):
    """
    GUARANTEES:
    - Only a manager can void a sale
    - A sale can only be voided inside the void window
    - A sale with committed returns cannot be voided
    """

    def setUp(self):
        self.cashier = make_user()
        self.manager = make_user(role="manager")
        self.product = make_product(unit_price="5.00")
        self.sale = make_sale(cashier=self.cashier, lines=[(self.product, "2", "5.00")])

    def test_manager_void_is_recorded(self):
        voided = void_sale(sale=self.sale, manager=self.manager)
        self.assertEqual(voided.voided_by, self.manager)

    def test_cashier_cannot_void(self):
        with self.assertRaises(VoidNotAuthorizedError):
            void_sale(sale=self.sale, manager=self.cashier)
        with self.assertRaises(VoidNotAuthorizedError):
            void_sale(sale=self.sale, manager=None)

        self.sale.refresh_from_db()
        self.assertEqual(self.sale.status, Sale.STATUS_COMPLETED)

    def test_void_window_expires(self):
        with self.assertRaises(SaleLifecycleError) as ctx:
            void_sale(
                sale=self.sale,
                manager=self.manager,
                now=self.sale.created_at + timedelta(hours=3),
            )
        self.assertEqual(str(ctx.exception), "Cannot void sale after 2 hours. Use refund instead.")

        voided = void_sale(
            sale=self.sale,
            manager=self.manager,
            now=self.sale.created_at + timedelta(hours=1),
        )
        self.assertEqual(voided.status, Sale.STATUS_VOIDED)

    def test_sale_with_returns_cannot_be_voided(self):
        rt = ReturnTransaction.objects.create(
            original_sale=self.sale,
            cashier=self.cashier,
            refund_cash=Decimal("5.00"),
        )
        ReturnLine.objects.create(
            return_transaction=rt,
            sale_line=sale_line(self.sale, self.product),
            product=self.product,
            quantity=Decimal("1"),
            unit_price=Decimal("5.00"),
            line_refund=Decimal("5.00"),
        )

        with self.assertRaises(SaleLifecycleError) as ctx:
            void_sale(sale=self.sale, manager=self.manager)
        self.assertEqual(str(ctx.exception), "Cannot void sale that has existing refunds")

        self.sale.refresh_from_db()
        self.assertFalse(self.sale.is_voided)
