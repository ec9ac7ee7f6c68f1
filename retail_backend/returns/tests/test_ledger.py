# returns/tests/test_ledger.py

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from returns.models import ReturnLine, ReturnTransaction
from returns.services.ledger import ledger_for, returned_quantity

from .helpers import make_product, make_sale, make_user, sale_line


class ReturnLedgerTests(TestCase):
    """
    GUARANTEES:
    - No returns -> empty mapping
    - Quantities are summed per sale line across return transactions
    - Other sales do not leak into the mapping
    """

    def setUp(self):
        self.cashier = make_user()
        self.rice = make_product(name="Rice", unit_price="5.00")
        self.milk = make_product(name="Milk", unit_price="3.00")
        self.sale = make_sale(
            cashier=self.cashier,
            lines=[(self.rice, "4", "5.00"), (self.milk, "2.5", "3.00")],
        )

    def _return(self, sale, line, qty):
        rt = ReturnTransaction.objects.create(
            original_sale=sale,
            cashier=self.cashier,
            refund_cash=Decimal("1.00"),
        )
        return ReturnLine.objects.create(
            return_transaction=rt,
            sale_line=line,
            product=line.product,
            quantity=Decimal(qty),
            unit_price=line.unit_price,
            line_refund=Decimal("1.00"),
        )

    def test_empty_when_nothing_returned(self):
        self.assertEqual(ledger_for(sale_id=self.sale.pk), {})

    def test_unknown_sale_is_empty(self):
        self.assertEqual(ledger_for(sale_id=987654), {})

    def test_sums_across_transactions(self):
        rice_line = sale_line(self.sale, self.rice)
        milk_line = sale_line(self.sale, self.milk)
        self._return(self.sale, rice_line, "1")
        self._return(self.sale, rice_line, "2")
        self._return(self.sale, milk_line, "0.5")

        ledger = ledger_for(sale_id=self.sale.pk)

        self.assertEqual(ledger[rice_line.pk], Decimal("3.000"))
        self.assertEqual(ledger[milk_line.pk], Decimal("0.500"))
        self.assertEqual(
            returned_quantity(sale_id=self.sale.pk, sale_line_id=rice_line.pk),
            Decimal("3.000"),
        )

    def test_other_sales_are_ignored(self):
        other = make_sale(cashier=self.cashier, lines=[(self.rice, "1", "5.00")])
        self._return(other, sale_line(other, self.rice), "1")

        self.assertEqual(ledger_for(sale_id=self.sale.pk), {})

    def test_return_rows_are_immutable(self):
        line = self._return(self.sale, sale_line(self.sale, self.rice), "1")

        with self.assertRaises(ValidationError):
            line.save()
        with self.assertRaises(ValidationError):
            line.delete()
        with self.assertRaises(ValidationError):
            line.return_transaction.save()
