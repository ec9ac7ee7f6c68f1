# returns/tests/test_calculator.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from returns.services.calculator import calculate_refund
from returns.services.exceptions import ReturnValidationError
from returns.services.policy import ReturnPolicy
from returns.services.writer import commit_return

from .helpers import make_product, make_sale, make_user, sale_line


class RefundCalculatorTests(TestCase):
    """
    GUARANTEES:
    - The line discount is refunded in proportion to the returned quantity
    - Money is rounded per line (2 dp, half up) and summed
    - Repeated partial returns of a line add up to its discounted value
    - Manager authorization is required at or above the threshold
    """

    def setUp(self):
        self.cashier = make_user()
        self.oil = make_product(name="Oil", unit_price="10.00")
        self.salt = make_product(name="Salt", unit_price="3.33")
        self.sale = make_sale(
            cashier=self.cashier,
            lines=[(self.oil, "5", "10.00", "5.00"), (self.salt, "3", "3.33", "1.00")],
        )
        self.oil_line = sale_line(self.sale, self.oil)
        self.salt_line = sale_line(self.sale, self.salt)

    def test_full_line_refund_includes_whole_discount(self):
        calc = calculate_refund(
            sale=self.sale,
            items=[{"sale_line_id": self.oil_line.pk, "qty": 5}],
        )
        self.assertEqual(calc.total, Decimal("45.00"))
        self.assertEqual(calc.lines[0].line_refund, Decimal("45.00"))
        self.assertEqual(calc.lines[0].unit_price, Decimal("10.00"))

    def test_partial_quantity_gets_proportional_discount(self):
        calc = calculate_refund(
            sale=self.sale,
            items=[{"sale_line_id": self.oil_line.pk, "qty": 2}],
        )
        # 2 * 10.00 - 5.00 * 2/5
        self.assertEqual(calc.total, Decimal("18.00"))

    def test_rounding_is_per_line_half_up(self):
        calc = calculate_refund(
            sale=self.sale,
            items=[
                {"sale_line_id": self.salt_line.pk, "qty": 1},
                {"sale_line_id": self.oil_line.pk, "qty": 1},
            ],
        )
        # salt: 3.33 - 1.00/3 = 2.99666.. -> 3.00 ; oil: 10 - 1 = 9.00
        self.assertEqual([line.line_refund for line in calc.lines], [Decimal("3.00"), Decimal("9.00")])
        self.assertEqual(calc.total, Decimal("12.00"))

    def test_partial_returns_are_priced_on_cumulative_quantity(self):
        rice = make_product(name="Rice", unit_price="10.00")
        sale = make_sale(cashier=self.cashier, lines=[(rice, "3", "10.00", "10.00")])
        line = sale_line(sale, rice)

        calc = calculate_refund(
            sale=sale,
            items=[{"sale_line_id": line.pk, "qty": 1}] * 3,
        )
        self.assertEqual(
            [priced.line_refund for priced in calc.lines],
            [Decimal("6.67"), Decimal("6.66"), Decimal("6.67")],
        )
        self.assertEqual(calc.total, Decimal("20.00"))

    def test_previous_returns_shift_the_rounding(self):
        rice = make_product(name="Rice", unit_price="10.00")
        sale = make_sale(cashier=self.cashier, lines=[(rice, "3", "10.00", "10.00")])
        line = sale_line(sale, rice)
        commit_return(
            sale_id=sale.pk,
            lines=[{"sale_line_id": line.pk, "qty": 1}],
            payments={"cash": "6.67"},
            cashier=self.cashier,
        )

        calc = calculate_refund(sale=sale, items=[{"sale_line_id": line.pk, "qty": 1}])
        self.assertEqual(calc.total, Decimal("6.66"))

    def test_non_positive_quantities_are_skipped(self):
        calc = calculate_refund(
            sale=self.sale,
            items=[
                {"sale_line_id": self.oil_line.pk, "qty": 0},
                {"sale_line_id": self.salt_line.pk, "qty": 3},
            ],
        )
        self.assertEqual(len(calc.lines), 1)
        self.assertEqual(calc.total, Decimal("8.99"))

    def test_unknown_line_raises(self):
        with self.assertRaises(ReturnValidationError):
            calculate_refund(sale=self.sale, items=[{"sale_line_id": 999999, "qty": 1}])

    def test_threshold_is_inclusive(self):
        items = [{"sale_line_id": self.oil_line.pk, "qty": 5}]

        at = calculate_refund(
            sale=self.sale,
            items=items,
            policy=ReturnPolicy(manager_pin_required_above=Decimal("45.00")),
        )
        below = calculate_refund(
            sale=self.sale,
            items=items,
            policy=ReturnPolicy(manager_pin_required_above=Decimal("45.01")),
        )

        self.assertTrue(at.requires_manager_authorization)
        self.assertFalse(below.requires_manager_authorization)
