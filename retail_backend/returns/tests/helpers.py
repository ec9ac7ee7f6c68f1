# returns/tests/helpers.py

"""
Seeding helpers shared by the returns tests.
"""

from __future__ import annotations

import itertools
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from products.models import Product
from sales.models import Sale, SaleLine

User = get_user_model()

_seq = itertools.count(1)


def make_user(*, role="cashier", pin=None, username=None):
    n = next(_seq)
    return User.objects.create_user(
        username=username or f"{role}{n}",
        password="pass1234",
        role=role,
        pin=pin,
    )


def make_product(*, name="Sugar", unit_price="10.00", stock="0", sku=None, **extra):
    n = next(_seq)
    return Product.objects.create(
        sku=sku or f"SKU-{n:05d}",
        name_en=name,
        unit_price=Decimal(unit_price),
        stock_quantity=Decimal(stock),
        **extra,
    )


def make_sale(*, cashier, lines, created_at=None, invoice_number=None, **extra):
    """
    lines: iterable of (product, qty, unit_price[, line_discount])
    """
    n = next(_seq)
    sale = Sale.objects.create(
        invoice_number=invoice_number or f"INV-{n:06d}",
        cashier=cashier,
        created_at=created_at or timezone.now(),
        **extra,
    )

    total = Decimal("0.00")
    for row in lines:
        product, qty, unit_price = row[0], row[1], row[2]
        discount = row[3] if len(row) > 3 else "0.00"
        line = SaleLine.objects.create(
            sale=sale,
            product=product,
            quantity=Decimal(str(qty)),
            unit_price=Decimal(str(unit_price)),
            line_discount=Decimal(str(discount)),
        )
        total += line.total

    Sale.objects.filter(pk=sale.pk).update(subtotal_amount=total, total_amount=total)
    sale.refresh_from_db()
    return sale


def sale_line(sale, product):
    return sale.lines.get(product=product)
