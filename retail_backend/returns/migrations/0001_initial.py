"""
======================================================
PATH: returns/migrations/0001_initial.py
======================================================
MIGRATION: CREATE ReturnTransaction + ReturnLine

Purpose:
- Append-only return headers and lines.
- ReturnLine rows are the return ledger (summed per sale line).
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
        ("sales", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ReturnTransaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "refund_method",
                    models.CharField(
                        choices=[("CASH", "Cash"), ("CARD", "Card"), ("WALLET", "Wallet")],
                        default="CASH",
                        max_length=10,
                    ),
                ),
                ("refund_cash", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("refund_card", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("refund_wallet", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("refund_store_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("reason_summary", models.CharField(blank=True, default="", max_length=255)),
                (
                    "language",
                    models.CharField(
                        choices=[("EN", "English"), ("SI", "Sinhala"), ("TA", "Tamil")],
                        default="EN",
                        max_length=2,
                    ),
                ),
                ("terminal_name", models.CharField(blank=True, default="", max_length=64)),
                (
                    "cashier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="returns_processed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "manager",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="returns_authorized",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "original_sale",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="returns",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["original_sale", "created_at"], name="returns_rt_sale_idx"),
                    models.Index(fields=["refund_method"], name="returns_rt_method_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ReturnLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.DecimalField(decimal_places=3, max_digits=12)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("line_refund", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "reason_code",
                    models.CharField(
                        choices=[
                            ("DAMAGED", "Damaged"),
                            ("EXPIRED", "Expired"),
                            ("WRONG_ITEM", "Wrong item"),
                            ("CUSTOMER_CHANGE", "Customer changed mind"),
                            ("OTHER", "Other"),
                        ],
                        default="OTHER",
                        max_length=20,
                    ),
                ),
                ("restock", models.BooleanField(default=True)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_lines",
                        to="products.product",
                    ),
                ),
                (
                    "return_transaction",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="returns.returntransaction",
                    ),
                ),
                (
                    "sale_line",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_lines",
                        to="sales.saleline",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
                "indexes": [models.Index(fields=["sale_line"], name="returns_rl_sale_line_idx")],
            },
        ),
    ]
