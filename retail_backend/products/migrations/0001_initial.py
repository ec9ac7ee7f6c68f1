"""
======================================================
PATH: products/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Product (multilingual names, on-hand quantity)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sku", models.CharField(db_index=True, max_length=64, unique=True)),
                ("name_en", models.CharField(db_index=True, max_length=255)),
                ("name_si", models.CharField(blank=True, default="", max_length=255)),
                ("name_ta", models.CharField(blank=True, default="", max_length=255)),
                (
                    "unit",
                    models.CharField(
                        choices=[
                            ("pc", "Piece"),
                            ("kg", "Kilogram"),
                            ("g", "Gram"),
                            ("l", "Litre"),
                            ("pack", "Pack"),
                        ],
                        default="pc",
                        max_length=8,
                    ),
                ),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("stock_quantity", models.DecimalField(decimal_places=3, default=Decimal("0.000"), max_digits=14)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name_en"],
            },
        ),
    ]
