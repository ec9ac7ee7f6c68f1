"""
======================================================
PATH: sales/migrations/0002_sale_voided_by.py
======================================================
MIGRATION: record the manager who voided a sale
"""

from __future__ import annotations

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    dependencies = [
        ("sales", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.AddField(
            model_name="sale",
            name="voided_by",
            field=models.ForeignKey(
                blank=True,
                help_text="Manager who authorized the void",
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name="sales_voided",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
    ]
