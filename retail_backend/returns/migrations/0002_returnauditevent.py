"""
======================================================
PATH: returns/migrations/0002_returnauditevent.py
======================================================
MIGRATION: CREATE ReturnAuditEvent (append-only refund audit trail)
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    dependencies = [
        ("returns", "0001_initial"),
        ("sales", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ReturnAuditEvent",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("RETURN_CREATED", "Return created"),
                            ("PIN_VERIFY_OK", "Manager PIN accepted"),
                            ("PIN_VERIFY_FAIL", "Manager PIN rejected"),
                        ],
                        max_length=32,
                    ),
                ),
                ("details", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                (
                    "actor",
                    models.ForeignKey(
                        help_text="User at the till when the event happened",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="return_audit_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "return_transaction",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="audit_events",
                        to="returns.returntransaction",
                    ),
                ),
                (
                    "sale",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="return_audit_events",
                        to="sales.sale",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["action", "created_at"], name="returns_audit_action_idx"),
                ],
            },
        ),
    ]
