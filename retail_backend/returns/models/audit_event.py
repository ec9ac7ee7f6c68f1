# returns/models/audit_event.py

"""
======================================================
PATH: returns/models/audit_event.py
======================================================
RETURN AUDIT EVENT (IMMUTABLE)

Purpose:
- Durable trail of refund activity: every committed return and every
  manager PIN check made while committing one.
- Written next to the business rows, so a rolled back return leaves no
  RETURN_CREATED event behind.

Created once. Never updated. Never deleted.
"""

import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

User = settings.AUTH_USER_MODEL


class ReturnAuditEvent(models.Model):
    class Action(models.TextChoices):
        RETURN_CREATED = "RETURN_CREATED", "Return created"
        PIN_VERIFY_OK = "PIN_VERIFY_OK", "Manager PIN accepted"
        PIN_VERIFY_FAIL = "PIN_VERIFY_FAIL", "Manager PIN rejected"

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
    )

    action = models.CharField(max_length=32, choices=Action.choices)

    actor = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        related_name="return_audit_events",
        help_text="User at the till when the event happened",
    )

    sale = models.ForeignKey(
        "sales.Sale",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="return_audit_events",
    )

    return_transaction = models.ForeignKey(
        "returns.ReturnTransaction",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="audit_events",
    )

    details = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["action", "created_at"], name="returns_audit_action_idx"),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("ReturnAuditEvent records are immutable")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("ReturnAuditEvent records cannot be deleted")

    def __str__(self):
        return f"{self.action} | {self.created_at:%Y-%m-%d %H:%M}"
