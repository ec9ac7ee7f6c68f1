# returns/services/audit.py

"""
RETURN AUDIT TRAIL

record_event() appends one ReturnAuditEvent. Callers inside a
transaction.atomic block get the event committed or rolled back with
their own writes.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from returns.models import ReturnAuditEvent

logger = logging.getLogger(__name__)


def record_event(
    *,
    action: str,
    actor=None,
    sale=None,
    return_transaction=None,
    details: Optional[Mapping] = None,
) -> ReturnAuditEvent:
    event = ReturnAuditEvent.objects.create(
        action=action,
        actor=actor if getattr(actor, "is_authenticated", False) else None,
        sale=sale,
        return_transaction=return_transaction,
        details=dict(details or {}),
    )
    logger.info(
        "Return audit event",
        extra={
            "action": action,
            "sale_id": getattr(sale, "pk", None),
            "return_id": getattr(return_transaction, "pk", None),
        },
    )
    return event
