"""
SALE LIFECYCLE DOMAIN RULES

The only allowed lifecycle transition for a Sale is COMPLETED -> VOIDED.
Returns never change the sale status; they are tracked in the returns app.

Void rules:
- a manager (CAP_POS_REFUND_APPROVE) must authorize it
- only within RETURNS["VOID_WITHIN_HOURS"] of the sale; later, use a refund
- never once a return has been committed against the sale
"""

import logging
from datetime import timedelta
from typing import Optional

from django.db import transaction
from django.utils import timezone

from permissions.roles import CAP_POS_REFUND_APPROVE, user_has_capability
from returns.services.policy import ReturnPolicy, resolve_policy
from sales.models import Sale

logger = logging.getLogger(__name__)

# ============================================================
# DOMAIN ERRORS
# ============================================================


class SaleLifecycleError(Exception):
    pass


class InvalidSaleTransitionError(SaleLifecycleError):
    pass


class VoidNotAuthorizedError(SaleLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Sale.STATUS_VOIDED,
}

ALLOWED_TRANSITIONS = {
    Sale.STATUS_COMPLETED: {
        Sale.STATUS_VOIDED,
    },
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


@transaction.atomic
def void_sale(*, sale: Sale, manager, policy: Optional[ReturnPolicy] = None, now=None) -> Sale:
    policy = resolve_policy(policy)
    now = now or timezone.now()

    if manager is None or not user_has_capability(manager, CAP_POS_REFUND_APPROVE):
        raise VoidNotAuthorizedError("Manager authorization required to void sales")

    locked = Sale.objects.select_for_update().get(pk=sale.pk)

    if not can_transition(from_status=locked.status, to_status=Sale.STATUS_VOIDED):
        raise InvalidSaleTransitionError(
            f"Sale {locked.pk} cannot transition from "
            f"'{locked.status}' to '{Sale.STATUS_VOIDED}'"
        )

    if now - locked.created_at > timedelta(hours=policy.void_within_hours):
        raise SaleLifecycleError(
            f"Cannot void sale after {policy.void_within_hours} hours. Use refund instead."
        )

    # Returns lock the same sale row, so this check cannot race a commit
    if locked.returns.exists():
        raise SaleLifecycleError("Cannot void sale that has existing refunds")

    locked.status = Sale.STATUS_VOIDED
    locked.voided_at = now
    locked.voided_by = manager
    locked.save()

    logger.info(
        "Sale voided",
        extra={"sale_id": locked.pk, "manager_id": str(manager.pk)},
    )
    return locked
