# users/services/pin.py
"""
PATH: users/services/pin.py

MANAGER PIN VERIFICATION

Purpose:
- Resolve a manager PIN typed at the till to the staff member who owns it.

Rules:
- Only active users with a configured PIN are considered.
- Only users whose role grants CAP_POS_REFUND_APPROVE can authorize.
- The PIN itself is never logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from django.contrib.auth import get_user_model

from permissions.roles import CAP_POS_REFUND_APPROVE, user_has_capability

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinVerification:
    success: bool
    user_id: Optional[str] = None


def verify_manager_pin(pin) -> PinVerification:
    """
    Returns PinVerification(success=True, user_id=<uuid str>) for the first
    approving user whose PIN matches, otherwise success=False.
    """
    raw = str(pin or "").strip()
    if not raw:
        logger.warning("Manager PIN verification attempted with an empty PIN")
        return PinVerification(success=False)

    User = get_user_model()
    candidates = User.objects.filter(is_active=True).exclude(pin_hash="").order_by("created_at")

    for user in candidates:
        if not user_has_capability(user, CAP_POS_REFUND_APPROVE):
            continue
        if user.check_pin(raw):
            logger.info("Manager PIN verified", extra={"user_id": str(user.pk)})
            return PinVerification(success=True, user_id=str(user.pk))

    logger.warning("Manager PIN verification failed")
    return PinVerification(success=False)
