# returns/services/policy.py

"""
RETURN POLICY

Read-only snapshot of settings.RETURNS (see backend/settings/base.py).
Every service takes an optional policy= so callers and tests can override it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings


@dataclass(frozen=True)
class ReturnPolicy:
    enabled: bool = True
    manager_pin_required_above: Decimal = Decimal("1000.00")
    return_window_days: int = 30
    default_restock: bool = True
    void_within_hours: int = 2

    @classmethod
    def from_settings(cls) -> "ReturnPolicy":
        cfg = getattr(settings, "RETURNS", None) or {}
        defaults = cls()
        return cls(
            enabled=bool(cfg.get("ENABLED", defaults.enabled)),
            manager_pin_required_above=Decimal(
                str(cfg.get("MANAGER_PIN_REQUIRED_ABOVE", defaults.manager_pin_required_above))
            ),
            return_window_days=int(cfg.get("WINDOW_DAYS", defaults.return_window_days)),
            default_restock=bool(cfg.get("DEFAULT_RESTOCK", defaults.default_restock)),
            void_within_hours=int(cfg.get("VOID_WITHIN_HOURS", defaults.void_within_hours)),
        )

    def requires_manager(self, refund_total: Decimal) -> bool:
        return refund_total >= self.manager_pin_required_above


def resolve_policy(policy: Optional[ReturnPolicy] = None) -> ReturnPolicy:
    return policy if policy is not None else ReturnPolicy.from_settings()
