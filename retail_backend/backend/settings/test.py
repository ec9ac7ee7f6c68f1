# backend/settings/test.py
"""
PATH: backend/settings/test.py

TEST SETTINGS

- In-memory SQLite (fast, isolated)
- Fast password hashing
- Throttling off so API tests are deterministic
- Returns policy pinned to the documented defaults
"""

from __future__ import annotations

from decimal import Decimal

from .base import *  # noqa: F403
from .base import REST_FRAMEWORK

DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK = {
    **REST_FRAMEWORK,
    "DEFAULT_THROTTLE_CLASSES": (),
    "DEFAULT_THROTTLE_RATES": {
        **REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"],
        "manager_pin": "1000/min",
    },
}

RETURNS = {
    "ENABLED": True,
    "MANAGER_PIN_REQUIRED_ABOVE": Decimal("1000.00"),
    "WINDOW_DAYS": 30,
    "DEFAULT_RESTOCK": True,
    "VOID_WITHIN_HOURS": 2,
}
