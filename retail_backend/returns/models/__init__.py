# returns/models/__init__.py

"""
RETURNS MODELS PACKAGE EXPORTS
"""

from .audit_event import ReturnAuditEvent
from .return_line import ReturnLine
from .return_transaction import ReturnTransaction

__all__ = [
    "ReturnTransaction",
    "ReturnLine",
    "ReturnAuditEvent",
]
