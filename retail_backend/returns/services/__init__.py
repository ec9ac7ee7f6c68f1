"""
RETURNS SERVICES PACKAGE EXPORTS
"""

from .audit import record_event
from .calculator import RefundCalculation, RefundLine, calculate_refund
from .eligibility import EligibilityResult, ReturnableLine, can_refund, returnable_lines
from .exceptions import (
    ManagerAuthorizationError,
    ManagerAuthorizationRequired,
    ReturnNotFoundError,
    ReturnsError,
    ReturnValidationError,
    ReturnWriteError,
    SaleNotFoundError,
)
from .history import ReturnSummary, list_refunds
from .ledger import ledger_for, returned_quantity
from .policy import ReturnPolicy
from .receipt import format_return_receipt
from .validator import ValidationResult, validate_return
from .writer import CommitResult, commit_return

__all__ = [
    "record_event",
    "ledger_for",
    "returned_quantity",
    "can_refund",
    "returnable_lines",
    "EligibilityResult",
    "ReturnableLine",
    "validate_return",
    "ValidationResult",
    "calculate_refund",
    "RefundCalculation",
    "RefundLine",
    "commit_return",
    "CommitResult",
    "format_return_receipt",
    "list_refunds",
    "ReturnSummary",
    "ReturnPolicy",
    "ReturnsError",
    "ReturnValidationError",
    "SaleNotFoundError",
    "ReturnNotFoundError",
    "ManagerAuthorizationRequired",
    "ManagerAuthorizationError",
    "ReturnWriteError",
]
