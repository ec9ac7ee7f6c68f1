# returns/services/exceptions.py

"""
RETURNS SERVICE ERRORS

Centralized domain errors for the returns & refunds services.
The API layer maps each of them to one error code (returns/views.py).
"""

from __future__ import annotations

from decimal import Decimal


class ReturnsError(Exception):
    """Base exception for all returns service failures."""


class ReturnValidationError(ReturnsError):
    """Raised when a return request breaks a business rule. Carries every error."""

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class SaleNotFoundError(ReturnsError):
    """Raised when the original sale cannot be resolved."""

    def __init__(self, message: str = "Sale not found"):
        super().__init__(message)


class ReturnNotFoundError(ReturnsError):
    """Raised when a committed return cannot be resolved."""

    def __init__(self, message: str = "Return not found"):
        super().__init__(message)


class ManagerAuthorizationRequired(ReturnsError):
    """Raised when the refund total reaches the manager PIN threshold and no manager was supplied."""

    def __init__(self, *, refund_total: Decimal, threshold: Decimal):
        self.refund_total = refund_total
        self.threshold = threshold
        super().__init__(
            f"Manager authorization required for refunds of {threshold} or more "
            f"(refund total: {refund_total})"
        )


class ManagerAuthorizationError(ReturnsError):
    """Raised when the supplied manager is not allowed to approve refunds."""


class ReturnWriteError(ReturnsError):
    """Raised when persisting a return fails; nothing was written."""

    def __init__(self, message: str = "Failed to create return transaction"):
        super().__init__(message)
