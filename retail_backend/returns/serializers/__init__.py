from .command import (
    RefundPaymentsSerializer,
    ReturnCommitCommandSerializer,
    ReturnCommitLineSerializer,
    ReturnItemsCommandSerializer,
    ReturnItemSerializer,
)
from .read import (
    CommitResultReadSerializer,
    EligibilityReadSerializer,
    RefundCalculationReadSerializer,
    ReturnableLineReadSerializer,
    ReturnSummaryReadSerializer,
    ValidationReadSerializer,
)

__all__ = [
    "ReturnItemSerializer",
    "ReturnCommitLineSerializer",
    "ReturnItemsCommandSerializer",
    "ReturnCommitCommandSerializer",
    "RefundPaymentsSerializer",
    "EligibilityReadSerializer",
    "ReturnableLineReadSerializer",
    "ValidationReadSerializer",
    "RefundCalculationReadSerializer",
    "CommitResultReadSerializer",
    "ReturnSummaryReadSerializer",
]
