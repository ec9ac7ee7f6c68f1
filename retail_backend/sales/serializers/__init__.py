from .sale import SaleSerializer
from .sale_line import SaleLineSerializer

__all__ = [
    "SaleSerializer",
    "SaleLineSerializer",
]
