from .catalog import localized_name, product_summary
from .stock import adjust_stock, restock_return_line

__all__ = [
    "product_summary",
    "localized_name",
    "adjust_stock",
    "restock_return_line",
]
