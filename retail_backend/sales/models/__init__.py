# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .sale import Sale
from .sale_line import SaleLine

__all__ = [
    "Sale",
    "SaleLine",
]
