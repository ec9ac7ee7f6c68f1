"""
PATH: products/models/__init__.py

Products models export surface.
"""

from .inventory_movement import InventoryMovement
from .product import Product

__all__ = [
    "Product",
    "InventoryMovement",
]
