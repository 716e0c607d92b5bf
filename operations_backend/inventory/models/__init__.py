"""
PATH: inventory/models/__init__.py

Inventory models export surface.
"""

from .stock_movement import StockMovement
from .variant import ProductVariant

__all__ = [
    "ProductVariant",
    "StockMovement",
]
