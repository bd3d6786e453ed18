"""
Inventory Module (``pos_modules.inventory``).

Product catalog (products and their sellable variants), catalog search and
stock movements.  Sales, purchasing and returns move stock through
``InventoryService`` so every change leaves a movement record.
"""

from pos_modules.inventory.models import (
    Product,
    ProductVariant,
    StockMovement,
    StockMovementReason,
    VariantSpec,
)
from pos_modules.inventory.service import InventoryService

__all__ = [
    "Product",
    "ProductVariant",
    "StockMovement",
    "StockMovementReason",
    "VariantSpec",
    "InventoryService",
]
