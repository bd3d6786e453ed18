"""
Purchasing Module (``pos_modules.purchasing``).

Supplier purchase orders, received into stock on completion.
"""

from pos_modules.purchasing.models import Purchase, PurchaseItem, PurchaseStatus
from pos_modules.purchasing.service import PurchasingService
from pos_modules.purchasing.workflows import PURCHASE_WORKFLOW

__all__ = [
    "Purchase",
    "PurchaseItem",
    "PurchaseStatus",
    "PurchasingService",
    "PURCHASE_WORKFLOW",
]
