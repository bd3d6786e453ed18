"""
Cash Drawer Module (``pos_modules.cash``).

Drawer sessions for a till: opening float, cash sales, manual cash
movements and the end-of-shift count with its variance.
"""

from pos_modules.cash.models import (
    CashDrawerEntry,
    CashDrawerSession,
    DrawerSessionStatus,
)
from pos_modules.cash.service import CashDrawerService
from pos_modules.cash.workflows import DRAWER_SESSION_WORKFLOW

__all__ = [
    "CashDrawerEntry",
    "CashDrawerSession",
    "DrawerSessionStatus",
    "CashDrawerService",
    "DRAWER_SESSION_WORKFLOW",
]
