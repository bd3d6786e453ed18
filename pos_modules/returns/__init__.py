"""
Returns Module (``pos_modules.returns``).

Customer returns, valued at selling price and restocked on completion.
"""

from pos_modules.returns.models import CustomerReturn, ReturnItem, ReturnStatus
from pos_modules.returns.service import ReturnsService
from pos_modules.returns.workflows import RETURN_WORKFLOW

__all__ = [
    "CustomerReturn",
    "ReturnItem",
    "ReturnStatus",
    "ReturnsService",
    "RETURN_WORKFLOW",
]
