"""
Sales Module (``pos_modules.sales``).

Point-of-sale checkout: the in-memory cart, tender settlement, sale
persistence with stock and drawer updates, credit sale follow-up and
plain-text receipts.
"""

from pos_modules.sales.cart import Cart, CartLine
from pos_modules.sales.models import (
    CheckoutResult,
    PaymentMethod,
    PaymentStatus,
    Sale,
    SaleItem,
)
from pos_modules.sales.receipt import render_receipt
from pos_modules.sales.service import SalesService

__all__ = [
    "Cart",
    "CartLine",
    "CheckoutResult",
    "PaymentMethod",
    "PaymentStatus",
    "Sale",
    "SaleItem",
    "SalesService",
    "render_receipt",
]
