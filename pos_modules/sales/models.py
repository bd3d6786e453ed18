"""
Sales Domain Models (``pos_modules.sales.models``).

Frozen dataclass value objects for completed sales.  A sale keeps a
snapshot of product names, categories and prices as they were at the
till, so later catalog edits never change a historical receipt.

* Money fields are ``Decimal`` in the store currency.
* ``total == subtotal + tax`` for every sale.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pos_engines.order_totals import OrderTotals, TenderResult


class PaymentMethod(Enum):
    CASH = "Cash"
    CARD = "Card"
    ONLINE = "Online"
    CREDIT = "Credit"

    @property
    def is_cash(self) -> bool:
        return self is PaymentMethod.CASH


class PaymentStatus(Enum):
    """Settlement state of a credit (pay-later) sale."""
    PAID = "Paid"
    DUE = "Due"
    OVERDUE = "Overdue"


@dataclass(frozen=True)
class SaleItem:
    product_id: UUID
    product_name: str
    variant_id: UUID
    variant_name: str
    quantity: int
    price: Decimal
    category: str | None = None

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


@dataclass(frozen=True)
class Sale:
    id: UUID
    sale_date: datetime
    sale_day: date
    items: tuple[SaleItem, ...]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    payment_method: PaymentMethod
    amount_tendered: Decimal
    change: Decimal
    currency: str
    customer_id: UUID | None = None
    customer_name: str | None = None
    due_date: date | None = None
    payment_status: PaymentStatus = PaymentStatus.PAID
    paid_amount: Decimal = Decimal("0")
    drawer_session_id: UUID | None = None
    tax_rate: Decimal = Decimal("0")

    @property
    def is_credit(self) -> bool:
        return self.payment_method is PaymentMethod.CREDIT

    @property
    def balance_due(self) -> Decimal:
        if not self.is_credit:
            return Decimal("0")
        return self.total - self.paid_amount

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)


@dataclass(frozen=True)
class CheckoutResult:
    sale: Sale
    totals: OrderTotals
    tender: TenderResult
