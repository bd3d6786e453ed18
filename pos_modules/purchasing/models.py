"""
Purchasing Domain Models (``pos_modules.purchasing.models``).

Purchase orders from suppliers.  Stock is received only when a purchase is
completed; the unit cost on the latest completed purchase of a product is
the cost used by sales reports.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class PurchaseStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class PurchaseItem:
    product_id: UUID
    variant_id: UUID
    quantity: int
    cost: Decimal
    batch_number: str | None = None
    expiry_date: date | None = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")
        if self.cost < 0:
            raise ValueError("Cost cannot be negative")

    @property
    def line_cost(self) -> Decimal:
        return self.cost * self.quantity


@dataclass(frozen=True)
class Purchase:
    id: UUID
    supplier_name: str
    purchase_date: date
    items: tuple[PurchaseItem, ...]
    total_cost: Decimal
    status: PurchaseStatus
    reference: str | None = None
    completed_at: datetime | None = None


def purchase_total(items: tuple[PurchaseItem, ...]) -> Decimal:
    """Total cost = sum(quantity x cost)."""
    return sum((item.line_cost for item in items), Decimal("0"))
