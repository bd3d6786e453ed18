"""
Returns Domain Models (``pos_modules.returns.models``).

Customer returns.  Each item is valued at the variant's selling price when
the return is recorded; the total value of completed returns is the loss
shown on the sales report.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ReturnStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class ReturnItem:
    product_id: UUID
    variant_id: UUID
    quantity: int
    reason: str
    unit_price: Decimal | None = None

    def __post_init__(self):
        if self.quantity <= 0:
            raise ValueError("Quantity must be positive")
        if not self.reason or not self.reason.strip():
            raise ValueError("A reason is required for each returned item")

    @property
    def value(self) -> Decimal:
        return (self.unit_price or Decimal("0")) * self.quantity


@dataclass(frozen=True)
class CustomerReturn:
    id: UUID
    customer_name: str | None
    return_date: date
    items: tuple[ReturnItem, ...]
    total_value: Decimal
    status: ReturnStatus
    sale_id: UUID | None = None
    completed_at: datetime | None = None
