"""
Cash Drawer Domain Models (``pos_modules.cash.models``).

A drawer session runs from opening (counting in the float) to closing
(counting the drawer and recording the variance).  Between the two, cash
sales accumulate on the session and manual cash-in / cash-out entries are
recorded with a reason.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pos_engines.cash_drawer import MovementDirection


class DrawerSessionStatus(Enum):
    ACTIVE = "Active"
    CLOSED = "Closed"


@dataclass(frozen=True)
class CashDrawerEntry:
    """A manual cash-in or cash-out."""
    id: UUID
    session_id: UUID
    entry_type: MovementDirection
    amount: Decimal
    reason: str
    timestamp: datetime


@dataclass(frozen=True)
class CashDrawerSession:
    id: UUID
    start_time: datetime
    opening_float: Decimal
    cash_sales: Decimal
    status: DrawerSessionStatus
    entries: tuple[CashDrawerEntry, ...] = ()
    end_time: datetime | None = None
    closing_float: Decimal | None = None
    expected_cash: Decimal | None = None
    variance: Decimal | None = None

    @property
    def is_active(self) -> bool:
        return self.status == DrawerSessionStatus.ACTIVE

    @property
    def cash_in(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type is MovementDirection.IN),
            Decimal("0"),
        )

    @property
    def cash_out(self) -> Decimal:
        return sum(
            (e.amount for e in self.entries if e.entry_type is MovementDirection.OUT),
            Decimal("0"),
        )
