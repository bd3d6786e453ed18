"""
Cash Drawer ORM Models (``pos_modules.cash.orm``).

SQLAlchemy persistence models for drawer sessions and their manual
cash-in / cash-out entries.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


class CashDrawerSessionModel(TrackedBase):
    """
    ORM model for ``CashDrawerSession``.

    Table: ``cash_drawer_sessions``
    """

    __tablename__ = "cash_drawer_sessions"

    start_time: Mapped[datetime]
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)
    opening_float: Mapped[Decimal]
    cash_sales: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    closing_float: Mapped[Decimal | None] = mapped_column(nullable=True)
    expected_cash: Mapped[Decimal | None] = mapped_column(nullable=True)
    variance: Mapped[Decimal | None] = mapped_column(nullable=True)
    status: Mapped[str] = mapped_column(String(10))

    entries: Mapped[list["CashDrawerEntryModel"]] = relationship(
        back_populates="drawer_session",
        cascade="all, delete-orphan",
        order_by="CashDrawerEntryModel.timestamp",
    )

    __table_args__ = (
        Index("idx_cash_drawer_sessions_status", "status"),
        Index("idx_cash_drawer_sessions_start", "start_time"),
    )

    def to_dto(self):
        from pos_modules.cash.models import CashDrawerSession, DrawerSessionStatus
        return CashDrawerSession(
            id=self.id,
            start_time=self.start_time,
            opening_float=self.opening_float,
            cash_sales=self.cash_sales,
            status=DrawerSessionStatus(self.status),
            entries=tuple(e.to_dto() for e in self.entries),
            end_time=self.end_time,
            closing_float=self.closing_float,
            expected_cash=self.expected_cash,
            variance=self.variance,
        )

    def __repr__(self) -> str:
        return (
            f"<CashDrawerSessionModel(id={self.id!r}, status={self.status!r}, "
            f"opening_float={self.opening_float!r})>"
        )


class CashDrawerEntryModel(TrackedBase):
    """
    ORM model for ``CashDrawerEntry``.

    Table: ``cash_drawer_entries``
    """

    __tablename__ = "cash_drawer_entries"

    session_id: Mapped[UUID] = mapped_column(ForeignKey("cash_drawer_sessions.id"))
    entry_type: Mapped[str] = mapped_column(String(3))
    amount: Mapped[Decimal]
    reason: Mapped[str] = mapped_column(String(500))
    timestamp: Mapped[datetime]

    drawer_session: Mapped["CashDrawerSessionModel"] = relationship(
        back_populates="entries",
    )

    __table_args__ = (
        Index("idx_cash_drawer_entries_session", "session_id"),
    )

    def to_dto(self):
        from pos_engines.cash_drawer import MovementDirection
        from pos_modules.cash.models import CashDrawerEntry
        return CashDrawerEntry(
            id=self.id,
            session_id=self.session_id,
            entry_type=MovementDirection(self.entry_type),
            amount=self.amount,
            reason=self.reason,
            timestamp=self.timestamp,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "CashDrawerEntryModel":
        return cls(
            id=dto.id,
            session_id=dto.session_id,
            entry_type=dto.entry_type.value,
            amount=dto.amount,
            reason=dto.reason,
            timestamp=dto.timestamp,
            created_by_id=created_by_id,
        )
