"""
Returns ORM Models (``pos_modules.returns.orm``).

SQLAlchemy persistence models for customer returns and their items.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


class CustomerReturnModel(TrackedBase):
    """
    ORM model for ``CustomerReturn``.

    Table: ``returns_returns``
    """

    __tablename__ = "returns_returns"

    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    return_date: Mapped[date]
    total_value: Mapped[Decimal]
    status: Mapped[str] = mapped_column(String(10))
    sale_id: Mapped[UUID | None] = mapped_column(ForeignKey("sales.id"), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    items: Mapped[list["ReturnItemModel"]] = relationship(
        back_populates="customer_return",
        cascade="all, delete-orphan",
        order_by="ReturnItemModel.line_no",
    )

    __table_args__ = (
        Index("idx_returns_returns_status", "status", "return_date"),
    )

    def to_dto(self):
        from pos_modules.returns.models import CustomerReturn, ReturnStatus
        return CustomerReturn(
            id=self.id,
            customer_name=self.customer_name,
            return_date=self.return_date,
            items=tuple(item.to_dto() for item in self.items),
            total_value=self.total_value,
            status=ReturnStatus(self.status),
            sale_id=self.sale_id,
            completed_at=self.completed_at,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "CustomerReturnModel":
        model = cls(
            id=dto.id,
            customer_name=dto.customer_name,
            return_date=dto.return_date,
            total_value=dto.total_value,
            status=dto.status.value,
            sale_id=dto.sale_id,
            completed_at=dto.completed_at,
            created_by_id=created_by_id,
        )
        model.items = [
            ReturnItemModel(
                line_no=line_no,
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                reason=item.reason,
                unit_price=item.unit_price,
                created_by_id=created_by_id,
            )
            for line_no, item in enumerate(dto.items, start=1)
        ]
        return model


class ReturnItemModel(TrackedBase):
    """
    ORM model for ``ReturnItem``.

    Table: ``returns_items``
    """

    __tablename__ = "returns_items"

    return_id: Mapped[UUID] = mapped_column(ForeignKey("returns_returns.id"))
    line_no: Mapped[int]
    product_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_products.id"))
    variant_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_variants.id"))
    quantity: Mapped[int]
    reason: Mapped[str] = mapped_column(String(500))
    unit_price: Mapped[Decimal]

    customer_return: Mapped["CustomerReturnModel"] = relationship(back_populates="items")

    __table_args__ = (
        Index("idx_returns_items_return", "return_id"),
    )

    def to_dto(self):
        from pos_modules.returns.models import ReturnItem
        return ReturnItem(
            product_id=self.product_id,
            variant_id=self.variant_id,
            quantity=self.quantity,
            reason=self.reason,
            unit_price=self.unit_price,
        )
