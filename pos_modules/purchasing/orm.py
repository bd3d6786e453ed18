"""
Purchasing ORM Models (``pos_modules.purchasing.orm``).

SQLAlchemy persistence models for purchase orders and their items.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


class PurchaseModel(TrackedBase):
    """
    ORM model for ``Purchase``.

    Table: ``purchasing_purchases``
    """

    __tablename__ = "purchasing_purchases"

    supplier_name: Mapped[str] = mapped_column(String(200))
    purchase_date: Mapped[date]
    total_cost: Mapped[Decimal]
    status: Mapped[str] = mapped_column(String(10))
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    items: Mapped[list["PurchaseItemModel"]] = relationship(
        back_populates="purchase",
        cascade="all, delete-orphan",
        order_by="PurchaseItemModel.line_no",
    )

    __table_args__ = (
        Index("idx_purchasing_purchases_status", "status", "purchase_date"),
    )

    def to_dto(self):
        from pos_modules.purchasing.models import Purchase, PurchaseStatus
        return Purchase(
            id=self.id,
            supplier_name=self.supplier_name,
            purchase_date=self.purchase_date,
            items=tuple(item.to_dto() for item in self.items),
            total_cost=self.total_cost,
            status=PurchaseStatus(self.status),
            reference=self.reference,
            completed_at=self.completed_at,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "PurchaseModel":
        purchase = cls(
            id=dto.id,
            supplier_name=dto.supplier_name,
            purchase_date=dto.purchase_date,
            total_cost=dto.total_cost,
            status=dto.status.value,
            reference=dto.reference,
            completed_at=dto.completed_at,
            created_by_id=created_by_id,
        )
        purchase.items = [
            PurchaseItemModel(
                line_no=line_no,
                product_id=item.product_id,
                variant_id=item.variant_id,
                quantity=item.quantity,
                cost=item.cost,
                batch_number=item.batch_number,
                expiry_date=item.expiry_date,
                created_by_id=created_by_id,
            )
            for line_no, item in enumerate(dto.items, start=1)
        ]
        return purchase

    def __repr__(self) -> str:
        return (
            f"<PurchaseModel(id={self.id!r}, supplier={self.supplier_name!r}, "
            f"status={self.status!r})>"
        )


class PurchaseItemModel(TrackedBase):
    """
    ORM model for ``PurchaseItem``.

    Table: ``purchasing_items``
    """

    __tablename__ = "purchasing_items"

    purchase_id: Mapped[UUID] = mapped_column(ForeignKey("purchasing_purchases.id"))
    line_no: Mapped[int]
    product_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_products.id"))
    variant_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_variants.id"))
    quantity: Mapped[int]
    cost: Mapped[Decimal]
    batch_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    expiry_date: Mapped[date | None] = mapped_column(nullable=True)

    purchase: Mapped["PurchaseModel"] = relationship(back_populates="items")

    __table_args__ = (
        Index("idx_purchasing_items_purchase", "purchase_id"),
        Index("idx_purchasing_items_product", "product_id"),
    )

    def to_dto(self):
        from pos_modules.purchasing.models import PurchaseItem
        return PurchaseItem(
            product_id=self.product_id,
            variant_id=self.variant_id,
            quantity=self.quantity,
            cost=self.cost,
            batch_number=self.batch_number,
            expiry_date=self.expiry_date,
        )
