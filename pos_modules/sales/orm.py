"""
Sales ORM Models (``pos_modules.sales.orm``).

SQLAlchemy persistence models for completed sales and their line items.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


class SaleModel(TrackedBase):
    """
    ORM model for ``Sale``.

    Table: ``sales``
    """

    __tablename__ = "sales"

    sale_date: Mapped[datetime]
    sale_day: Mapped[date]
    subtotal: Mapped[Decimal]
    tax: Mapped[Decimal]
    tax_rate: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total: Mapped[Decimal]
    payment_method: Mapped[str] = mapped_column(String(10))
    amount_tendered: Mapped[Decimal]
    change: Mapped[Decimal]
    currency: Mapped[str] = mapped_column(String(3))
    customer_id: Mapped[UUID | None] = mapped_column(nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    due_date: Mapped[date | None] = mapped_column(nullable=True)
    payment_status: Mapped[str] = mapped_column(String(10))
    paid_amount: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    drawer_session_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cash_drawer_sessions.id"), nullable=True,
    )

    items: Mapped[list["SaleItemModel"]] = relationship(
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleItemModel.line_no",
    )

    __table_args__ = (
        Index("idx_sales_day", "sale_day"),
        Index("idx_sales_payment_status", "payment_method", "payment_status"),
    )

    def to_dto(self):
        from pos_modules.sales.models import PaymentMethod, PaymentStatus, Sale
        return Sale(
            id=self.id,
            sale_date=self.sale_date,
            sale_day=self.sale_day,
            items=tuple(item.to_dto() for item in self.items),
            subtotal=self.subtotal,
            tax=self.tax,
            tax_rate=self.tax_rate,
            total=self.total,
            payment_method=PaymentMethod(self.payment_method),
            amount_tendered=self.amount_tendered,
            change=self.change,
            currency=self.currency,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            due_date=self.due_date,
            payment_status=PaymentStatus(self.payment_status),
            paid_amount=self.paid_amount,
            drawer_session_id=self.drawer_session_id,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "SaleModel":
        sale = cls(
            id=dto.id,
            sale_date=dto.sale_date,
            sale_day=dto.sale_day,
            subtotal=dto.subtotal,
            tax=dto.tax,
            tax_rate=dto.tax_rate,
            total=dto.total,
            payment_method=dto.payment_method.value,
            amount_tendered=dto.amount_tendered,
            change=dto.change,
            currency=dto.currency,
            customer_id=dto.customer_id,
            customer_name=dto.customer_name,
            due_date=dto.due_date,
            payment_status=dto.payment_status.value,
            paid_amount=dto.paid_amount,
            drawer_session_id=dto.drawer_session_id,
            created_by_id=created_by_id,
        )
        sale.items = [
            SaleItemModel.from_dto(item, line_no, created_by_id)
            for line_no, item in enumerate(dto.items, start=1)
        ]
        return sale

    def __repr__(self) -> str:
        return (
            f"<SaleModel(id={self.id!r}, total={self.total!r}, "
            f"payment_method={self.payment_method!r})>"
        )


class SaleItemModel(TrackedBase):
    """
    ORM model for ``SaleItem``.

    Table: ``sales_items``
    """

    __tablename__ = "sales_items"

    sale_id: Mapped[UUID] = mapped_column(ForeignKey("sales.id"))
    line_no: Mapped[int]
    product_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_products.id"))
    variant_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_variants.id"))
    product_name: Mapped[str] = mapped_column(String(200))
    variant_name: Mapped[str] = mapped_column(String(200))
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    quantity: Mapped[int]
    price: Mapped[Decimal]

    sale: Mapped["SaleModel"] = relationship(back_populates="items")

    __table_args__ = (
        Index("idx_sales_items_sale", "sale_id"),
        Index("idx_sales_items_product", "product_id"),
    )

    def to_dto(self):
        from pos_modules.sales.models import SaleItem
        return SaleItem(
            product_id=self.product_id,
            product_name=self.product_name,
            variant_id=self.variant_id,
            variant_name=self.variant_name,
            quantity=self.quantity,
            price=self.price,
            category=self.category,
        )

    @classmethod
    def from_dto(cls, dto, line_no: int, created_by_id: UUID) -> "SaleItemModel":
        return cls(
            line_no=line_no,
            product_id=dto.product_id,
            variant_id=dto.variant_id,
            product_name=dto.product_name,
            variant_name=dto.variant_name,
            category=dto.category,
            quantity=dto.quantity,
            price=dto.price,
            created_by_id=created_by_id,
        )
