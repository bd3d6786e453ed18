"""
Inventory ORM Models (``pos_modules.inventory.orm``).

SQLAlchemy persistence models for products, variants and stock movements.
Maps the frozen domain dataclasses from ``models.py`` to database tables.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


# ---------------------------------------------------------------------------
# ProductModel
# ---------------------------------------------------------------------------

class ProductModel(TrackedBase):
    """
    ORM model for ``Product``.

    Table: ``inventory_products``
    """

    __tablename__ = "inventory_products"

    name: Mapped[str] = mapped_column(String(200))
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True)
    unit: Mapped[str] = mapped_column(String(20), default="pcs")

    variants: Mapped[list["ProductVariantModel"]] = relationship(
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariantModel.sku",
    )

    __table_args__ = (
        Index("idx_inventory_products_name", "name"),
        Index("idx_inventory_products_category", "category"),
    )

    def to_dto(self):
        from pos_modules.inventory.models import Product
        return Product(
            id=self.id,
            name=self.name,
            category=self.category,
            brand=self.brand,
            unit=self.unit,
            variants=tuple(v.to_dto() for v in self.variants),
        )

    def __repr__(self) -> str:
        return f"<ProductModel(id={self.id!r}, name={self.name!r})>"


# ---------------------------------------------------------------------------
# ProductVariantModel
# ---------------------------------------------------------------------------

class ProductVariantModel(TrackedBase):
    """
    ORM model for ``ProductVariant``.

    Table: ``inventory_variants``
    """

    __tablename__ = "inventory_variants"

    product_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_products.id"))
    sku: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(200))
    price: Mapped[Decimal]
    stock: Mapped[int] = mapped_column(default=0)

    product: Mapped["ProductModel"] = relationship(back_populates="variants")

    __table_args__ = (
        UniqueConstraint("sku", name="uq_inventory_variants_sku"),
        Index("idx_inventory_variants_product", "product_id"),
    )

    def to_dto(self):
        from pos_modules.inventory.models import ProductVariant
        return ProductVariant(
            id=self.id,
            product_id=self.product_id,
            sku=self.sku,
            name=self.name,
            price=self.price,
            stock=self.stock,
        )

    def __repr__(self) -> str:
        return (
            f"<ProductVariantModel(id={self.id!r}, sku={self.sku!r}, "
            f"stock={self.stock!r})>"
        )


# ---------------------------------------------------------------------------
# StockMovementModel
# ---------------------------------------------------------------------------

class StockMovementModel(TrackedBase):
    """
    ORM model for ``StockMovement`` -- append-only stock history.

    Table: ``inventory_stock_movements``
    """

    __tablename__ = "inventory_stock_movements"

    variant_id: Mapped[UUID] = mapped_column(ForeignKey("inventory_variants.id"))
    delta: Mapped[int]
    reason: Mapped[str] = mapped_column(String(20))
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    occurred_at: Mapped[datetime]

    __table_args__ = (
        Index("idx_inventory_movements_variant", "variant_id", "occurred_at"),
    )

    def to_dto(self):
        from pos_modules.inventory.models import StockMovement, StockMovementReason
        return StockMovement(
            id=self.id,
            variant_id=self.variant_id,
            delta=self.delta,
            reason=StockMovementReason(self.reason),
            reference=self.reference,
            occurred_at=self.occurred_at,
        )

    @classmethod
    def from_dto(cls, dto, created_by_id: UUID) -> "StockMovementModel":
        return cls(
            id=dto.id,
            variant_id=dto.variant_id,
            delta=dto.delta,
            reason=dto.reason.value,
            reference=dto.reference,
            occurred_at=dto.occurred_at,
            created_by_id=created_by_id,
        )
