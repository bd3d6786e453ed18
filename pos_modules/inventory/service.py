"""
pos_modules.inventory.service
=============================

Responsibility:
    Product catalog and stock levels.  Every stock change is written as a
    ``StockMovementModel`` row next to the variant update, so the current
    stock of a variant always equals the sum of its movements.

Transaction boundary:
    With ``auto_commit=True`` (the default) each public method commits on
    success and rolls back on failure.  Other services (sales, purchasing,
    returns) construct an ``InventoryService`` with ``auto_commit=False``
    on their own session so stock changes share their transaction.

Failure modes:
    - ProductNotFoundError / VariantNotFoundError for unknown IDs.
    - InsufficientStockError when a movement would make stock negative.
    - ValueError for invalid input (negative price, zero movement).

Usage::

    service = InventoryService(session, clock)
    product = service.create_product(
        "Cola", category="Drinks",
        variants=[VariantSpec(sku="COLA-330", name="330ml", price=Decimal("2.99"), stock=24)],
    )
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    VariantNotFoundError,
)
from pos_kernel.logging_config import get_logger
from pos_modules.inventory.models import (
    Product,
    ProductVariant,
    StockMovement,
    StockMovementReason,
    VariantSpec,
)
from pos_modules.inventory.orm import (
    ProductModel,
    ProductVariantModel,
    StockMovementModel,
)

logger = get_logger("modules.inventory.service")


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class InventoryService:
    """
    Catalog maintenance and stock movements.

    Contract:
        Stock is never negative.  Every public mutating method either commits
        (when ``auto_commit``) or leaves its changes flushed in the caller's
        transaction.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
        auto_commit: bool = True,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._actor_id = actor_id
        self._auto_commit = auto_commit

    def _commit(self) -> None:
        if self._auto_commit:
            self._session.commit()
        else:
            self._session.flush()

    def _rollback(self) -> None:
        if self._auto_commit:
            self._session.rollback()

    # =========================================================================
    # Catalog
    # =========================================================================

    def create_product(
        self,
        name: str,
        category: str | None = None,
        brand: str | None = None,
        unit: str = "pcs",
        variants: Sequence[VariantSpec] = (),
    ) -> Product:
        """Create a product together with its initial variants."""
        if not name or not name.strip():
            raise ValueError("Product name is required")
        try:
            product = ProductModel(
                id=uuid4(),
                name=name.strip(),
                category=category,
                brand=brand,
                unit=unit,
                created_by_id=self._actor_id,
            )
            self._session.add(product)
            for spec in variants:
                self._new_variant(product, spec)
            self._session.flush()
            for variant in product.variants:
                if variant.stock:
                    self._record_movement(
                        variant, variant.stock, StockMovementReason.ADJUSTMENT,
                        reference="opening stock",
                    )
            self._commit()
            logger.info("product_created", extra={
                "product_id": str(product.id),
                "variant_count": len(product.variants),
                "category": category,
            })
            return product.to_dto()
        except Exception:
            self._rollback()
            raise

    def add_variant(self, product_id: UUID, spec: VariantSpec) -> ProductVariant:
        try:
            product = self._get_product_model(product_id)
            variant = self._new_variant(product, spec)
            self._session.flush()
            if variant.stock:
                self._record_movement(
                    variant, variant.stock, StockMovementReason.ADJUSTMENT,
                    reference="opening stock",
                )
            self._commit()
            logger.info("variant_added", extra={
                "product_id": str(product_id),
                "variant_id": str(variant.id),
                "sku": variant.sku,
            })
            return variant.to_dto()
        except Exception:
            self._rollback()
            raise

    def _new_variant(self, product: ProductModel, spec: VariantSpec) -> ProductVariantModel:
        variant = ProductVariantModel(
            id=uuid4(),
            sku=spec.sku.strip(),
            name=spec.name.strip(),
            price=spec.price,
            stock=spec.stock,
            created_by_id=self._actor_id,
        )
        product.variants.append(variant)
        return variant

    def get_product(self, product_id: UUID) -> Product:
        return self._get_product_model(product_id).to_dto()

    def get_variant(self, variant_id: UUID, product_id: UUID | None = None) -> ProductVariant:
        return self._get_variant_model(variant_id, product_id).to_dto()

    def list_products(self) -> list[Product]:
        rows = self._session.scalars(
            select(ProductModel).order_by(ProductModel.name)
        ).all()
        return [row.to_dto() for row in rows]

    def search_products(self, term: str) -> list[Product]:
        """Case-insensitive substring match on name, category, brand, SKU
        and variant name.  A blank term returns the whole catalog."""
        term = (term or "").strip()
        if not term:
            return self.list_products()
        pattern = _like_pattern(term)
        stmt = (
            select(ProductModel)
            .outerjoin(ProductModel.variants)
            .where(or_(
                ProductModel.name.ilike(pattern, escape="\\"),
                ProductModel.category.ilike(pattern, escape="\\"),
                ProductModel.brand.ilike(pattern, escape="\\"),
                ProductVariantModel.sku.ilike(pattern, escape="\\"),
                ProductVariantModel.name.ilike(pattern, escape="\\"),
            ))
            .distinct()
            .order_by(ProductModel.name)
        )
        rows = self._session.scalars(stmt).all()
        logger.debug("products_searched", extra={"term": term, "matches": len(rows)})
        return [row.to_dto() for row in rows]

    def set_price(self, variant_id: UUID, price: Decimal) -> ProductVariant:
        if price < 0:
            raise ValueError("Price cannot be negative")
        try:
            variant = self._get_variant_model(variant_id)
            old_price = variant.price
            variant.price = price
            variant.updated_by_id = self._actor_id
            self._commit()
            logger.info("variant_price_changed", extra={
                "variant_id": str(variant_id),
                "old_price": str(old_price),
                "new_price": str(price),
            })
            return variant.to_dto()
        except Exception:
            self._rollback()
            raise

    # =========================================================================
    # Stock
    # =========================================================================

    def adjust_stock(
        self,
        variant_id: UUID,
        delta: int,
        reason: StockMovementReason = StockMovementReason.ADJUSTMENT,
        reference: str | None = None,
        product_id: UUID | None = None,
    ) -> ProductVariant:
        """
        Move stock up or down by ``delta`` units.

        Raises:
            InsufficientStockError: if the result would be negative.
            ValueError: if ``delta`` is zero or not an integer.
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise ValueError(f"Stock movement must be a non-zero integer, got {delta!r}")
        try:
            variant = self._get_variant_model(variant_id, product_id, for_update=True)
            if variant.stock + delta < 0:
                logger.warning("stock_insufficient", extra={
                    "variant_id": str(variant_id),
                    "available": variant.stock,
                    "requested": -delta,
                })
                raise InsufficientStockError(
                    str(variant_id), variant.sku, variant.stock, -delta,
                )
            variant.stock += delta
            variant.updated_by_id = self._actor_id
            self._record_movement(variant, delta, reason, reference)
            self._commit()
            logger.info("stock_adjusted", extra={
                "variant_id": str(variant_id),
                "delta": delta,
                "reason": reason.value,
                "stock": variant.stock,
            })
            return variant.to_dto()
        except Exception:
            self._rollback()
            raise

    def stock_movements(self, variant_id: UUID) -> list[StockMovement]:
        rows = self._session.scalars(
            select(StockMovementModel)
            .where(StockMovementModel.variant_id == variant_id)
            .order_by(StockMovementModel.occurred_at, StockMovementModel.created_at)
        ).all()
        return [row.to_dto() for row in rows]

    def _record_movement(
        self,
        variant: ProductVariantModel,
        delta: int,
        reason: StockMovementReason,
        reference: str | None = None,
    ) -> None:
        movement = StockMovement(
            id=uuid4(),
            variant_id=variant.id,
            delta=delta,
            reason=reason,
            reference=reference,
            occurred_at=self._clock.now(),
        )
        self._session.add(StockMovementModel.from_dto(movement, self._actor_id))

    # =========================================================================
    # Lookups
    # =========================================================================

    def _get_product_model(self, product_id: UUID) -> ProductModel:
        product = self._session.get(ProductModel, product_id)
        if product is None:
            raise ProductNotFoundError(str(product_id))
        return product

    def _get_variant_model(
        self,
        variant_id: UUID,
        product_id: UUID | None = None,
        for_update: bool = False,
    ) -> ProductVariantModel:
        variant = self._session.get(
            ProductVariantModel, variant_id, with_for_update=for_update,
        )
        if variant is None:
            raise VariantNotFoundError(str(variant_id))
        if product_id is not None and variant.product_id != product_id:
            raise VariantNotFoundError(str(variant_id), str(product_id))
        return variant
