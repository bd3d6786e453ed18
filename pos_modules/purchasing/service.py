"""
pos_modules.purchasing.service
==============================

Responsibility:
    Purchase orders: record what was ordered from a supplier and, on
    completion, receive the quantities into stock.  Also answers "what did
    this product last cost us", which the sales report needs.

Invariants enforced:
    - total_cost = sum(quantity x cost) over the items.
    - Stock is received exactly once, on the Pending -> Completed transition.
    - Every item references an existing variant of the named product.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.exceptions import PurchaseNotFoundError
from pos_kernel.logging_config import get_logger
from pos_modules.inventory.models import StockMovementReason
from pos_modules.inventory.service import InventoryService
from pos_modules.purchasing.models import (
    Purchase,
    PurchaseItem,
    PurchaseStatus,
    purchase_total,
)
from pos_modules.purchasing.orm import PurchaseItemModel, PurchaseModel
from pos_modules.purchasing.workflows import PURCHASE_WORKFLOW

logger = get_logger("modules.purchasing.service")


class PurchasingService:
    """
    Purchase order lifecycle.

    Transaction boundary:
        Commits on success, rolls back on failure.  Stock receipt runs
        through an ``InventoryService`` sharing this session.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._actor_id = actor_id
        self._inventory = InventoryService(
            session, self._clock, actor_id=actor_id, auto_commit=False,
        )

    def create_purchase(
        self,
        supplier_name: str,
        items: Sequence[PurchaseItem],
        purchase_date: date | None = None,
        reference: str | None = None,
        complete: bool = False,
    ) -> Purchase:
        """Record a purchase order; ``complete=True`` also receives it."""
        if not supplier_name or not supplier_name.strip():
            raise ValueError("Supplier is required")
        if not items:
            raise ValueError("A purchase needs at least one item")
        try:
            for item in items:
                self._inventory.get_variant(item.variant_id, item.product_id)
            purchase = Purchase(
                id=uuid4(),
                supplier_name=supplier_name.strip(),
                purchase_date=purchase_date or self._clock.today(),
                items=tuple(items),
                total_cost=purchase_total(tuple(items)),
                status=PurchaseStatus(PURCHASE_WORKFLOW.initial_state),
                reference=reference,
            )
            model = PurchaseModel.from_dto(purchase, self._actor_id)
            self._session.add(model)
            self._session.flush()
            logger.info("purchase_created", extra={
                "purchase_id": str(purchase.id),
                "item_count": len(items),
                "total_cost": str(purchase.total_cost),
            })
            if complete:
                self._complete(model)
            self._session.commit()
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def complete_purchase(self, purchase_id: UUID) -> Purchase:
        """Receive a pending purchase into stock."""
        try:
            model = self._get_model(purchase_id)
            self._complete(model)
            self._session.commit()
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def _complete(self, model: PurchaseModel) -> None:
        model.status = PURCHASE_WORKFLOW.transition(model.status, "complete")
        model.completed_at = self._clock.now()
        model.updated_by_id = self._actor_id
        for item in model.items:
            self._inventory.adjust_stock(
                item.variant_id,
                item.quantity,
                reason=StockMovementReason.PURCHASE,
                reference=str(model.id),
                product_id=item.product_id,
            )
        logger.info("purchase_completed", extra={
            "purchase_id": str(model.id),
            "units_received": sum(item.quantity for item in model.items),
        })

    def cancel_purchase(self, purchase_id: UUID) -> Purchase:
        try:
            model = self._get_model(purchase_id)
            model.status = PURCHASE_WORKFLOW.transition(model.status, "cancel")
            model.updated_by_id = self._actor_id
            self._session.commit()
            logger.info("purchase_cancelled", extra={"purchase_id": str(purchase_id)})
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def get_purchase(self, purchase_id: UUID) -> Purchase:
        return self._get_model(purchase_id).to_dto()

    def list_purchases(self, status: PurchaseStatus | None = None) -> list[Purchase]:
        stmt = select(PurchaseModel).order_by(
            PurchaseModel.purchase_date, PurchaseModel.created_at,
        )
        if status is not None:
            stmt = stmt.where(PurchaseModel.status == status.value)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def latest_unit_costs(self) -> dict[UUID, Decimal]:
        """Unit cost of each product on its most recent completed purchase."""
        rows = self._session.execute(
            select(PurchaseItemModel.product_id, PurchaseItemModel.cost)
            .join(PurchaseModel, PurchaseItemModel.purchase_id == PurchaseModel.id)
            .where(PurchaseModel.status == PurchaseStatus.COMPLETED.value)
            .order_by(
                PurchaseModel.purchase_date,
                PurchaseModel.completed_at,
                PurchaseItemModel.line_no,
            )
        ).all()
        costs: dict[UUID, Decimal] = {}
        for product_id, cost in rows:
            costs[product_id] = cost
        return costs

    def _get_model(self, purchase_id: UUID) -> PurchaseModel:
        model = self._session.get(PurchaseModel, purchase_id)
        if model is None:
            raise PurchaseNotFoundError(str(purchase_id))
        return model
