"""
pos_modules.returns.service
===========================

Responsibility:
    Customer returns: value the returned items at their current selling
    price and, on completion, put them back into stock.  Returns are
    recorded as completed by default, which is how the counter handles
    them; a return can also be left Pending for a manager to inspect.

Invariants enforced:
    - total_value = sum(unit price x quantity), prices captured at creation.
    - Stock is restocked exactly once, on Pending -> Completed.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.exceptions import ReturnNotFoundError
from pos_kernel.logging_config import get_logger
from pos_modules.inventory.models import StockMovementReason
from pos_modules.inventory.service import InventoryService
from pos_modules.returns.models import CustomerReturn, ReturnItem, ReturnStatus
from pos_modules.returns.orm import CustomerReturnModel
from pos_modules.returns.workflows import RETURN_WORKFLOW

logger = get_logger("modules.returns.service")


class ReturnsService:
    """
    Customer return lifecycle.

    Transaction boundary:
        Commits on success, rolls back on failure.
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

    def create_return(
        self,
        items: Sequence[ReturnItem],
        customer_name: str | None = None,
        return_date: date | None = None,
        sale_id: UUID | None = None,
        complete: bool = True,
    ) -> CustomerReturn:
        """Record a return; by default it is completed and restocked at once."""
        if not items:
            raise ValueError("A return needs at least one item")
        try:
            priced: list[ReturnItem] = []
            for item in items:
                variant = self._inventory.get_variant(item.variant_id, item.product_id)
                priced.append(replace(item, unit_price=variant.price))
            total_value = sum((item.value for item in priced), Decimal("0"))

            record = CustomerReturn(
                id=uuid4(),
                customer_name=customer_name,
                return_date=return_date or self._clock.today(),
                items=tuple(priced),
                total_value=total_value,
                status=ReturnStatus(RETURN_WORKFLOW.initial_state),
                sale_id=sale_id,
            )
            model = CustomerReturnModel.from_dto(record, self._actor_id)
            self._session.add(model)
            self._session.flush()
            logger.info("return_created", extra={
                "return_id": str(record.id),
                "item_count": len(priced),
                "total_value": str(total_value),
            })
            if complete:
                self._complete(model)
            self._session.commit()
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def complete_return(self, return_id: UUID) -> CustomerReturn:
        try:
            model = self._get_model(return_id)
            self._complete(model)
            self._session.commit()
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def _complete(self, model: CustomerReturnModel) -> None:
        model.status = RETURN_WORKFLOW.transition(model.status, "complete")
        model.completed_at = self._clock.now()
        model.updated_by_id = self._actor_id
        for item in model.items:
            self._inventory.adjust_stock(
                item.variant_id,
                item.quantity,
                reason=StockMovementReason.RETURN,
                reference=str(model.id),
                product_id=item.product_id,
            )
        logger.info("return_completed", extra={
            "return_id": str(model.id),
            "total_value": str(model.total_value),
        })

    def cancel_return(self, return_id: UUID) -> CustomerReturn:
        try:
            model = self._get_model(return_id)
            model.status = RETURN_WORKFLOW.transition(model.status, "cancel")
            model.updated_by_id = self._actor_id
            self._session.commit()
            logger.info("return_cancelled", extra={"return_id": str(return_id)})
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def get_return(self, return_id: UUID) -> CustomerReturn:
        return self._get_model(return_id).to_dto()

    def list_returns(
        self,
        status: ReturnStatus | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CustomerReturn]:
        stmt = select(CustomerReturnModel).order_by(
            CustomerReturnModel.return_date, CustomerReturnModel.created_at,
        )
        if status is not None:
            stmt = stmt.where(CustomerReturnModel.status == status.value)
        if start is not None:
            stmt = stmt.where(CustomerReturnModel.return_date >= start)
        if end is not None:
            stmt = stmt.where(CustomerReturnModel.return_date <= end)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def _get_model(self, return_id: UUID) -> CustomerReturnModel:
        model = self._session.get(CustomerReturnModel, return_id)
        if model is None:
            raise ReturnNotFoundError(str(return_id))
        return model
