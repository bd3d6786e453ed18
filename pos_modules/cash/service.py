"""
pos_modules.cash.service
========================

Responsibility:
    Cash drawer sessions: open with a float, record cash sales and manual
    cash movements, close with a count.  Expected cash and variance come
    from ``pos_engines.cash_drawer.CashDrawerCalculator``; this module holds
    no arithmetic of its own beyond accumulating cash sales.

Invariants enforced:
    - At most one session is Active at any time.
    - A closed session is never modified again (workflow terminal state).
    - variance = counted - (opening + cash sales + cash in - cash out).

Failure modes:
    - CashDrawerDisabledError when the store has the drawer switched off.
    - ActiveSessionExistsError on opening a second session.
    - NoActiveSessionError for entries, cash sales or closing without one.

Usage::

    drawer = CashDrawerService(session, settings, clock)
    drawer.open_session(Decimal("100.00"))
    drawer.add_entry(MovementDirection.OUT, Decimal("20.00"), "Milk for staff room")
    closed = drawer.close_session(Decimal("80.00"))
    closed.variance  # Decimal("0.00")
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_config.schema import StoreSettings
from pos_engines.cash_drawer import CashDrawerCalculator, DrawerMovement, MovementDirection
from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.domain.values import Money
from pos_kernel.exceptions import (
    ActiveSessionExistsError,
    CashDrawerDisabledError,
    DrawerSessionNotFoundError,
    NoActiveSessionError,
)
from pos_kernel.logging_config import LogContext, get_logger
from pos_modules.cash.models import (
    CashDrawerEntry,
    CashDrawerSession,
    DrawerSessionStatus,
)
from pos_modules.cash.orm import CashDrawerEntryModel, CashDrawerSessionModel
from pos_modules.cash.workflows import DRAWER_SESSION_WORKFLOW

logger = get_logger("modules.cash.service")


class CashDrawerService:
    """
    Drawer session lifecycle and reconciliation.

    Transaction boundary:
        Commits on success and rolls back on failure when ``auto_commit``;
        otherwise flushes into the caller's transaction (used by checkout).
    """

    def __init__(
        self,
        session: Session,
        settings: StoreSettings,
        clock: Clock | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
        auto_commit: bool = True,
    ):
        self._session = session
        self._settings = settings
        self._clock = clock or SystemClock()
        self._actor_id = actor_id
        self._auto_commit = auto_commit
        self._calculator = CashDrawerCalculator()

    def _commit(self) -> None:
        if self._auto_commit:
            self._session.commit()
        else:
            self._session.flush()

    def _rollback(self) -> None:
        if self._auto_commit:
            self._session.rollback()

    def _money(self, amount: Decimal) -> Money:
        return Money.of(amount, self._settings.currency)

    # =========================================================================
    # Queries
    # =========================================================================

    def _active_model(self) -> CashDrawerSessionModel | None:
        return self._session.scalars(
            select(CashDrawerSessionModel)
            .where(CashDrawerSessionModel.status == DrawerSessionStatus.ACTIVE.value)
            .order_by(CashDrawerSessionModel.start_time.desc())
        ).first()

    def _require_active(self) -> CashDrawerSessionModel:
        drawer = self._active_model()
        if drawer is None:
            raise NoActiveSessionError()
        return drawer

    def active_session(self) -> CashDrawerSession | None:
        drawer = self._active_model()
        return drawer.to_dto() if drawer is not None else None

    def get_session(self, session_id: UUID) -> CashDrawerSession:
        drawer = self._session.get(CashDrawerSessionModel, session_id)
        if drawer is None:
            raise DrawerSessionNotFoundError(str(session_id))
        return drawer.to_dto()

    def list_sessions(self) -> list[CashDrawerSession]:
        """All sessions, most recent first."""
        rows = self._session.scalars(
            select(CashDrawerSessionModel)
            .order_by(CashDrawerSessionModel.start_time.desc())
        ).all()
        return [row.to_dto() for row in rows]

    def _movements(self, drawer: CashDrawerSessionModel) -> list[DrawerMovement]:
        return [
            DrawerMovement(
                direction=MovementDirection(entry.entry_type),
                amount=self._money(entry.amount),
                reason=entry.reason,
            )
            for entry in drawer.entries
        ]

    def current_expected_cash(self) -> Decimal:
        """Cash that should be in the open drawer right now."""
        drawer = self._require_active()
        expected = self._calculator.expected_cash(
            self._money(drawer.opening_float),
            self._money(drawer.cash_sales),
            self._movements(drawer),
        )
        return expected.amount

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def open_session(self, opening_float: Decimal) -> CashDrawerSession:
        """Open the drawer with ``opening_float`` counted in."""
        if not self._settings.enable_cash_drawer:
            raise CashDrawerDisabledError()
        if opening_float < 0:
            raise ValueError("Opening float cannot be negative")
        try:
            existing = self._active_model()
            if existing is not None:
                logger.warning("drawer_session_already_active", extra={
                    "drawer_session_id": str(existing.id),
                })
                raise ActiveSessionExistsError(str(existing.id))

            drawer = CashDrawerSessionModel(
                id=uuid4(),
                start_time=self._clock.now(),
                opening_float=opening_float,
                cash_sales=Decimal("0"),
                status=DRAWER_SESSION_WORKFLOW.initial_state,
                created_by_id=self._actor_id,
            )
            self._session.add(drawer)
            self._commit()
            logger.info("drawer_session_opened", extra={
                "drawer_session_id": str(drawer.id),
                "opening_float": str(opening_float),
            })
            return drawer.to_dto()
        except Exception:
            self._rollback()
            raise

    def add_entry(
        self,
        entry_type: MovementDirection | str,
        amount: Decimal,
        reason: str,
    ) -> CashDrawerEntry:
        """Record a manual cash-in or cash-out on the open session."""
        entry_type = MovementDirection(entry_type)
        if amount <= 0:
            raise ValueError("Amount must be positive")
        if not reason or not reason.strip():
            raise ValueError("A reason is required for manual cash entries")
        try:
            drawer = self._require_active()
            entry = CashDrawerEntry(
                id=uuid4(),
                session_id=drawer.id,
                entry_type=entry_type,
                amount=amount,
                reason=reason.strip(),
                timestamp=self._clock.now(),
            )
            drawer.entries.append(CashDrawerEntryModel.from_dto(entry, self._actor_id))
            self._commit()
            logger.info("drawer_entry_added", extra={
                "drawer_session_id": str(drawer.id),
                "entry_type": entry_type.value,
                "amount": str(amount),
            })
            return entry
        except Exception:
            self._rollback()
            raise

    def record_cash_sale(self, amount: Decimal, sale_id: UUID | None = None) -> CashDrawerSession:
        """Add a cash sale total to the open session."""
        if amount < 0:
            raise ValueError("Cash sale amount cannot be negative")
        try:
            drawer = self._require_active()
            drawer.cash_sales = drawer.cash_sales + amount
            drawer.updated_by_id = self._actor_id
            self._commit()
            logger.info("drawer_cash_sale_recorded", extra={
                "drawer_session_id": str(drawer.id),
                "sale_id": str(sale_id) if sale_id else None,
                "amount": str(amount),
                "cash_sales": str(drawer.cash_sales),
            })
            return drawer.to_dto()
        except Exception:
            self._rollback()
            raise

    def close_session(self, counted_cash: Decimal) -> CashDrawerSession:
        """
        Close the open session with the counted cash.

        Stores the expected cash and the variance (counted - expected) on
        the session.
        """
        if counted_cash < 0:
            raise ValueError("Counted cash cannot be negative")
        try:
            drawer = self._require_active()
            with LogContext.bind(drawer_session_id=str(drawer.id)):
                new_status = DRAWER_SESSION_WORKFLOW.transition(drawer.status, "close")
                result = self._calculator.reconcile(
                    opening_float=self._money(drawer.opening_float),
                    cash_sales=self._money(drawer.cash_sales),
                    movements=self._movements(drawer),
                    counted_cash=self._money(counted_cash),
                )
                drawer.status = new_status
                drawer.end_time = self._clock.now()
                drawer.closing_float = counted_cash
                drawer.expected_cash = result.expected_cash.amount
                drawer.variance = result.variance.amount
                drawer.updated_by_id = self._actor_id
                self._commit()
                logger.info("drawer_session_closed", extra={
                    "expected_cash": str(result.expected_cash.amount),
                    "counted_cash": str(counted_cash),
                    "variance": str(result.variance.amount),
                })
            return drawer.to_dto()
        except Exception:
            self._rollback()
            raise
