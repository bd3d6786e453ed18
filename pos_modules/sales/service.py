"""
pos_modules.sales.service
=========================

Responsibility:
    Checkout and the follow-up of credit (pay-later) sales.  Totals come
    from ``pos_engines.order_totals``; stock moves through
    ``InventoryService``; cash takings go to the open drawer session through
    ``CashDrawerService``.  All of it happens in one transaction.

Invariants enforced:
    - total == subtotal + tax on every persisted sale.
    - Cash tendered covers the total; change = tendered - total.
    - Stock never goes negative (checkout fails as a whole instead).
    - A credit sale is never paid beyond its total.

Failure modes:
    - EmptyOrderError, InsufficientTenderError, InsufficientStockError,
      VariantNotFoundError, CreditSaleError, SaleNotFoundError.
    - Any failure rolls back stock, drawer and sale writes together.

Usage::

    sales = SalesService(session, settings, clock)
    cart = Cart()
    cart.add(product, variant, quantity=2)
    result = sales.checkout(cart, PaymentMethod.CASH, amount_tendered=Decimal("20"))
    result.tender.change.amount  # Decimal("14.02")
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_config.schema import StoreSettings
from pos_engines.order_totals import settle_tender
from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.domain.values import Money
from pos_kernel.exceptions import CreditSaleError, EmptyOrderError, SaleNotFoundError
from pos_kernel.logging_config import LogContext, get_logger
from pos_modules.cash.service import CashDrawerService
from pos_modules.inventory.models import StockMovementReason
from pos_modules.inventory.service import InventoryService
from pos_modules.sales.cart import Cart
from pos_modules.sales.models import (
    CheckoutResult,
    PaymentMethod,
    PaymentStatus,
    Sale,
    SaleItem,
)
from pos_modules.sales.orm import SaleModel

logger = get_logger("modules.sales.service")


class SalesService:
    """
    Till checkout and credit sale follow-up.

    Transaction boundary:
        This service commits on success, rolls back on failure.  The
        inventory and drawer services it composes run with
        ``auto_commit=False`` on the same session.
    """

    def __init__(
        self,
        session: Session,
        settings: StoreSettings,
        clock: Clock | None = None,
        actor_id: UUID = SYSTEM_ACTOR_ID,
    ):
        self._session = session
        self._settings = settings
        self._clock = clock or SystemClock()
        self._actor_id = actor_id
        self._inventory = InventoryService(
            session, self._clock, actor_id=actor_id, auto_commit=False,
        )
        self._drawer = CashDrawerService(
            session, settings, self._clock, actor_id=actor_id, auto_commit=False,
        )

    # =========================================================================
    # Checkout
    # =========================================================================

    def checkout(
        self,
        cart: Cart,
        payment_method: PaymentMethod | str,
        amount_tendered: Decimal | None = None,
        customer_id: UUID | None = None,
        customer_name: str | None = None,
        due_date: date | None = None,
    ) -> CheckoutResult:
        """
        Complete a sale for the cart's contents.

        Cash: ``amount_tendered`` defaults to the total and must cover it.
        Credit: a customer name is required; ``due_date`` defaults to today
        plus the store's credit terms and the sale starts as Due.

        The cart is cleared only after the sale is committed.
        """
        payment_method = PaymentMethod(payment_method)
        if cart.is_empty:
            raise EmptyOrderError()

        today = self._clock.today()
        if payment_method is PaymentMethod.CREDIT:
            if not customer_name or not customer_name.strip():
                raise CreditSaleError(None, "a customer is required for credit sales")
            if due_date is None:
                due_date = today + timedelta(days=self._settings.credit_terms_days)
            if due_date < today:
                raise CreditSaleError(None, f"due date {due_date} is in the past")
        else:
            due_date = None

        sale_id = uuid4()
        with LogContext.bind(sale_id=str(sale_id)):
            try:
                logger.info("checkout_started", extra={
                    "payment_method": payment_method.value,
                    "line_count": len(cart),
                })

                totals = cart.totals(self._settings)
                tendered = (
                    Money.of(amount_tendered, self._settings.currency)
                    if amount_tendered is not None else None
                )
                tender = settle_tender(totals.total, tendered, payment_method.is_cash)

                for line in cart.lines():
                    self._inventory.adjust_stock(
                        line.variant_id,
                        -line.quantity,
                        reason=StockMovementReason.SALE,
                        reference=str(sale_id),
                        product_id=line.product_id,
                    )

                drawer_session_id = None
                if payment_method.is_cash and self._settings.enable_cash_drawer:
                    active = self._drawer.active_session()
                    if active is not None:
                        self._drawer.record_cash_sale(totals.total.amount, sale_id)
                        drawer_session_id = active.id

                is_credit = payment_method is PaymentMethod.CREDIT
                sale = Sale(
                    id=sale_id,
                    sale_date=self._clock.now(),
                    sale_day=today,
                    items=tuple(
                        SaleItem(
                            product_id=line.product_id,
                            product_name=line.product_name,
                            variant_id=line.variant_id,
                            variant_name=line.variant_name,
                            quantity=line.quantity,
                            price=line.unit_price,
                            category=line.category,
                        )
                        for line in cart.lines()
                    ),
                    subtotal=totals.subtotal.amount,
                    tax=totals.tax.amount,
                    tax_rate=self._settings.tax_rate if totals.tax_enabled else Decimal("0"),
                    total=totals.total.amount,
                    payment_method=payment_method,
                    amount_tendered=tender.amount_tendered.amount,
                    change=tender.change.amount,
                    currency=self._settings.currency,
                    customer_id=customer_id,
                    customer_name=customer_name.strip() if customer_name else None,
                    due_date=due_date,
                    payment_status=PaymentStatus.DUE if is_credit else PaymentStatus.PAID,
                    paid_amount=Decimal("0") if is_credit else totals.total.amount,
                    drawer_session_id=drawer_session_id,
                )
                self._session.add(SaleModel.from_dto(sale, self._actor_id))
                self._session.commit()
            except Exception:
                self._session.rollback()
                logger.warning("checkout_failed", exc_info=True)
                raise

            cart.clear()
            logger.info("sale_completed", extra={
                "payment_method": payment_method.value,
                "subtotal": str(sale.subtotal),
                "tax": str(sale.tax),
                "total": str(sale.total),
                "change": str(sale.change),
                "item_count": sale.item_count,
                "drawer_session_id": str(drawer_session_id) if drawer_session_id else None,
            })
        return CheckoutResult(sale=sale, totals=totals, tender=tender)

    # =========================================================================
    # Credit sales
    # =========================================================================

    def record_credit_payment(self, sale_id: UUID, amount: Decimal) -> Sale:
        """Record a customer payment against a credit sale."""
        if amount <= 0:
            raise ValueError("Payment amount must be positive")
        try:
            sale = self._get_model(sale_id)
            if sale.payment_method != PaymentMethod.CREDIT.value:
                raise CreditSaleError(str(sale_id), "not a credit sale")
            balance = sale.total - sale.paid_amount
            if amount > balance:
                raise CreditSaleError(
                    str(sale_id), f"payment {amount} exceeds balance {balance}",
                )
            sale.paid_amount = sale.paid_amount + amount
            if sale.paid_amount == sale.total:
                sale.payment_status = PaymentStatus.PAID.value
            sale.updated_by_id = self._actor_id
            self._session.commit()
            logger.info("credit_payment_recorded", extra={
                "sale_id": str(sale_id),
                "amount": str(amount),
                "paid_amount": str(sale.paid_amount),
                "payment_status": sale.payment_status,
            })
            return sale.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def mark_overdue(self, as_of: date | None = None) -> list[Sale]:
        """Flag unpaid credit sales whose due date has passed."""
        as_of = as_of or self._clock.today()
        try:
            rows = self._session.scalars(
                select(SaleModel).where(
                    SaleModel.payment_method == PaymentMethod.CREDIT.value,
                    SaleModel.payment_status == PaymentStatus.DUE.value,
                    SaleModel.due_date < as_of,
                )
            ).all()
            for row in rows:
                row.payment_status = PaymentStatus.OVERDUE.value
                row.updated_by_id = self._actor_id
            self._session.commit()
            logger.info("credit_sales_marked_overdue", extra={
                "as_of": as_of.isoformat(),
                "count": len(rows),
            })
            return [row.to_dto() for row in rows]
        except Exception:
            self._session.rollback()
            raise

    def outstanding_credit(self) -> list[Sale]:
        """Credit sales with a balance still owed, oldest due date first."""
        rows = self._session.scalars(
            select(SaleModel)
            .where(
                SaleModel.payment_method == PaymentMethod.CREDIT.value,
                SaleModel.payment_status != PaymentStatus.PAID.value,
            )
            .order_by(SaleModel.due_date)
        ).all()
        return [row.to_dto() for row in rows]

    # =========================================================================
    # Queries
    # =========================================================================

    def get_sale(self, sale_id: UUID) -> Sale:
        return self._get_model(sale_id).to_dto()

    def list_sales(self, start: date | None = None, end: date | None = None) -> list[Sale]:
        """Sales between ``start`` and ``end`` inclusive, oldest first."""
        stmt = select(SaleModel).order_by(SaleModel.sale_date)
        if start is not None:
            stmt = stmt.where(SaleModel.sale_day >= start)
        if end is not None:
            stmt = stmt.where(SaleModel.sale_day <= end)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def _get_model(self, sale_id: UUID) -> SaleModel:
        sale = self._session.get(SaleModel, sale_id)
        if sale is None:
            raise SaleNotFoundError(str(sale_id))
        return sale
