"""
Order Totals Engine - subtotal, tax, total and change for a POS order.

Pure functions with no I/O.  The tax rate and the tax switch come from
store settings and are passed in by the caller.

Usage:
    from pos_engines.order_totals import OrderCalculator, OrderLine
    from pos_kernel.domain.values import Money
    from decimal import Decimal

    lines = [
        OrderLine(variant_id="v1", name="Cola 330ml",
                  unit_price=Money.of("2.99", "USD"), quantity=2),
        OrderLine(variant_id="v2", name="Chips",
                  unit_price=Money.of("5.49", "USD"), quantity=1),
    ]
    totals = OrderCalculator().calculate(
        lines, tax_rate=Decimal("0.08"), tax_enabled=True, currency="USD",
    )
    print(totals.subtotal)  # 11.47 USD
    print(totals.tax)       # 0.92 USD
    print(totals.total)     # 12.39 USD

Rounding:
    Line totals are exact (price x integer quantity).  The subtotal and the
    tax are each rounded half-up to the currency's minor unit, and the total
    is their exact sum, so ``total == subtotal + tax`` always holds.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from decimal import ROUND_CEILING, Decimal
from typing import Sequence
from uuid import UUID

from pos_engines.tracer import traced_engine
from pos_kernel.domain.values import Currency, Money
from pos_kernel.exceptions import InsufficientTenderError
from pos_kernel.logging_config import get_logger

logger = get_logger("engines.order_totals")


@dataclass(frozen=True)
class OrderLine:
    """One product variant on an order with its selling price and quantity."""

    variant_id: UUID | str
    name: str
    unit_price: Money
    quantity: int
    product_id: UUID | str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise ValueError(f"Quantity must be an integer, got {self.quantity!r}")
        if self.quantity <= 0:
            raise ValueError(f"Quantity must be positive, got {self.quantity}")
        if self.unit_price.is_negative:
            raise ValueError(f"Unit price cannot be negative: {self.unit_price}")

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class OrderTotals:
    """Result of an order total calculation."""

    subtotal: Money
    tax: Money
    total: Money
    tax_rate: Decimal
    tax_enabled: bool
    item_count: int
    line_count: int

    @property
    def currency(self) -> Currency:
        return self.total.currency


@dataclass(frozen=True)
class TenderResult:
    """Outcome of settling a payment against an order total."""

    amount_due: Money
    amount_tendered: Money
    change: Money
    is_cash: bool


class OrderCalculator:
    """
    Computes order totals.

    Contract:
        subtotal = sum(unit_price x quantity) over all lines, rounded
        tax      = round(subtotal x tax_rate) when tax is enabled, else 0
        total    = subtotal + tax

    ``tax_rate`` is a fraction (0.08 for 8 %).  An empty order totals zero.
    """

    @traced_engine(
        "order_totals", "1.0",
        fingerprint_fields=("lines", "tax_rate", "tax_enabled", "currency"),
    )
    def calculate(
        self,
        lines: Sequence[OrderLine],
        tax_rate: Decimal = Decimal("0"),
        tax_enabled: bool = False,
        currency: str | Currency = "USD",
    ) -> OrderTotals:
        """
        Calculate subtotal, tax and total for an order.

        Raises:
            ValueError: If the rate is outside [0, 1] or a line is priced in
                a different currency.
        """
        t0 = time.monotonic()
        if not isinstance(tax_rate, Decimal):
            tax_rate = Decimal(str(tax_rate))
        if not Decimal("0") <= tax_rate <= Decimal("1"):
            raise ValueError(f"Tax rate must be a fraction in [0, 1], got {tax_rate}")

        subtotal = Money.total((line.line_total for line in lines), currency).round()

        if tax_enabled:
            tax = (subtotal * tax_rate).round()
        else:
            tax = Money.zero(subtotal.currency)

        total = subtotal + tax
        item_count = sum(line.quantity for line in lines)

        duration_ms = round((time.monotonic() - t0) * 1000, 2)
        logger.info("order_totals_calculated", extra={
            "line_count": len(lines),
            "item_count": item_count,
            "subtotal": str(subtotal.amount),
            "tax": str(tax.amount),
            "total": str(total.amount),
            "tax_enabled": tax_enabled,
            "tax_rate": str(tax_rate),
            "currency": total.currency.code,
            "duration_ms": duration_ms,
        })

        return OrderTotals(
            subtotal=subtotal,
            tax=tax,
            total=total,
            tax_rate=tax_rate if tax_enabled else Decimal("0"),
            tax_enabled=tax_enabled,
            item_count=item_count,
            line_count=len(lines),
        )


def settle_tender(
    amount_due: Money,
    tendered: Money | None,
    is_cash: bool,
) -> TenderResult:
    """
    Settle a payment against the amount due.

    Cash: tendered defaults to the amount due, must cover it, and the
    difference is returned as change.  Card, online and credit payments are
    taken for exactly the amount due and never produce change.

    Raises:
        InsufficientTenderError: If cash tendered is less than the amount due.
        ValueError: If tendered is negative.
    """
    if tendered is not None and tendered.is_negative:
        raise ValueError(f"Tendered amount cannot be negative: {tendered}")

    if not is_cash:
        return TenderResult(
            amount_due=amount_due,
            amount_tendered=amount_due,
            change=Money.zero(amount_due.currency),
            is_cash=False,
        )

    if tendered is None:
        tendered = amount_due
    if tendered < amount_due:
        logger.warning("tender_insufficient", extra={
            "amount_due": str(amount_due.amount),
            "amount_tendered": str(tendered.amount),
        })
        raise InsufficientTenderError(amount_due.amount, tendered.amount)

    change = tendered - amount_due
    logger.debug("tender_settled", extra={
        "amount_due": str(amount_due.amount),
        "amount_tendered": str(tendered.amount),
        "change": str(change.amount),
    })
    return TenderResult(
        amount_due=amount_due,
        amount_tendered=tendered,
        change=change,
        is_cash=True,
    )


def _ceil_to(amount: Decimal, step: int) -> Decimal:
    step_d = Decimal(step)
    return (amount / step_d).to_integral_value(rounding=ROUND_CEILING) * step_d


def quick_cash_options(total: Money) -> tuple[Money, ...]:
    """
    Suggested cash amounts for the payment screen.

    Exact amount, next multiple of 5, next multiple of 10, and the next
    multiple of 50 plus another 50.  Duplicates are dropped and the result
    is ascending.
    """
    amount = total.amount
    candidates = {
        amount,
        _ceil_to(amount, 5),
        _ceil_to(amount, 10),
        _ceil_to(amount, 50) + Decimal(50),
    }
    return tuple(
        Money(amount=value, currency=total.currency) for value in sorted(candidates)
    )
