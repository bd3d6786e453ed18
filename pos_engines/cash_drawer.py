"""
Cash Drawer Engine - expected cash and end-of-shift variance.

Pure functions with no I/O.

    expected = opening float + cash sales + cash in - cash out
    variance = counted - expected

A positive variance means the drawer is over, a negative one that it is
short.  Card, online and credit sales never touch the drawer and must not
be included in ``cash_sales``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from pos_engines.tracer import traced_engine
from pos_kernel.domain.values import Money
from pos_kernel.logging_config import get_logger

logger = get_logger("engines.cash_drawer")


class MovementDirection(str, Enum):
    IN = "IN"
    OUT = "OUT"


@dataclass(frozen=True)
class DrawerMovement:
    """A manual cash-in or cash-out with its reason."""

    direction: MovementDirection
    amount: Money
    reason: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", MovementDirection(self.direction))
        if not self.amount.is_positive:
            raise ValueError(f"Drawer movement must be positive, got {self.amount}")


@dataclass(frozen=True)
class DrawerReconciliation:
    opening_float: Money
    cash_sales: Money
    cash_in: Money
    cash_out: Money
    expected_cash: Money
    counted_cash: Money
    variance: Money

    @property
    def is_balanced(self) -> bool:
        return self.variance.is_zero

    @property
    def is_over(self) -> bool:
        return self.variance.is_positive

    @property
    def is_short(self) -> bool:
        return self.variance.is_negative


class CashDrawerCalculator:
    """Computes expected drawer cash and reconciles it against a count."""

    @staticmethod
    def _split(movements: Iterable[DrawerMovement], opening: Money) -> tuple[Money, Money]:
        cash_in = Money.zero(opening.currency)
        cash_out = Money.zero(opening.currency)
        for movement in movements:
            if movement.direction is MovementDirection.IN:
                cash_in = cash_in + movement.amount
            else:
                cash_out = cash_out + movement.amount
        return cash_in, cash_out

    def expected_cash(
        self,
        opening_float: Money,
        cash_sales: Money,
        movements: Sequence[DrawerMovement] = (),
    ) -> Money:
        """Cash that should be in the drawer right now."""
        cash_in, cash_out = self._split(movements, opening_float)
        return opening_float + cash_sales + cash_in - cash_out

    @traced_engine(
        "cash_drawer", "1.0",
        fingerprint_fields=("opening_float", "cash_sales", "movements", "counted_cash"),
    )
    def reconcile(
        self,
        opening_float: Money,
        cash_sales: Money,
        movements: Sequence[DrawerMovement],
        counted_cash: Money,
    ) -> DrawerReconciliation:
        """
        Compare counted cash with expected cash.

        Raises:
            ValueError: If the opening float or the count is negative.
        """
        if opening_float.is_negative:
            raise ValueError("Opening float cannot be negative")
        if counted_cash.is_negative:
            raise ValueError("Counted cash cannot be negative")

        cash_in, cash_out = self._split(movements, opening_float)
        expected = opening_float + cash_sales + cash_in - cash_out
        variance = counted_cash - expected

        result = DrawerReconciliation(
            opening_float=opening_float,
            cash_sales=cash_sales,
            cash_in=cash_in,
            cash_out=cash_out,
            expected_cash=expected,
            counted_cash=counted_cash,
            variance=variance,
        )
        log = logger.info if result.is_balanced else logger.warning
        log("drawer_reconciled", extra={
            "expected_cash": str(expected.amount),
            "counted_cash": str(counted_cash.amount),
            "variance": str(variance.amount),
            "movement_count": len(movements),
        })
        return result
