"""
Loan Engine - employee loan balances and the installment a payroll run withholds.

Pure functions with no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from pos_kernel.domain.values import Money
from pos_kernel.logging_config import get_logger

logger = get_logger("engines.loans")


class LoanStatus(str, Enum):
    ACTIVE = "Active"
    PAID_OFF = "Paid Off"


@dataclass(frozen=True)
class LoanPosition:
    """Where a loan stands after its repayments."""

    principal: Money
    total_repaid: Money
    remaining: Money
    status: LoanStatus

    @property
    def is_settled(self) -> bool:
        return self.status is LoanStatus.PAID_OFF


def loan_position(principal: Money, repayments: Iterable[Money]) -> LoanPosition:
    """
    Remaining balance = principal - sum(repayments).

    A loan is paid off once the remaining balance reaches zero.

    Raises:
        ValueError: If the principal is not positive or a repayment is not.
    """
    if not principal.is_positive:
        raise ValueError(f"Loan principal must be positive, got {principal}")
    paid = Money.zero(principal.currency)
    for repayment in repayments:
        if not repayment.is_positive:
            raise ValueError(f"Repayment must be positive, got {repayment}")
        paid = paid + repayment
    remaining = principal - paid
    if remaining.is_negative:
        remaining = Money.zero(principal.currency)
    status = LoanStatus.PAID_OFF if remaining.is_zero else LoanStatus.ACTIVE
    return LoanPosition(
        principal=principal,
        total_repaid=paid,
        remaining=remaining,
        status=status,
    )


def installment_due(
    principal: Money,
    monthly_installment: Money,
    repayments: Iterable[Money],
) -> Money:
    """The installment to withhold this month: never more than what is owed."""
    if not monthly_installment.is_positive:
        raise ValueError(
            f"Monthly installment must be positive, got {monthly_installment}"
        )
    position = loan_position(principal, repayments)
    due = monthly_installment if monthly_installment < position.remaining else position.remaining
    logger.debug("loan_installment_due", extra={
        "principal": str(principal.amount),
        "remaining": str(position.remaining.amount),
        "installment_due": str(due.amount),
    })
    return due
