"""
Payroll Engine - monthly gross and net pay per employee.

Pure functions with no I/O.  Salary structures, attendance and loan
installments are gathered by the payroll service and passed in.

Two payroll methods fix the number of days a monthly salary is divided by
to get a daily rate:

    SALARY_THEORY  -> 30 days
    WAGES_BOARD    -> 26 days

The daily rate prices unpaid absence (the "no-pay" deduction); the same
divisor and the standard working day give the hourly rate for overtime.

Usage:
    from pos_engines.payroll import PayrollCalculator, PayrollInput, PayrollType
    from pos_kernel.domain.values import Money
    from decimal import Decimal

    calc = PayrollCalculator(PayrollType.WAGES_BOARD)
    line = calc.calculate(PayrollInput(
        employee_id="e1",
        employee_name="Nimal",
        base_salary=Money.of("52000", "LKR"),
        absent_days=Decimal("2"),
    ))
    print(line.no_pay_deduction)  # 4000.00 LKR
    print(line.net_pay)           # 48000.00 LKR

Rounding:
    Every component (allowances, overtime, bonus, no-pay, each deduction) is
    rounded half-up to the currency's minor unit before it is summed, so
    ``gross - total_deductions == net`` holds exactly.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence
from uuid import UUID

from pos_engines.tracer import traced_engine
from pos_kernel.domain.values import Currency, Money
from pos_kernel.logging_config import get_logger

logger = get_logger("engines.payroll")


class PayrollType(str, Enum):
    """Payroll method; determines the monthly day divisor."""

    SALARY_THEORY = "salaryTheory"
    WAGES_BOARD = "wagesBoard"

    @property
    def divisor(self) -> int:
        return 30 if self is PayrollType.SALARY_THEORY else 26


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"


@dataclass(frozen=True)
class PayComponent:
    """A named allowance, deduction or loan installment."""

    name: str
    amount: Money

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Pay component name is required")
        if self.amount.is_negative:
            raise ValueError(f"Pay component '{self.name}' cannot be negative")


def _zero_or(value: Money | None, currency: Currency) -> Money:
    return value if value is not None else Money.zero(currency)


@dataclass(frozen=True)
class PayrollInput:
    """Everything needed to pay one employee for one month."""

    employee_id: UUID | str
    employee_name: str
    base_salary: Money
    allowances: tuple[PayComponent, ...] = ()
    recurring_deductions: tuple[PayComponent, ...] = ()
    loan_installments: tuple[PayComponent, ...] = ()
    overtime_hours: Decimal = Decimal("0")
    absent_days: Decimal = Decimal("0")
    bonus: Money | None = None
    adhoc_deductions: Money | None = None

    def __post_init__(self) -> None:
        currency = self.base_salary.currency
        object.__setattr__(self, "bonus", _zero_or(self.bonus, currency))
        object.__setattr__(
            self, "adhoc_deductions", _zero_or(self.adhoc_deductions, currency)
        )
        for name in ("overtime_hours", "absent_days"):
            value = getattr(self, name)
            if not isinstance(value, Decimal):
                object.__setattr__(self, name, Decimal(str(value)))

        if self.base_salary.is_negative:
            raise ValueError("Base salary cannot be negative")
        if self.bonus.is_negative:
            raise ValueError("Bonus cannot be negative")
        if self.adhoc_deductions.is_negative:
            raise ValueError("Deductions cannot be negative")
        if self.overtime_hours < 0:
            raise ValueError("Overtime hours cannot be negative")
        if self.absent_days < 0:
            raise ValueError("Absent days cannot be negative")
        for component in (
            *self.allowances, *self.recurring_deductions, *self.loan_installments,
        ):
            if component.amount.currency != currency:
                raise ValueError(
                    f"Pay component '{component.name}' is in "
                    f"{component.amount.currency}, salary is in {currency}"
                )


@dataclass(frozen=True)
class PayrollLine:
    """Calculated pay for one employee."""

    employee_id: UUID | str
    employee_name: str
    payroll_type: PayrollType
    base_salary: Money
    allowances_total: Money
    overtime_hours: Decimal
    overtime_pay: Money
    bonus: Money
    absent_days: Decimal
    daily_rate: Money
    no_pay_deduction: Money
    gross_earnings: Money
    recurring_deductions_total: Money
    loan_deductions_total: Money
    adhoc_deductions: Money
    total_deductions: Money
    net_pay: Money

    @property
    def salary_payable(self) -> Money:
        """Base salary after the no-pay deduction."""
        return self.base_salary - self.no_pay_deduction


@dataclass(frozen=True)
class PayrollRunResult:
    lines: tuple[PayrollLine, ...]
    total_gross: Money
    total_deductions: Money
    total_net: Money


@dataclass(frozen=True)
class AttendanceMark:
    day: date
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendanceSummary:
    """Attendance counts for one employee over a pay period."""

    present: int
    leave: int
    absent: int
    days_in_period: int
    unmarked: int = field(default=0)

    @property
    def days_worked(self) -> int:
        """Paid days: leave is paid, so it counts as worked."""
        return self.present + self.leave

    @property
    def days_absent(self) -> int:
        """Unpaid days: every day in the period that was not worked."""
        return self.days_in_period - self.days_worked


class PayrollCalculator:
    """
    Computes monthly pay.

    Contract:
        daily_rate   = base / divisor
        hourly_rate  = base / (divisor x standard_hours_per_day)
        overtime_pay = round(hourly_rate x overtime_hours x overtime_multiplier)
        no_pay       = round(daily_rate x absent_days), at most base
        gross        = base + allowances + overtime_pay + bonus - no_pay
        deductions   = recurring + loan installments + ad-hoc
        net          = gross - deductions

    A negative net is returned as-is and logged as a warning; it is the
    payroll officer's call whether to reduce a loan installment.
    """

    def __init__(
        self,
        payroll_type: PayrollType | str = PayrollType.SALARY_THEORY,
        overtime_multiplier: Decimal = Decimal("1.5"),
        standard_hours_per_day: Decimal = Decimal("8"),
    ):
        self.payroll_type = PayrollType(payroll_type)
        self.overtime_multiplier = Decimal(str(overtime_multiplier))
        self.standard_hours_per_day = Decimal(str(standard_hours_per_day))
        if self.overtime_multiplier < 1:
            raise ValueError("Overtime multiplier must be at least 1")
        if self.standard_hours_per_day <= 0:
            raise ValueError("Standard hours per day must be positive")

    def __repr__(self) -> str:
        return (
            f"PayrollCalculator(payroll_type={self.payroll_type.value}, "
            f"overtime_multiplier={self.overtime_multiplier}, "
            f"standard_hours_per_day={self.standard_hours_per_day})"
        )

    @property
    def divisor(self) -> int:
        return self.payroll_type.divisor

    def daily_rate(self, base_salary: Money) -> Money:
        return base_salary / self.divisor

    def hourly_rate(self, base_salary: Money) -> Money:
        return base_salary / (self.divisor * self.standard_hours_per_day)

    def no_pay_deduction(self, base_salary: Money, absent_days: Decimal) -> Money:
        """Deduction for unpaid absence, capped at the base salary."""
        deduction = (self.daily_rate(base_salary) * absent_days).round()
        base = base_salary.round()
        return base if deduction > base else deduction

    def overtime_pay(self, base_salary: Money, hours: Decimal) -> Money:
        return (self.hourly_rate(base_salary) * hours * self.overtime_multiplier).round()

    def calculate(self, item: PayrollInput) -> PayrollLine:
        """Calculate gross and net pay for one employee."""
        currency = item.base_salary.currency

        def _sum(components: Iterable[PayComponent]) -> Money:
            return Money.total((c.amount.round() for c in components), currency)

        base = item.base_salary.round()
        allowances = _sum(item.allowances)
        overtime = self.overtime_pay(item.base_salary, item.overtime_hours)
        bonus = item.bonus.round()
        no_pay = self.no_pay_deduction(item.base_salary, item.absent_days)

        gross = base + allowances + overtime + bonus - no_pay

        recurring = _sum(item.recurring_deductions)
        loans = _sum(item.loan_installments)
        adhoc = item.adhoc_deductions.round()
        total_deductions = recurring + loans + adhoc

        net = gross - total_deductions

        line = PayrollLine(
            employee_id=item.employee_id,
            employee_name=item.employee_name,
            payroll_type=self.payroll_type,
            base_salary=base,
            allowances_total=allowances,
            overtime_hours=item.overtime_hours,
            overtime_pay=overtime,
            bonus=bonus,
            absent_days=item.absent_days,
            daily_rate=self.daily_rate(item.base_salary).round(),
            no_pay_deduction=no_pay,
            gross_earnings=gross,
            recurring_deductions_total=recurring,
            loan_deductions_total=loans,
            adhoc_deductions=adhoc,
            total_deductions=total_deductions,
            net_pay=net,
        )

        logger.info("payroll_item_calculated", extra={
            "employee_id": str(item.employee_id),
            "payroll_type": self.payroll_type.value,
            "divisor": self.divisor,
            "absent_days": str(item.absent_days),
            "overtime_hours": str(item.overtime_hours),
            "gross_earnings": str(gross.amount),
            "total_deductions": str(total_deductions.amount),
            "net_pay": str(net.amount),
        })
        if net.is_negative:
            logger.warning("payroll_net_pay_negative", extra={
                "employee_id": str(item.employee_id),
                "net_pay": str(net.amount),
            })
        return line

    @traced_engine("payroll", "1.0", fingerprint_fields=("self", "inputs", "currency"))
    def calculate_run(
        self,
        inputs: Sequence[PayrollInput],
        currency: str | Currency = "USD",
    ) -> PayrollRunResult:
        """Calculate every employee in a run and total the results."""
        t0 = time.monotonic()
        lines = tuple(self.calculate(item) for item in inputs)
        result = PayrollRunResult(
            lines=lines,
            total_gross=Money.total((l.gross_earnings for l in lines), currency),
            total_deductions=Money.total((l.total_deductions for l in lines), currency),
            total_net=Money.total((l.net_pay for l in lines), currency),
        )
        logger.info("payroll_run_calculated", extra={
            "employee_count": len(lines),
            "payroll_type": self.payroll_type.value,
            "total_gross": str(result.total_gross.amount),
            "total_net": str(result.total_net.amount),
            "duration_ms": round((time.monotonic() - t0) * 1000, 2),
        })
        return result


def summarize_attendance(
    marks: Iterable[AttendanceMark],
    start: date,
    end: date,
) -> AttendanceSummary:
    """
    Count attendance marks inside the inclusive range ``start`` to ``end``.

    One mark per day counts; if a day is marked twice the later mark in
    ``marks`` wins.  Days with no mark are reported as ``unmarked``; they
    count towards ``days_absent`` the same as an explicit Absent mark.
    """
    if start > end:
        raise ValueError(f"Attendance period start {start} is after end {end}")

    by_day: dict[date, AttendanceStatus] = {}
    for mark in marks:
        if start <= mark.day <= end:
            by_day[mark.day] = AttendanceStatus(mark.status)

    statuses = list(by_day.values())
    days_in_period = (end - start).days + 1
    return AttendanceSummary(
        present=statuses.count(AttendanceStatus.PRESENT),
        leave=statuses.count(AttendanceStatus.LEAVE),
        absent=statuses.count(AttendanceStatus.ABSENT),
        days_in_period=days_in_period,
        unmarked=days_in_period - len(by_day),
    )


def month_bounds(day: date) -> tuple[date, date]:
    """First and last calendar day of the month containing ``day``."""
    first = day.replace(day=1)
    next_first = (first + timedelta(days=32)).replace(day=1)
    return first, next_first - timedelta(days=1)
