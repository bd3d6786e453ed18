"""
Payslips (``pos_modules.payroll.payslip``).

A payslip is one payroll item laid out as an earnings section and a
deductions section, with the store and period on top.  Zero-valued rows
other than basic salary are left out.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from pos_config.schema import StoreSettings
from pos_kernel.domain.values import Money
from pos_kernel.exceptions import PayrollItemNotFoundError
from pos_modules.payroll.models import PayrollRun

WIDTH = 40


@dataclass(frozen=True)
class PayslipRow:
    label: str
    amount: Decimal


@dataclass(frozen=True)
class Payslip:
    store_name: str
    period: str
    date_from: date
    date_to: date
    employee_id: UUID
    employee_name: str
    days_worked: int
    days_absent: Decimal
    earnings: tuple[PayslipRow, ...]
    deductions: tuple[PayslipRow, ...]
    gross_earnings: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    currency: str


def build_payslip(run: PayrollRun, employee_id: UUID, settings: StoreSettings) -> Payslip:
    item = run.item_for(employee_id)
    if item is None:
        raise PayrollItemNotFoundError(str(run.id), str(employee_id))

    earnings = [PayslipRow("Basic salary", item.base_salary)]
    for label, amount in (
        ("Allowances", item.allowances),
        (f"Overtime ({item.overtime_hours.normalize():f} h)", item.overtime_pay),
        ("Bonus", item.bonus),
    ):
        if amount:
            earnings.append(PayslipRow(label, amount))
    if item.no_pay_deduction:
        earnings.append(PayslipRow(
            f"No-pay ({item.days_absent.normalize():f} days)", -item.no_pay_deduction,
        ))

    deductions = [
        PayslipRow(label, amount)
        for label, amount in (
            ("Recurring deductions", item.recurring_deductions),
            ("Loan installments", item.loan_deductions),
            ("Other deductions", item.adhoc_deductions),
        )
        if amount
    ]

    return Payslip(
        store_name=settings.store_name,
        period=run.period,
        date_from=run.date_from,
        date_to=run.date_to,
        employee_id=item.employee_id,
        employee_name=item.employee_name,
        days_worked=item.days_worked,
        days_absent=item.days_absent,
        earnings=tuple(earnings),
        deductions=tuple(deductions),
        gross_earnings=item.gross_earnings,
        total_deductions=item.total_deductions,
        net_pay=item.net_pay,
        currency=settings.currency,
    )


def _row(left: str, right: str, width: int) -> str:
    space = max(width - len(left) - len(right), 1)
    return f"{left}{' ' * space}{right}"


def render_payslip(payslip: Payslip, width: int = WIDTH) -> str:
    def fmt(amount: Decimal) -> str:
        return Money.of(amount, payslip.currency).format()

    rule = "-" * width
    lines = [
        payslip.store_name.center(width).rstrip(),
        f"Payslip - {payslip.period}".center(width).rstrip(),
        rule,
        _row("Employee:", payslip.employee_name, width),
        _row("Period:", f"{payslip.date_from.isoformat()} to {payslip.date_to.isoformat()}", width),
        _row("Days worked:", str(payslip.days_worked), width),
        _row("Days absent:", f"{payslip.days_absent.normalize():f}", width),
        rule,
        "EARNINGS",
    ]
    lines += [_row(f"  {r.label}", fmt(r.amount), width) for r in payslip.earnings]
    lines.append(_row("Gross earnings", fmt(payslip.gross_earnings), width))
    lines.append(rule)
    lines.append("DEDUCTIONS")
    lines += [_row(f"  {r.label}", fmt(r.amount), width) for r in payslip.deductions]
    lines.append(_row("Total deductions", fmt(payslip.total_deductions), width))
    lines.append(rule)
    lines.append(_row("NET PAY", fmt(payslip.net_pay), width))
    return "\n".join(lines) + "\n"
