"""
Payroll Domain Models (``pos_modules.payroll.models``).

Salary structures, attendance, employee loans and payroll runs.

* All models are ``frozen=True``.
* Amounts are ``Decimal`` in the store currency.
* Employees are referenced by id and name only; staff records themselves
  live outside this module.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

from pos_engines.loans import LoanStatus
from pos_engines.payroll import AttendanceStatus, PayrollType


class PayrollRunStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    PAID = "Paid"


class ComponentKind(Enum):
    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"


@dataclass(frozen=True)
class SalaryComponent:
    """A recurring monthly allowance or deduction."""
    name: str
    amount: Decimal

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Component name is required")
        if self.amount < 0:
            raise ValueError(f"Component '{self.name}' cannot be negative")


@dataclass(frozen=True)
class EmployeeSalary:
    employee_id: UUID
    employee_name: str
    base_salary: Decimal
    allowances: tuple[SalaryComponent, ...] = ()
    deductions: tuple[SalaryComponent, ...] = ()

    @property
    def total_allowances(self) -> Decimal:
        return sum((c.amount for c in self.allowances), Decimal("0"))

    @property
    def total_deductions(self) -> Decimal:
        return sum((c.amount for c in self.deductions), Decimal("0"))

    @property
    def net_salary(self) -> Decimal:
        """Monthly take-home before attendance, overtime and loans."""
        return self.base_salary + self.total_allowances - self.total_deductions


@dataclass(frozen=True)
class AttendanceRecord:
    id: UUID
    employee_id: UUID
    day: date
    status: AttendanceStatus


@dataclass(frozen=True)
class LoanRepayment:
    id: UUID
    loan_id: UUID
    amount: Decimal
    paid_on: date
    payroll_run_id: UUID | None = None


@dataclass(frozen=True)
class Loan:
    id: UUID
    employee_id: UUID
    employee_name: str
    amount: Decimal
    reason: str
    monthly_installment: Decimal
    issued_on: date
    status: LoanStatus
    repayments: tuple[LoanRepayment, ...] = ()

    @property
    def total_repaid(self) -> Decimal:
        return sum((r.amount for r in self.repayments), Decimal("0"))

    @property
    def remaining(self) -> Decimal:
        return max(self.amount - self.total_repaid, Decimal("0"))


@dataclass(frozen=True)
class LoanInstallment:
    """Installment withheld from one payroll item for one loan."""
    loan_id: UUID
    amount: Decimal


@dataclass(frozen=True)
class PayrollItem:
    """One employee's line in a payroll run."""
    employee_id: UUID
    employee_name: str
    base_salary: Decimal
    days_worked: int
    days_absent: Decimal
    allowances: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    bonus: Decimal
    no_pay_deduction: Decimal
    salary_payable: Decimal
    gross_earnings: Decimal
    recurring_deductions: Decimal
    loan_deductions: Decimal
    adhoc_deductions: Decimal
    total_deductions: Decimal
    net_pay: Decimal
    loan_installments: tuple[LoanInstallment, ...] = field(default=())


@dataclass(frozen=True)
class PayrollRun:
    id: UUID
    period: str
    date_from: date
    date_to: date
    payroll_type: PayrollType
    status: PayrollRunStatus
    items: tuple[PayrollItem, ...]
    total_gross: Decimal
    total_deductions: Decimal
    total_net: Decimal
    completed_at: datetime | None = None
    paid_at: datetime | None = None

    def item_for(self, employee_id: UUID) -> PayrollItem | None:
        for item in self.items:
            if item.employee_id == employee_id:
                return item
        return None
