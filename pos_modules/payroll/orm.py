"""
Payroll ORM Models (``pos_modules.payroll.orm``).

SQLAlchemy persistence models for salary structures, attendance, employee
loans and payroll runs.
"""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pos_kernel.db.base import TrackedBase


class EmployeeSalaryModel(TrackedBase):
    """
    ORM model for ``EmployeeSalary``.

    Table: ``payroll_salaries``; one row per employee.
    """

    __tablename__ = "payroll_salaries"

    employee_id: Mapped[UUID]
    employee_name: Mapped[str] = mapped_column(String(200))
    base_salary: Mapped[Decimal]

    components: Mapped[list["SalaryComponentModel"]] = relationship(
        back_populates="salary",
        cascade="all, delete-orphan",
        order_by="SalaryComponentModel.line_no",
    )

    __table_args__ = (
        UniqueConstraint("employee_id", name="uq_payroll_salaries_employee"),
    )

    def to_dto(self):
        from pos_modules.payroll.models import ComponentKind, EmployeeSalary
        return EmployeeSalary(
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            base_salary=self.base_salary,
            allowances=tuple(
                c.to_dto() for c in self.components
                if c.kind == ComponentKind.ALLOWANCE.value
            ),
            deductions=tuple(
                c.to_dto() for c in self.components
                if c.kind == ComponentKind.DEDUCTION.value
            ),
        )


class SalaryComponentModel(TrackedBase):
    """
    ORM model for ``SalaryComponent``.

    Table: ``payroll_salary_components``
    """

    __tablename__ = "payroll_salary_components"

    salary_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_salaries.id"))
    line_no: Mapped[int]
    kind: Mapped[str] = mapped_column(String(10))
    name: Mapped[str] = mapped_column(String(200))
    amount: Mapped[Decimal]

    salary: Mapped["EmployeeSalaryModel"] = relationship(back_populates="components")

    def to_dto(self):
        from pos_modules.payroll.models import SalaryComponent
        return SalaryComponent(name=self.name, amount=self.amount)


class AttendanceRecordModel(TrackedBase):
    """
    ORM model for ``AttendanceRecord``.

    Table: ``payroll_attendance``; at most one mark per employee per day.
    """

    __tablename__ = "payroll_attendance"

    employee_id: Mapped[UUID]
    day: Mapped[date]
    status: Mapped[str] = mapped_column(String(10))

    __table_args__ = (
        UniqueConstraint("employee_id", "day", name="uq_payroll_attendance_day"),
        Index("idx_payroll_attendance_day", "day"),
    )

    def to_dto(self):
        from pos_engines.payroll import AttendanceStatus
        from pos_modules.payroll.models import AttendanceRecord
        return AttendanceRecord(
            id=self.id,
            employee_id=self.employee_id,
            day=self.day,
            status=AttendanceStatus(self.status),
        )


class LoanModel(TrackedBase):
    """
    ORM model for ``Loan``.

    Table: ``payroll_loans``
    """

    __tablename__ = "payroll_loans"

    employee_id: Mapped[UUID]
    employee_name: Mapped[str] = mapped_column(String(200))
    amount: Mapped[Decimal]
    reason: Mapped[str] = mapped_column(String(500))
    monthly_installment: Mapped[Decimal]
    issued_on: Mapped[date]
    status: Mapped[str] = mapped_column(String(10))

    repayments: Mapped[list["LoanRepaymentModel"]] = relationship(
        back_populates="loan",
        cascade="all, delete-orphan",
        order_by="LoanRepaymentModel.paid_on",
    )

    __table_args__ = (
        Index("idx_payroll_loans_employee", "employee_id", "status"),
    )

    def to_dto(self):
        from pos_engines.loans import LoanStatus
        from pos_modules.payroll.models import Loan
        return Loan(
            id=self.id,
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            amount=self.amount,
            reason=self.reason,
            monthly_installment=self.monthly_installment,
            issued_on=self.issued_on,
            status=LoanStatus(self.status),
            repayments=tuple(r.to_dto() for r in self.repayments),
        )


class LoanRepaymentModel(TrackedBase):
    """
    ORM model for ``LoanRepayment``.

    Table: ``payroll_loan_repayments``
    """

    __tablename__ = "payroll_loan_repayments"

    loan_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_loans.id"))
    amount: Mapped[Decimal]
    paid_on: Mapped[date]
    payroll_run_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("payroll_runs.id"), nullable=True,
    )

    loan: Mapped["LoanModel"] = relationship(back_populates="repayments")

    def to_dto(self):
        from pos_modules.payroll.models import LoanRepayment
        return LoanRepayment(
            id=self.id,
            loan_id=self.loan_id,
            amount=self.amount,
            paid_on=self.paid_on,
            payroll_run_id=self.payroll_run_id,
        )


class PayrollRunModel(TrackedBase):
    """
    ORM model for ``PayrollRun``.

    Table: ``payroll_runs``
    """

    __tablename__ = "payroll_runs"

    period: Mapped[str] = mapped_column(String(20))
    date_from: Mapped[date]
    date_to: Mapped[date]
    payroll_type: Mapped[str] = mapped_column(String(20))
    status: Mapped[str] = mapped_column(String(10))
    total_gross: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_deductions: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    total_net: Mapped[Decimal] = mapped_column(default=Decimal("0"))
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(nullable=True)

    items: Mapped[list["PayrollItemModel"]] = relationship(
        back_populates="run",
        cascade="all, delete-orphan",
        order_by="PayrollItemModel.line_no",
    )

    __table_args__ = (
        Index("idx_payroll_runs_period", "date_from", "date_to"),
    )

    def to_dto(self):
        from pos_engines.payroll import PayrollType
        from pos_modules.payroll.models import PayrollRun, PayrollRunStatus
        return PayrollRun(
            id=self.id,
            period=self.period,
            date_from=self.date_from,
            date_to=self.date_to,
            payroll_type=PayrollType(self.payroll_type),
            status=PayrollRunStatus(self.status),
            items=tuple(item.to_dto() for item in self.items),
            total_gross=self.total_gross,
            total_deductions=self.total_deductions,
            total_net=self.total_net,
            completed_at=self.completed_at,
            paid_at=self.paid_at,
        )

    def __repr__(self) -> str:
        return f"<PayrollRunModel(id={self.id!r}, period={self.period!r}, status={self.status!r})>"


class PayrollItemModel(TrackedBase):
    """
    ORM model for ``PayrollItem``.

    Table: ``payroll_items``
    """

    __tablename__ = "payroll_items"

    run_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_runs.id"))
    line_no: Mapped[int]
    employee_id: Mapped[UUID]
    employee_name: Mapped[str] = mapped_column(String(200))
    base_salary: Mapped[Decimal]
    days_worked: Mapped[int]
    days_absent: Mapped[Decimal]
    allowances: Mapped[Decimal]
    overtime_hours: Mapped[Decimal]
    overtime_pay: Mapped[Decimal]
    bonus: Mapped[Decimal]
    no_pay_deduction: Mapped[Decimal]
    salary_payable: Mapped[Decimal]
    gross_earnings: Mapped[Decimal]
    recurring_deductions: Mapped[Decimal]
    loan_deductions: Mapped[Decimal]
    adhoc_deductions: Mapped[Decimal]
    total_deductions: Mapped[Decimal]
    net_pay: Mapped[Decimal]

    run: Mapped["PayrollRunModel"] = relationship(back_populates="items")
    loan_installments: Mapped[list["PayrollItemLoanModel"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("run_id", "employee_id", name="uq_payroll_items_employee"),
    )

    def to_dto(self):
        from pos_modules.payroll.models import LoanInstallment, PayrollItem
        return PayrollItem(
            employee_id=self.employee_id,
            employee_name=self.employee_name,
            base_salary=self.base_salary,
            days_worked=self.days_worked,
            days_absent=self.days_absent,
            allowances=self.allowances,
            overtime_hours=self.overtime_hours,
            overtime_pay=self.overtime_pay,
            bonus=self.bonus,
            no_pay_deduction=self.no_pay_deduction,
            salary_payable=self.salary_payable,
            gross_earnings=self.gross_earnings,
            recurring_deductions=self.recurring_deductions,
            loan_deductions=self.loan_deductions,
            adhoc_deductions=self.adhoc_deductions,
            total_deductions=self.total_deductions,
            net_pay=self.net_pay,
            loan_installments=tuple(
                LoanInstallment(loan_id=li.loan_id, amount=li.amount)
                for li in self.loan_installments
            ),
        )


class PayrollItemLoanModel(TrackedBase):
    """
    Installment withheld for one loan on one payroll item.

    Table: ``payroll_item_loans``
    """

    __tablename__ = "payroll_item_loans"

    item_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_items.id"))
    loan_id: Mapped[UUID] = mapped_column(ForeignKey("payroll_loans.id"))
    amount: Mapped[Decimal]

    item: Mapped["PayrollItemModel"] = relationship(back_populates="loan_installments")
