"""
pos_modules.payroll.service
===========================

Responsibility:
    HR inputs (salary structures, attendance, employee loans) and monthly
    payroll runs built from them.  Pay arithmetic lives in
    ``pos_engines.payroll`` and ``pos_engines.loans``; this module gathers
    inputs, persists results and drives the run workflow.

Invariants enforced:
    - One salary structure per employee; one attendance mark per
      employee per day.
    - Every persisted item satisfies net_pay == gross_earnings - total_deductions.
    - Run totals equal the sum of their items.
    - A run is editable only while Pending.
    - Loan repayments never exceed the outstanding balance; the installment
      withheld by a run is posted as a repayment when the run is paid.

Failure modes:
    - InvalidPeriodError when date_from is after date_to.
    - SalaryNotFoundError, LoanNotFoundError, PayrollRunNotFoundError,
      PayrollItemNotFoundError for unknown references.
    - PayrollLockedError when editing a run that is not Pending.
    - LoanOverpaymentError when a repayment exceeds the remaining balance.
    - InvalidTransitionError for out-of-order run transitions.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Mapping, Sequence
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from pos_config.schema import StoreSettings
from pos_engines.loans import LoanPosition, LoanStatus, installment_due, loan_position
from pos_engines.payroll import (
    AttendanceMark,
    AttendanceStatus,
    AttendanceSummary,
    PayComponent,
    PayrollCalculator,
    PayrollInput,
    PayrollLine,
    PayrollType,
    summarize_attendance,
)
from pos_kernel.db.types import SYSTEM_ACTOR_ID
from pos_kernel.domain.clock import Clock, SystemClock
from pos_kernel.domain.values import Money
from pos_kernel.exceptions import (
    InvalidPeriodError,
    LoanNotFoundError,
    LoanOverpaymentError,
    PayrollItemNotFoundError,
    PayrollLockedError,
    PayrollRunNotFoundError,
    SalaryNotFoundError,
)
from pos_kernel.logging_config import LogContext, get_logger
from pos_modules.payroll.models import (
    AttendanceRecord,
    ComponentKind,
    EmployeeSalary,
    Loan,
    LoanInstallment,
    PayrollRun,
    PayrollRunStatus,
    SalaryComponent,
)
from pos_modules.payroll.orm import (
    AttendanceRecordModel,
    EmployeeSalaryModel,
    LoanModel,
    LoanRepaymentModel,
    PayrollItemLoanModel,
    PayrollItemModel,
    PayrollRunModel,
    SalaryComponentModel,
)
from pos_modules.payroll.workflows import PAYROLL_RUN_WORKFLOW

logger = get_logger("modules.payroll.service")

MIN_LOAN_REASON_LENGTH = 3


class PayrollService:
    """
    Salaries, attendance, loans and payroll runs.

    Transaction boundary:
        Each public mutating method commits on success and rolls back on
        failure.
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

    @property
    def _currency(self) -> str:
        return self._settings.currency

    def _money(self, amount: Decimal) -> Money:
        return Money.of(amount, self._currency)

    def _round(self, amount: Decimal) -> Decimal:
        return self._money(amount).round().amount

    def _calculator(self, payroll_type: PayrollType | None = None) -> PayrollCalculator:
        return PayrollCalculator(
            payroll_type or self._settings.payroll_kind,
            overtime_multiplier=self._settings.overtime_multiplier,
            standard_hours_per_day=self._settings.standard_hours_per_day,
        )

    # =========================================================================
    # Salaries
    # =========================================================================

    def set_salary(
        self,
        employee_id: UUID,
        employee_name: str,
        base_salary: Decimal,
        allowances: Sequence[SalaryComponent] = (),
        deductions: Sequence[SalaryComponent] = (),
    ) -> EmployeeSalary:
        """Create or replace an employee's salary structure."""
        if not employee_name or not employee_name.strip():
            raise ValueError("Employee name is required")
        if base_salary <= 0:
            raise ValueError("Base salary must be positive")
        try:
            model = self._session.scalars(
                select(EmployeeSalaryModel)
                .where(EmployeeSalaryModel.employee_id == employee_id)
            ).one_or_none()
            created = model is None
            if model is None:
                model = EmployeeSalaryModel(
                    employee_id=employee_id,
                    created_by_id=self._actor_id,
                )
                self._session.add(model)
            else:
                model.updated_by_id = self._actor_id
            model.employee_name = employee_name.strip()
            model.base_salary = self._round(base_salary)

            components = [
                (ComponentKind.ALLOWANCE, c) for c in allowances
            ] + [
                (ComponentKind.DEDUCTION, c) for c in deductions
            ]
            model.components = [
                SalaryComponentModel(
                    line_no=line_no,
                    kind=kind.value,
                    name=component.name.strip(),
                    amount=self._round(component.amount),
                    created_by_id=self._actor_id,
                )
                for line_no, (kind, component) in enumerate(components, start=1)
            ]
            self._session.commit()
            dto = model.to_dto()
            logger.info("salary_set", extra={
                "employee_id": str(employee_id),
                "is_new": created,
                "base_salary": str(dto.base_salary),
                "net_salary": str(dto.net_salary),
            })
            return dto
        except Exception:
            self._session.rollback()
            raise

    def get_salary(self, employee_id: UUID) -> EmployeeSalary:
        return self._get_salary_model(employee_id).to_dto()

    def list_salaries(self) -> list[EmployeeSalary]:
        rows = self._session.scalars(
            select(EmployeeSalaryModel).order_by(EmployeeSalaryModel.employee_name)
        ).all()
        return [row.to_dto() for row in rows]

    def _get_salary_model(self, employee_id: UUID) -> EmployeeSalaryModel:
        model = self._session.scalars(
            select(EmployeeSalaryModel)
            .where(EmployeeSalaryModel.employee_id == employee_id)
        ).one_or_none()
        if model is None:
            raise SalaryNotFoundError(str(employee_id))
        return model

    # =========================================================================
    # Attendance
    # =========================================================================

    def mark_attendance(
        self,
        employee_id: UUID,
        day: date,
        status: AttendanceStatus | str,
    ) -> AttendanceRecord:
        """Record the day's mark; marking the same day again replaces it."""
        status = AttendanceStatus(status)
        try:
            model = self._session.scalars(
                select(AttendanceRecordModel).where(
                    AttendanceRecordModel.employee_id == employee_id,
                    AttendanceRecordModel.day == day,
                )
            ).one_or_none()
            if model is None:
                model = AttendanceRecordModel(
                    employee_id=employee_id,
                    day=day,
                    status=status.value,
                    created_by_id=self._actor_id,
                )
                self._session.add(model)
            else:
                model.status = status.value
                model.updated_by_id = self._actor_id
            self._session.commit()
            logger.debug("attendance_marked", extra={
                "employee_id": str(employee_id),
                "day": day.isoformat(),
                "status": status.value,
            })
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def attendance(
        self,
        employee_id: UUID | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> list[AttendanceRecord]:
        stmt = select(AttendanceRecordModel).order_by(
            AttendanceRecordModel.day, AttendanceRecordModel.employee_id,
        )
        if employee_id is not None:
            stmt = stmt.where(AttendanceRecordModel.employee_id == employee_id)
        if start is not None:
            stmt = stmt.where(AttendanceRecordModel.day >= start)
        if end is not None:
            stmt = stmt.where(AttendanceRecordModel.day <= end)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def attendance_summary(
        self,
        employee_id: UUID,
        start: date,
        end: date,
    ) -> AttendanceSummary:
        records = self.attendance(employee_id, start, end)
        return summarize_attendance(
            (AttendanceMark(r.day, r.status) for r in records), start, end,
        )

    # =========================================================================
    # Loans
    # =========================================================================

    def issue_loan(
        self,
        employee_id: UUID,
        employee_name: str,
        amount: Decimal,
        reason: str,
        monthly_installment: Decimal,
        issued_on: date | None = None,
    ) -> Loan:
        if amount <= 0:
            raise ValueError("Loan amount must be positive")
        if not reason or len(reason.strip()) < MIN_LOAN_REASON_LENGTH:
            raise ValueError(
                f"Loan reason must be at least {MIN_LOAN_REASON_LENGTH} characters"
            )
        if monthly_installment <= 0:
            raise ValueError("Monthly installment must be positive")
        try:
            model = LoanModel(
                id=uuid4(),
                employee_id=employee_id,
                employee_name=employee_name,
                amount=self._round(amount),
                reason=reason.strip(),
                monthly_installment=self._round(monthly_installment),
                issued_on=issued_on or self._clock.today(),
                status=LoanStatus.ACTIVE.value,
                created_by_id=self._actor_id,
            )
            self._session.add(model)
            self._session.commit()
            logger.info("loan_issued", extra={
                "loan_id": str(model.id),
                "employee_id": str(employee_id),
                "amount": str(model.amount),
                "monthly_installment": str(model.monthly_installment),
            })
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def record_repayment(
        self,
        loan_id: UUID,
        amount: Decimal,
        paid_on: date | None = None,
    ) -> Loan:
        """Record a manual repayment against a loan."""
        if amount <= 0:
            raise ValueError("Repayment amount must be positive")
        try:
            model = self._get_loan_model(loan_id)
            position = self._position(model)
            if self._money(amount) > position.remaining:
                raise LoanOverpaymentError(
                    str(loan_id), position.remaining.amount, amount,
                )
            self._post_repayment(model, self._round(amount), paid_on or self._clock.today())
            self._session.commit()
            return model.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def loan_position(self, loan_id: UUID) -> LoanPosition:
        return self._position(self._get_loan_model(loan_id))

    def get_loan(self, loan_id: UUID) -> Loan:
        return self._get_loan_model(loan_id).to_dto()

    def list_loans(
        self,
        employee_id: UUID | None = None,
        status: LoanStatus | None = None,
    ) -> list[Loan]:
        stmt = select(LoanModel).order_by(LoanModel.issued_on, LoanModel.created_at)
        if employee_id is not None:
            stmt = stmt.where(LoanModel.employee_id == employee_id)
        if status is not None:
            stmt = stmt.where(LoanModel.status == status.value)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def _get_loan_model(self, loan_id: UUID) -> LoanModel:
        model = self._session.get(LoanModel, loan_id)
        if model is None:
            raise LoanNotFoundError(str(loan_id))
        return model

    def _position(self, model: LoanModel) -> LoanPosition:
        return loan_position(
            self._money(model.amount),
            [self._money(r.amount) for r in model.repayments],
        )

    def _post_repayment(
        self,
        model: LoanModel,
        amount: Decimal,
        paid_on: date,
        payroll_run_id: UUID | None = None,
    ) -> None:
        model.repayments.append(LoanRepaymentModel(
            amount=amount,
            paid_on=paid_on,
            payroll_run_id=payroll_run_id,
            created_by_id=self._actor_id,
        ))
        position = self._position(model)
        model.status = position.status.value
        model.updated_by_id = self._actor_id
        logger.info("loan_repayment_recorded", extra={
            "loan_id": str(model.id),
            "amount": str(amount),
            "remaining": str(position.remaining.amount),
            "status": position.status.value,
            "payroll_run_id": str(payroll_run_id) if payroll_run_id else None,
        })

    def _installments_for(self, employee_id: UUID) -> list[LoanInstallment]:
        loans = self._session.scalars(
            select(LoanModel)
            .where(
                LoanModel.employee_id == employee_id,
                LoanModel.status == LoanStatus.ACTIVE.value,
            )
            .order_by(LoanModel.issued_on, LoanModel.created_at)
        ).all()
        installments = []
        for loan in loans:
            due = installment_due(
                self._money(loan.amount),
                self._money(loan.monthly_installment),
                [self._money(r.amount) for r in loan.repayments],
            )
            if due.is_positive:
                installments.append(LoanInstallment(loan_id=loan.id, amount=due.amount))
        return installments

    # =========================================================================
    # Payroll runs
    # =========================================================================

    def generate_payroll(
        self,
        date_from: date,
        date_to: date,
        overtime_hours: Mapping[UUID, Decimal] | None = None,
    ) -> PayrollRun:
        """
        Build a Pending run with one item per employee that has a salary.

        Absent days are the days in the period not marked Present or Leave,
        so an unmarked day is unpaid.  Loan installments come from each
        employee's active loans; recurring deductions from the salary
        structure.
        """
        if date_from > date_to:
            raise InvalidPeriodError(date_from.isoformat(), date_to.isoformat())
        overtime_hours = overtime_hours or {}
        calculator = self._calculator()
        run_id = uuid4()

        with LogContext.bind(payroll_run_id=str(run_id)):
            try:
                salaries = self._session.scalars(
                    select(EmployeeSalaryModel).order_by(EmployeeSalaryModel.employee_name)
                ).all()
                inputs: list[PayrollInput] = []
                context: list[tuple[AttendanceSummary, list[LoanInstallment]]] = []
                for salary_model in salaries:
                    salary = salary_model.to_dto()
                    summary = self.attendance_summary(salary.employee_id, date_from, date_to)
                    installments = self._installments_for(salary.employee_id)
                    inputs.append(PayrollInput(
                        employee_id=salary.employee_id,
                        employee_name=salary.employee_name,
                        base_salary=self._money(salary.base_salary),
                        allowances=tuple(
                            PayComponent(c.name, self._money(c.amount))
                            for c in salary.allowances
                        ),
                        recurring_deductions=tuple(
                            PayComponent(c.name, self._money(c.amount))
                            for c in salary.deductions
                        ),
                        loan_installments=self._loan_components(installments),
                        overtime_hours=Decimal(
                            str(overtime_hours.get(salary.employee_id, 0))
                        ),
                        absent_days=Decimal(summary.days_absent),
                    ))
                    context.append((summary, installments))

                result = calculator.calculate_run(inputs, currency=self._currency)

                run = PayrollRunModel(
                    id=run_id,
                    period=date_from.strftime("%b %Y"),
                    date_from=date_from,
                    date_to=date_to,
                    payroll_type=calculator.payroll_type.value,
                    status=PAYROLL_RUN_WORKFLOW.initial_state,
                    created_by_id=self._actor_id,
                )
                items = []
                for line_no, (line, (summary, installments)) in enumerate(
                    zip(result.lines, context), start=1,
                ):
                    item = PayrollItemModel(
                        line_no=line_no,
                        employee_id=line.employee_id,
                        employee_name=line.employee_name,
                        days_worked=summary.days_worked,
                        created_by_id=self._actor_id,
                    )
                    self._apply_line(item, line)
                    item.loan_installments = [
                        PayrollItemLoanModel(
                            loan_id=li.loan_id,
                            amount=li.amount,
                            created_by_id=self._actor_id,
                        )
                        for li in installments
                    ]
                    items.append(item)
                run.items = items
                self._update_totals(run)
                self._session.add(run)
                self._session.commit()
                logger.info("payroll_generated", extra={
                    "period": run.period,
                    "date_from": date_from.isoformat(),
                    "date_to": date_to.isoformat(),
                    "employee_count": len(items),
                    "total_net": str(run.total_net),
                })
                return run.to_dto()
            except Exception:
                self._session.rollback()
                raise

    def update_item(
        self,
        run_id: UUID,
        employee_id: UUID,
        bonus: Decimal | None = None,
        adhoc_deductions: Decimal | None = None,
        overtime_hours: Decimal | None = None,
    ) -> PayrollRun:
        """Adjust one employee's bonus, deductions or overtime and recompute."""
        with LogContext.bind(payroll_run_id=str(run_id)):
            try:
                run = self._get_run_model(run_id)
                if run.status != PayrollRunStatus.PENDING.value:
                    raise PayrollLockedError(str(run_id), run.status)
                item = next(
                    (i for i in run.items if i.employee_id == employee_id), None,
                )
                if item is None:
                    raise PayrollItemNotFoundError(str(run_id), str(employee_id))

                calculator = self._calculator(PayrollType(run.payroll_type))
                line = calculator.calculate(PayrollInput(
                    employee_id=item.employee_id,
                    employee_name=item.employee_name,
                    base_salary=self._money(item.base_salary),
                    allowances=(PayComponent("Allowances", self._money(item.allowances)),),
                    recurring_deductions=(
                        PayComponent("Deductions", self._money(item.recurring_deductions)),
                    ),
                    loan_installments=self._loan_components(
                        LoanInstallment(li.loan_id, li.amount)
                        for li in item.loan_installments
                    ),
                    overtime_hours=(
                        item.overtime_hours if overtime_hours is None
                        else Decimal(str(overtime_hours))
                    ),
                    absent_days=item.days_absent,
                    bonus=self._money(item.bonus if bonus is None else bonus),
                    adhoc_deductions=self._money(
                        item.adhoc_deductions if adhoc_deductions is None
                        else adhoc_deductions
                    ),
                ))
                self._apply_line(item, line)
                item.updated_by_id = self._actor_id
                self._update_totals(run)
                run.updated_by_id = self._actor_id
                self._session.commit()
                logger.info("payroll_item_updated", extra={
                    "employee_id": str(employee_id),
                    "bonus": str(item.bonus),
                    "adhoc_deductions": str(item.adhoc_deductions),
                    "net_pay": str(item.net_pay),
                })
                return run.to_dto()
            except Exception:
                self._session.rollback()
                raise

    def complete_run(self, run_id: UUID) -> PayrollRun:
        """Lock the run for payment."""
        try:
            run = self._get_run_model(run_id)
            run.status = PAYROLL_RUN_WORKFLOW.transition(run.status, "complete")
            run.completed_at = self._clock.now()
            run.updated_by_id = self._actor_id
            self._session.commit()
            logger.info("payroll_completed", extra={"payroll_run_id": str(run_id)})
            return run.to_dto()
        except Exception:
            self._session.rollback()
            raise

    def mark_paid(self, run_id: UUID) -> PayrollRun:
        """
        Mark a completed run as paid and post its loan installments.

        An installment larger than what is still owed (the loan was partly
        repaid by hand after the run was generated) is posted only up to
        the remaining balance.
        """
        with LogContext.bind(payroll_run_id=str(run_id)):
            try:
                run = self._get_run_model(run_id)
                run.status = PAYROLL_RUN_WORKFLOW.transition(run.status, "pay")
                paid_on = self._clock.today()
                posted = 0
                for item in run.items:
                    for installment in item.loan_installments:
                        loan = self._get_loan_model(installment.loan_id)
                        remaining = self._position(loan).remaining.amount
                        amount = min(installment.amount, remaining)
                        if amount <= 0:
                            logger.warning("loan_installment_skipped", extra={
                                "loan_id": str(loan.id),
                                "installment": str(installment.amount),
                            })
                            continue
                        self._post_repayment(loan, amount, paid_on, run.id)
                        posted += 1
                run.paid_at = self._clock.now()
                run.updated_by_id = self._actor_id
                self._session.commit()
                logger.info("payroll_paid", extra={
                    "total_net": str(run.total_net),
                    "loan_repayments_posted": posted,
                })
                return run.to_dto()
            except Exception:
                self._session.rollback()
                raise

    def get_run(self, run_id: UUID) -> PayrollRun:
        return self._get_run_model(run_id).to_dto()

    def list_runs(self, status: PayrollRunStatus | None = None) -> list[PayrollRun]:
        stmt = select(PayrollRunModel).order_by(
            PayrollRunModel.date_from.desc(), PayrollRunModel.created_at.desc(),
        )
        if status is not None:
            stmt = stmt.where(PayrollRunModel.status == status.value)
        return [row.to_dto() for row in self._session.scalars(stmt).all()]

    def _get_run_model(self, run_id: UUID) -> PayrollRunModel:
        model = self._session.get(PayrollRunModel, run_id)
        if model is None:
            raise PayrollRunNotFoundError(str(run_id))
        return model

    def _loan_components(self, installments) -> tuple[PayComponent, ...]:
        return tuple(
            PayComponent(f"Loan {li.loan_id}", self._money(li.amount))
            for li in installments
        )

    @staticmethod
    def _apply_line(item: PayrollItemModel, line: PayrollLine) -> None:
        item.base_salary = line.base_salary.amount
        item.days_absent = line.absent_days
        item.allowances = line.allowances_total.amount
        item.overtime_hours = line.overtime_hours
        item.overtime_pay = line.overtime_pay.amount
        item.bonus = line.bonus.amount
        item.no_pay_deduction = line.no_pay_deduction.amount
        item.salary_payable = line.salary_payable.amount
        item.gross_earnings = line.gross_earnings.amount
        item.recurring_deductions = line.recurring_deductions_total.amount
        item.loan_deductions = line.loan_deductions_total.amount
        item.adhoc_deductions = line.adhoc_deductions.amount
        item.total_deductions = line.total_deductions.amount
        item.net_pay = line.net_pay.amount

    @staticmethod
    def _update_totals(run: PayrollRunModel) -> None:
        zero = Decimal("0")
        run.total_gross = sum((i.gross_earnings for i in run.items), zero)
        run.total_deductions = sum((i.total_deductions for i in run.items), zero)
        run.total_net = sum((i.net_pay for i in run.items), zero)
