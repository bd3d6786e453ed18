"""Tests for payslip building and rendering."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from pos_engines.payroll import AttendanceStatus
from pos_kernel.exceptions import PayrollItemNotFoundError
from pos_modules.payroll.models import SalaryComponent
from pos_modules.payroll.payslip import WIDTH, PayslipRow, build_payslip, render_payslip
from pos_modules.payroll.service import PayrollService

EMPLOYEE_ID = UUID("00000000-0000-4000-a000-000000000005")


def _row(left: str, right: str) -> str:
    return left + " " * (WIDTH - len(left) - len(right)) + right


@pytest.fixture
def march_run(session, lkr_settings, deterministic_clock):
    service = PayrollService(session, lkr_settings, deterministic_clock)
    service.set_salary(
        EMPLOYEE_ID, "Amara Perera", Decimal("52000"),
        allowances=[SalaryComponent("Transport", Decimal("3000"))],
        deductions=[SalaryComponent("EPF", Decimal("4160"))],
    )
    service.issue_loan(
        EMPLOYEE_ID, "Amara Perera", Decimal("20000"), "Medical bills",
        monthly_installment=Decimal("5000"),
    )
    day = date(2024, 3, 1)
    while day <= date(2024, 3, 31):
        service.mark_attendance(EMPLOYEE_ID, day, AttendanceStatus.PRESENT)
        day += timedelta(days=1)
    service.mark_attendance(EMPLOYEE_ID, date(2024, 3, 5), AttendanceStatus.ABSENT)
    service.mark_attendance(EMPLOYEE_ID, date(2024, 3, 6), AttendanceStatus.ABSENT)
    return service.generate_payroll(
        date(2024, 3, 1), date(2024, 3, 31),
        overtime_hours={EMPLOYEE_ID: Decimal("10")},
    )


class TestBuildPayslip:

    def test_sections(self, march_run, lkr_settings):
        slip = build_payslip(march_run, EMPLOYEE_ID, lkr_settings)
        assert slip.period == "Mar 2024"
        assert slip.employee_name == "Amara Perera"
        assert slip.currency == "LKR"
        assert slip.earnings == (
            PayslipRow("Basic salary", Decimal("52000.00")),
            PayslipRow("Allowances", Decimal("3000.00")),
            PayslipRow("Overtime (10 h)", Decimal("3750.00")),
            PayslipRow("No-pay (2 days)", Decimal("-4000.00")),
        )
        assert slip.deductions == (
            PayslipRow("Recurring deductions", Decimal("4160.00")),
            PayslipRow("Loan installments", Decimal("5000.00")),
        )
        assert slip.gross_earnings == sum(r.amount for r in slip.earnings)
        assert slip.total_deductions == sum(r.amount for r in slip.deductions)
        assert slip.net_pay == Decimal("45590.00")

    def test_unknown_employee(self, march_run, lkr_settings):
        with pytest.raises(PayrollItemNotFoundError):
            build_payslip(march_run, uuid4(), lkr_settings)


class TestRenderPayslip:

    def test_layout(self, march_run, lkr_settings):
        text = render_payslip(build_payslip(march_run, EMPLOYEE_ID, lkr_settings))
        lines = text.splitlines()
        assert lines[0].strip() == "Cashy"
        assert lines[1].strip() == "Payslip - Mar 2024"
        assert _row("Employee:", "Amara Perera") in lines
        assert _row("Period:", "2024-03-01 to 2024-03-31") in lines
        assert _row("Days worked:", "29") in lines
        assert _row("Days absent:", "2") in lines
        assert _row("  Basic salary", "Rs52,000.00") in lines
        assert _row("  No-pay (2 days)", "-Rs4,000.00") in lines
        assert _row("Gross earnings", "Rs54,750.00") in lines
        assert _row("Total deductions", "Rs9,160.00") in lines
        assert lines[-1] == _row("NET PAY", "Rs45,590.00")
        assert "Other deductions" not in text
        assert all(len(line) <= WIDTH for line in lines)
