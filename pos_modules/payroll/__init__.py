"""
Payroll Module (``pos_modules.payroll``).

Salary structures, attendance, employee loans, monthly payroll runs and
payslips.
"""

from pos_modules.payroll.models import (
    AttendanceRecord,
    EmployeeSalary,
    Loan,
    LoanInstallment,
    LoanRepayment,
    PayrollItem,
    PayrollRun,
    PayrollRunStatus,
    SalaryComponent,
)
from pos_modules.payroll.payslip import Payslip, build_payslip, render_payslip
from pos_modules.payroll.service import PayrollService
from pos_modules.payroll.workflows import PAYROLL_RUN_WORKFLOW

__all__ = [
    "AttendanceRecord",
    "EmployeeSalary",
    "Loan",
    "LoanInstallment",
    "LoanRepayment",
    "PayrollItem",
    "PayrollRun",
    "PayrollRunStatus",
    "SalaryComponent",
    "Payslip",
    "build_payslip",
    "render_payslip",
    "PayrollService",
    "PAYROLL_RUN_WORKFLOW",
]
