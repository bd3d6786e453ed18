"""
Module: pos_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculators.  This is the canonical import surface for pos_modules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pos_kernel (domain values, exceptions, logging) and
    sibling engine modules.  MUST NOT import pos_modules or pos_config.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()`` or ``date.today()``.
      Dates are passed in by the caller.
    - Decimal-only arithmetic through ``Money``; floats are never used.
    - Determinism: identical inputs always produce identical outputs.
"""

from pos_engines.cash_drawer import (
    CashDrawerCalculator,
    DrawerMovement,
    DrawerReconciliation,
    MovementDirection,
)
from pos_engines.loans import LoanPosition, LoanStatus, installment_due, loan_position
from pos_engines.order_totals import (
    OrderCalculator,
    OrderLine,
    OrderTotals,
    TenderResult,
    quick_cash_options,
    settle_tender,
)
from pos_engines.payroll import (
    AttendanceMark,
    AttendanceStatus,
    AttendanceSummary,
    PayComponent,
    PayrollCalculator,
    PayrollInput,
    PayrollLine,
    PayrollRunResult,
    PayrollType,
    month_bounds,
    summarize_attendance,
)
from pos_engines.sales_report import (
    ReportLine,
    ReportSale,
    SalesReport,
    SalesReportCalculator,
)

__all__ = [
    # Order totals
    "OrderCalculator",
    "OrderLine",
    "OrderTotals",
    "TenderResult",
    "settle_tender",
    "quick_cash_options",
    # Payroll
    "PayrollType",
    "PayrollCalculator",
    "PayrollInput",
    "PayrollLine",
    "PayrollRunResult",
    "PayComponent",
    "AttendanceStatus",
    "AttendanceMark",
    "AttendanceSummary",
    "summarize_attendance",
    "month_bounds",
    # Loans
    "LoanStatus",
    "LoanPosition",
    "loan_position",
    "installment_due",
    # Cash drawer
    "CashDrawerCalculator",
    "DrawerMovement",
    "DrawerReconciliation",
    "MovementDirection",
    # Reports
    "SalesReportCalculator",
    "SalesReport",
    "ReportSale",
    "ReportLine",
]
