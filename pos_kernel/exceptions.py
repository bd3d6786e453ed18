"""
Typed exception hierarchy for the POS kernel and modules.

Every error raised by a service carries a machine-readable ``code`` class
attribute and structured attributes, so callers catch by type and render
by data instead of parsing messages:

    try:
        sales.checkout(cart, PaymentMethod.CASH, amount_tendered=Decimal("10"))
    except InsufficientTenderError as e:
        show_error(e.code, due=e.amount_due, tendered=e.amount_tendered)

Hierarchy:

    PosError (base)
    |
    +-- CatalogError
    |   +-- ProductNotFoundError
    |   +-- VariantNotFoundError
    |   +-- InsufficientStockError
    |
    +-- OrderError
    |   +-- EmptyOrderError
    |   +-- InsufficientTenderError
    |   +-- SaleNotFoundError
    |   +-- CreditSaleError
    |
    +-- PurchaseError
    |   +-- PurchaseNotFoundError
    |
    +-- ReturnError
    |   +-- ReturnNotFoundError
    |
    +-- PayrollError
    |   +-- SalaryNotFoundError
    |   +-- PayrollRunNotFoundError
    |   +-- PayrollItemNotFoundError
    |   +-- PayrollLockedError
    |   +-- InvalidPeriodError
    |
    +-- LoanError
    |   +-- LoanNotFoundError
    |   +-- LoanOverpaymentError
    |
    +-- CashDrawerError
    |   +-- ActiveSessionExistsError
    |   +-- NoActiveSessionError
    |   +-- CashDrawerDisabledError
    |   +-- DrawerSessionNotFoundError
    |
    +-- WorkflowError
    |   +-- InvalidTransitionError
    |
    +-- ConfigurationError

Form-level validation of DTOs (negative prices, zero quantities) raises
``ValueError`` from ``__post_init__``; these are programming or input
errors caught before any service runs.
"""

from decimal import Decimal


class PosError(Exception):
    """
    Base exception for all POS errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "POS_ERROR"


# Catalog / inventory


class CatalogError(PosError):
    """Base exception for product catalog and stock errors."""

    code: str = "CATALOG_ERROR"


class ProductNotFoundError(CatalogError):
    """Product with given ID was not found."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class VariantNotFoundError(CatalogError):
    """Variant was not found, or does not belong to the given product."""

    code: str = "VARIANT_NOT_FOUND"

    def __init__(self, variant_id: str, product_id: str | None = None):
        self.variant_id = variant_id
        self.product_id = product_id
        if product_id is None:
            msg = f"Variant not found: {variant_id}"
        else:
            msg = f"Variant {variant_id} not found on product {product_id}"
        super().__init__(msg)


class InsufficientStockError(CatalogError):
    """A stock movement would take a variant below zero."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, variant_id: str, sku: str, available: int, requested: int):
        self.variant_id = variant_id
        self.sku = sku
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for {sku}: {available} available, "
            f"{requested} requested"
        )


# Orders / sales


class OrderError(PosError):
    """Base exception for checkout and sale errors."""

    code: str = "ORDER_ERROR"


class EmptyOrderError(OrderError):
    """Checkout attempted with no items in the cart."""

    code: str = "EMPTY_ORDER"

    def __init__(self):
        super().__init__("Cannot check out an empty order")


class InsufficientTenderError(OrderError):
    """Cash tendered is less than the order total."""

    code: str = "INSUFFICIENT_TENDER"

    def __init__(self, amount_due: Decimal, amount_tendered: Decimal):
        self.amount_due = amount_due
        self.amount_tendered = amount_tendered
        super().__init__(
            f"Amount must be at least the total: due {amount_due}, "
            f"tendered {amount_tendered}"
        )


class SaleNotFoundError(OrderError):
    """Sale with given ID was not found."""

    code: str = "SALE_NOT_FOUND"

    def __init__(self, sale_id: str):
        self.sale_id = sale_id
        super().__init__(f"Sale not found: {sale_id}")


class CreditSaleError(OrderError):
    """Invalid operation on a credit (pay-later) sale."""

    code: str = "CREDIT_SALE_ERROR"

    def __init__(self, sale_id: str | None, reason: str):
        self.sale_id = sale_id
        self.reason = reason
        super().__init__(f"Credit sale {sale_id}: {reason}")


# Purchasing / returns


class PurchaseError(PosError):
    """Base exception for purchase order errors."""

    code: str = "PURCHASE_ERROR"


class PurchaseNotFoundError(PurchaseError):
    """Purchase with given ID was not found."""

    code: str = "PURCHASE_NOT_FOUND"

    def __init__(self, purchase_id: str):
        self.purchase_id = purchase_id
        super().__init__(f"Purchase not found: {purchase_id}")


class ReturnError(PosError):
    """Base exception for customer return errors."""

    code: str = "RETURN_ERROR"


class ReturnNotFoundError(ReturnError):
    """Return with given ID was not found."""

    code: str = "RETURN_NOT_FOUND"

    def __init__(self, return_id: str):
        self.return_id = return_id
        super().__init__(f"Return not found: {return_id}")


# Payroll


class PayrollError(PosError):
    """Base exception for payroll and HR errors."""

    code: str = "PAYROLL_ERROR"


class SalaryNotFoundError(PayrollError):
    """No salary structure recorded for the employee."""

    code: str = "SALARY_NOT_FOUND"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(f"No salary structure for employee: {employee_id}")


class PayrollRunNotFoundError(PayrollError):
    """Payroll run with given ID was not found."""

    code: str = "PAYROLL_RUN_NOT_FOUND"

    def __init__(self, run_id: str):
        self.run_id = run_id
        super().__init__(f"Payroll run not found: {run_id}")


class PayrollItemNotFoundError(PayrollError):
    """Employee has no line in the payroll run."""

    code: str = "PAYROLL_ITEM_NOT_FOUND"

    def __init__(self, run_id: str, employee_id: str):
        self.run_id = run_id
        self.employee_id = employee_id
        super().__init__(
            f"Employee {employee_id} has no item in payroll run {run_id}"
        )


class PayrollLockedError(PayrollError):
    """Payroll run is no longer editable."""

    code: str = "PAYROLL_LOCKED"

    def __init__(self, run_id: str, status: str):
        self.run_id = run_id
        self.status = status
        super().__init__(f"Payroll run {run_id} is {status} and cannot be edited")


class InvalidPeriodError(PayrollError):
    """Payroll period dates are inverted."""

    code: str = "INVALID_PERIOD"

    def __init__(self, date_from: str, date_to: str):
        self.date_from = date_from
        self.date_to = date_to
        super().__init__(f"Invalid payroll period: {date_from} to {date_to}")


# Loans


class LoanError(PosError):
    """Base exception for employee loan errors."""

    code: str = "LOAN_ERROR"


class LoanNotFoundError(LoanError):
    """Loan with given ID was not found."""

    code: str = "LOAN_NOT_FOUND"

    def __init__(self, loan_id: str):
        self.loan_id = loan_id
        super().__init__(f"Loan not found: {loan_id}")


class LoanOverpaymentError(LoanError):
    """Repayment exceeds the remaining loan balance."""

    code: str = "LOAN_OVERPAYMENT"

    def __init__(self, loan_id: str, remaining: Decimal, amount: Decimal):
        self.loan_id = loan_id
        self.remaining = remaining
        self.amount = amount
        super().__init__(
            f"Repayment {amount} exceeds remaining balance {remaining} "
            f"on loan {loan_id}"
        )


# Cash drawer


class CashDrawerError(PosError):
    """Base exception for cash drawer errors."""

    code: str = "CASH_DRAWER_ERROR"


class ActiveSessionExistsError(CashDrawerError):
    """A drawer session is already open."""

    code: str = "ACTIVE_SESSION_EXISTS"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"An active session already exists: {session_id}")


class NoActiveSessionError(CashDrawerError):
    """Operation requires an open drawer session."""

    code: str = "NO_ACTIVE_SESSION"

    def __init__(self):
        super().__init__("No active cash drawer session")


class CashDrawerDisabledError(CashDrawerError):
    """Cash drawer tracking is turned off in store settings."""

    code: str = "CASH_DRAWER_DISABLED"

    def __init__(self):
        super().__init__("Cash drawer is disabled in store settings")


class DrawerSessionNotFoundError(CashDrawerError):
    """Drawer session with given ID was not found."""

    code: str = "DRAWER_SESSION_NOT_FOUND"

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(f"Cash drawer session not found: {session_id}")


# Workflow


class WorkflowError(PosError):
    """Base exception for document lifecycle errors."""

    code: str = "WORKFLOW_ERROR"


class InvalidTransitionError(WorkflowError):
    """Action is not allowed from the document's current state."""

    code: str = "INVALID_TRANSITION"

    def __init__(self, workflow: str, from_state: str, action: str):
        self.workflow = workflow
        self.from_state = from_state
        self.action = action
        super().__init__(
            f"{workflow}: cannot '{action}' from state '{from_state}'"
        )


# Configuration


class ConfigurationError(PosError):
    """Store settings are missing or invalid."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid setting '{field}': {reason}")
