"""
Property-based tests for the calculation engines.

Invariants checked over generated inputs:
- Order: total == subtotal + tax; tax is zero when disabled; tax never
  exceeds the subtotal.
- Cash tender: tendered - change == amount due.
- Payroll: net == gross - total deductions; no-pay never exceeds base and
  uses the 30 or 26 day divisor.
- Drawer: counting exactly the expected cash always balances.
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from pos_engines.cash_drawer import CashDrawerCalculator, DrawerMovement, MovementDirection
from pos_engines.order_totals import OrderCalculator, OrderLine, settle_tender
from pos_engines.payroll import PayComponent, PayrollCalculator, PayrollInput, PayrollType
from pos_kernel.domain.values import Money

prices = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("9999.99"), places=2,
    allow_nan=False, allow_infinity=False,
)
positive_amounts = st.decimals(
    min_value=Decimal("0.01"), max_value=Decimal("99999.99"), places=2,
    allow_nan=False, allow_infinity=False,
)
rates = st.decimals(
    min_value=Decimal("0"), max_value=Decimal("1"), places=4,
    allow_nan=False, allow_infinity=False,
)
quantities = st.integers(min_value=1, max_value=50)


@st.composite
def order_lines(draw):
    count = draw(st.integers(min_value=0, max_value=8))
    return [
        OrderLine(
            variant_id=f"v{i}",
            name=f"Item {i}",
            unit_price=Money.of(draw(prices), "USD"),
            quantity=draw(quantities),
        )
        for i in range(count)
    ]


class TestOrderProperties:

    @given(lines=order_lines(), rate=rates, enabled=st.booleans())
    @settings(max_examples=100, deadline=None)
    def test_total_is_subtotal_plus_tax(self, lines, rate, enabled):
        totals = OrderCalculator().calculate(lines, tax_rate=rate, tax_enabled=enabled)
        assert totals.total == totals.subtotal + totals.tax
        assert totals.tax <= totals.subtotal
        if not enabled:
            assert totals.tax.is_zero

    @given(due=positive_amounts, extra=prices)
    @settings(max_examples=100, deadline=None)
    def test_change_returns_the_difference(self, due, extra):
        amount_due = Money.of(due, "USD")
        result = settle_tender(amount_due, Money.of(due + extra, "USD"), is_cash=True)
        assert result.amount_tendered - result.change == amount_due
        assert not result.change.is_negative


class TestPayrollProperties:

    @given(
        base=positive_amounts,
        allowance=prices,
        deduction=prices,
        loan=prices,
        bonus=prices,
        absent=st.integers(min_value=0, max_value=31),
        overtime=st.integers(min_value=0, max_value=80),
        payroll_type=st.sampled_from(list(PayrollType)),
    )
    @settings(max_examples=100, deadline=None)
    def test_net_is_gross_minus_deductions(
        self, base, allowance, deduction, loan, bonus, absent, overtime, payroll_type,
    ):
        calc = PayrollCalculator(payroll_type)
        line = calc.calculate(PayrollInput(
            employee_id="e",
            employee_name="Employee",
            base_salary=Money.of(base, "LKR"),
            allowances=(PayComponent("Allowance", Money.of(allowance, "LKR")),),
            recurring_deductions=(PayComponent("EPF", Money.of(deduction, "LKR")),),
            loan_installments=(PayComponent("Loan", Money.of(loan, "LKR")),),
            overtime_hours=Decimal(overtime),
            absent_days=Decimal(absent),
            bonus=Money.of(bonus, "LKR"),
        ))
        assert line.net_pay == line.gross_earnings - line.total_deductions
        assert line.no_pay_deduction <= line.base_salary
        expected_no_pay = min(
            (Money.of(base, "LKR") / payroll_type.divisor * absent).round(),
            Money.of(base, "LKR").round(),
        )
        assert line.no_pay_deduction == expected_no_pay


class TestDrawerProperties:

    @given(
        opening=prices,
        sales=prices,
        ins=st.lists(positive_amounts, max_size=5),
        outs=st.lists(positive_amounts, max_size=5),
    )
    @settings(max_examples=100, deadline=None)
    def test_counting_expected_cash_balances(self, opening, sales, ins, outs):
        calc = CashDrawerCalculator()
        movements = [
            DrawerMovement(MovementDirection.IN, Money.of(a, "USD"), "in") for a in ins
        ] + [
            DrawerMovement(MovementDirection.OUT, Money.of(a, "USD"), "out") for a in outs
        ]
        expected = calc.expected_cash(
            Money.of(opening, "USD"), Money.of(sales, "USD"), movements,
        )
        if expected.is_negative:
            return
        result = calc.reconcile(
            opening_float=Money.of(opening, "USD"),
            cash_sales=Money.of(sales, "USD"),
            movements=movements,
            counted_cash=expected,
        )
        assert result.is_balanced
