"""
Unit tests for Money and decimal handling.

Verifies:
- Construction and parsing
- Rounding to the currency's minor unit
- Same-currency arithmetic
- Display formatting for receipts
"""

import pytest
from decimal import Decimal

from pos_kernel.db.types import MONEY_DECIMAL_PLACES, money_from_str, round_money
from pos_kernel.domain.values import Currency, Money


class TestMoneyFromStr:
    """Tests for money_from_str function."""

    def test_simple_decimal(self):
        assert money_from_str("100.50") == Decimal("100.50")

    def test_thousands_separator(self):
        assert money_from_str("1,250.00") == Decimal("1250.00")

    def test_surrounding_whitespace(self):
        assert money_from_str("  7.25 ") == Decimal("7.25")

    def test_invalid_string_raises(self):
        with pytest.raises(ValueError, match="Invalid amount"):
            money_from_str("not a number")

    def test_infinity_rejected(self):
        with pytest.raises(ValueError):
            money_from_str("Infinity")


class TestRoundMoney:
    """Tests for round_money function."""

    def test_round_half_up(self):
        assert round_money(Decimal("10.555"), 2) == Decimal("10.56")

    def test_round_down(self):
        assert round_money(Decimal("10.554"), 2) == Decimal("10.55")

    def test_half_cent_goes_up(self):
        assert round_money(Decimal("0.005")) == Decimal("0.01")

    def test_zero_places(self):
        assert round_money(Decimal("99.5"), 0) == Decimal("100")

    def test_default_places(self):
        assert MONEY_DECIMAL_PLACES == 2
        assert round_money(Decimal("1.239")) == Decimal("1.24")


class TestMoneyConstruction:

    def test_of_string(self):
        m = Money.of("12.39", "USD")
        assert m.amount == Decimal("12.39")
        assert m.currency == Currency("USD")

    def test_of_int(self):
        assert Money.of(5, "USD").amount == Decimal("5")

    def test_currency_normalized(self):
        assert Money.of("1", "usd").currency.code == "USD"

    def test_invalid_currency_rejected(self):
        with pytest.raises(ValueError, match="Invalid ISO 4217"):
            Money.of("1", "XXX")

    def test_invalid_amount_rejected(self):
        with pytest.raises(ValueError):
            Money.of("abc", "USD")

    def test_zero(self):
        assert Money.zero("USD").is_zero

    def test_total_of_empty_is_zero(self):
        assert Money.total([], "USD") == Money.zero("USD")

    def test_total(self):
        amounts = [Money.of("2.99", "USD"), Money.of("2.99", "USD"), Money.of("5.49", "USD")]
        assert Money.total(amounts, "USD") == Money.of("11.47", "USD")


class TestMoneyArithmetic:

    def test_add_and_subtract(self):
        a = Money.of("10.00", "USD")
        b = Money.of("2.50", "USD")
        assert a + b == Money.of("12.50", "USD")
        assert a - b == Money.of("7.50", "USD")

    def test_currency_mixing_rejected(self):
        with pytest.raises(ValueError, match="different currencies"):
            Money.of("1", "USD") + Money.of("1", "LKR")

    def test_compare_across_currencies_rejected(self):
        with pytest.raises(ValueError):
            Money.of("1", "USD") < Money.of("1", "EUR")

    def test_scalar_multiply(self):
        assert Money.of("2.99", "USD") * 2 == Money.of("5.98", "USD")
        assert 3 * Money.of("1.10", "USD") == Money.of("3.30", "USD")

    def test_divide(self):
        assert (Money.of("52000", "LKR") / 26).round() == Money.of("2000.00", "LKR")

    def test_negation_and_abs(self):
        m = Money.of("4.00", "USD")
        assert (-m).is_negative
        assert abs(-m) == m

    def test_ordering(self):
        assert Money.of("1.00", "USD") < Money.of("1.01", "USD")
        assert Money.of("2", "USD") >= Money.of("2.00", "USD")


class TestMoneyRounding:

    def test_rounds_to_two_places(self):
        assert Money.of("0.9176", "USD").round().amount == Decimal("0.92")

    def test_jpy_has_no_minor_unit(self):
        assert Money.of("1234.5", "JPY").round().amount == Decimal("1235")

    def test_kwd_has_three_places(self):
        assert Money.of("1.2345", "KWD").round().amount == Decimal("1.235")


class TestMoneyFormat:

    def test_dollars(self):
        assert Money.of("12.39", "USD").format() == "$12.39"

    def test_thousands(self):
        assert Money.of("1234.5", "USD").format() == "$1,234.50"

    def test_negative(self):
        assert Money.of("-3", "USD").format() == "-$3.00"

    def test_rupees(self):
        assert Money.of("48000", "LKR").format() == "Rs48,000.00"
