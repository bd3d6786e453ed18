"""Unit tests for the ISO 4217 currency registry."""

import pytest

from pos_kernel.domain.currency import CurrencyRegistry
from pos_kernel.domain.values import Currency


class TestCurrencyRegistry:

    def test_common_codes_valid(self):
        for code in ("USD", "EUR", "GBP", "LKR", "INR", "JPY"):
            assert CurrencyRegistry.is_valid(code)

    def test_lowercase_accepted(self):
        assert CurrencyRegistry.is_valid("lkr")

    def test_unknown_code(self):
        assert not CurrencyRegistry.is_valid("ABC")
        assert not CurrencyRegistry.is_valid("")

    def test_decimal_places(self):
        assert CurrencyRegistry.get_decimal_places("USD") == 2
        assert CurrencyRegistry.get_decimal_places("JPY") == 0
        assert CurrencyRegistry.get_decimal_places("KWD") == 3

    def test_symbol_falls_back_to_code(self):
        assert CurrencyRegistry.get_symbol("USD") == "$"
        assert CurrencyRegistry.get_symbol("ZZZ") == "ZZZ"

    def test_validate_normalizes(self):
        assert CurrencyRegistry.validate(" usd ") == "USD"

    def test_validate_rejects_wrong_length(self):
        with pytest.raises(ValueError, match="3 characters"):
            CurrencyRegistry.validate("US")

    def test_validate_rejects_unknown(self):
        with pytest.raises(ValueError, match="Invalid ISO 4217"):
            CurrencyRegistry.validate("QQQ")

    def test_all_codes_is_frozen(self):
        codes = CurrencyRegistry.all_codes()
        assert isinstance(codes, frozenset)
        assert "LKR" in codes


class TestCurrency:

    def test_normalized(self):
        assert Currency("eur").code == "EUR"

    def test_rejects_unknown(self):
        with pytest.raises(ValueError):
            Currency("NOPE")

    def test_str(self):
        assert str(Currency("USD")) == "USD"
