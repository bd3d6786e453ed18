"""Currency -- ISO 4217 registry, decimal places and display symbols."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CurrencyInfo:
    """Information about a single ISO 4217 currency."""

    code: str
    decimal_places: int
    name: str
    symbol: str


class CurrencyRegistry:
    """Registry of the ISO 4217 currencies a store can be configured with."""

    _CURRENCIES: ClassVar[dict[str, CurrencyInfo]] = {
        "USD": CurrencyInfo("USD", 2, "US Dollar", "$"),
        "EUR": CurrencyInfo("EUR", 2, "Euro", "€"),
        "GBP": CurrencyInfo("GBP", 2, "Pound Sterling", "£"),
        "CAD": CurrencyInfo("CAD", 2, "Canadian Dollar", "CA$"),
        "AUD": CurrencyInfo("AUD", 2, "Australian Dollar", "A$"),
        "NZD": CurrencyInfo("NZD", 2, "New Zealand Dollar", "NZ$"),
        "CHF": CurrencyInfo("CHF", 2, "Swiss Franc", "CHF"),
        "INR": CurrencyInfo("INR", 2, "Indian Rupee", "₹"),
        "LKR": CurrencyInfo("LKR", 2, "Sri Lankan Rupee", "Rs"),
        "PKR": CurrencyInfo("PKR", 2, "Pakistani Rupee", "Rs"),
        "BDT": CurrencyInfo("BDT", 2, "Bangladeshi Taka", "৳"),
        "AED": CurrencyInfo("AED", 2, "UAE Dirham", "AED"),
        "SAR": CurrencyInfo("SAR", 2, "Saudi Riyal", "SAR"),
        "SGD": CurrencyInfo("SGD", 2, "Singapore Dollar", "S$"),
        "MYR": CurrencyInfo("MYR", 2, "Malaysian Ringgit", "RM"),
        "ZAR": CurrencyInfo("ZAR", 2, "South African Rand", "R"),
        "NGN": CurrencyInfo("NGN", 2, "Nigerian Naira", "₦"),
        "KES": CurrencyInfo("KES", 2, "Kenyan Shilling", "KSh"),
        "BRL": CurrencyInfo("BRL", 2, "Brazilian Real", "R$"),
        "MXN": CurrencyInfo("MXN", 2, "Mexican Peso", "MX$"),
        "CNY": CurrencyInfo("CNY", 2, "Chinese Yuan", "¥"),
        "PHP": CurrencyInfo("PHP", 2, "Philippine Peso", "₱"),
        # Zero decimal currencies
        "JPY": CurrencyInfo("JPY", 0, "Japanese Yen", "¥"),
        "KRW": CurrencyInfo("KRW", 0, "South Korean Won", "₩"),
        "VND": CurrencyInfo("VND", 0, "Vietnamese Dong", "₫"),
        "CLP": CurrencyInfo("CLP", 0, "Chilean Peso", "CLP$"),
        "UGX": CurrencyInfo("UGX", 0, "Ugandan Shilling", "USh"),
        # Three decimal currencies
        "BHD": CurrencyInfo("BHD", 3, "Bahraini Dinar", "BD"),
        "KWD": CurrencyInfo("KWD", 3, "Kuwaiti Dinar", "KD"),
        "OMR": CurrencyInfo("OMR", 3, "Omani Rial", "OMR"),
        "JOD": CurrencyInfo("JOD", 3, "Jordanian Dinar", "JD"),
    }

    @classmethod
    def is_valid(cls, code: str) -> bool:
        """Check if a currency code is registered."""
        if not code or not isinstance(code, str):
            return False
        return code.upper().strip() in cls._CURRENCIES

    @classmethod
    def get_info(cls, code: str) -> CurrencyInfo | None:
        """Get currency information by code."""
        if not code or not isinstance(code, str):
            return None
        return cls._CURRENCIES.get(code.upper().strip())

    @classmethod
    def get_decimal_places(cls, code: str) -> int:
        """Get decimal places for a currency."""
        info = cls.get_info(code)
        return info.decimal_places if info else cls.DEFAULT_DECIMAL_PLACES

    DEFAULT_DECIMAL_PLACES: ClassVar[int] = 2

    @classmethod
    def get_symbol(cls, code: str) -> str:
        """Display symbol for receipts; falls back to the code itself."""
        info = cls.get_info(code)
        return info.symbol if info else code

    @classmethod
    def validate(cls, code: str) -> str:
        """Validate and normalize a currency code."""
        if not code or not isinstance(code, str):
            raise ValueError(f"Invalid currency code: {code!r}")

        normalized = code.upper().strip()

        if len(normalized) != 3:
            raise ValueError(f"Currency code must be 3 characters: {code!r}")

        if normalized not in cls._CURRENCIES:
            raise ValueError(f"Invalid ISO 4217 currency code: {code!r}")

        return normalized

    @classmethod
    def all_codes(cls) -> frozenset[str]:
        """Get all valid currency codes."""
        return frozenset(cls._CURRENCIES.keys())
