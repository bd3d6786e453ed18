"""
Store settings schema (``pos_config.schema``).

Responsibility
--------------
Typed, validated store-wide settings: store identity, currency, tax,
payroll method, cash drawer switch, receipt text and a few payroll
constants.  Services receive a ``StoreSettings`` instance; nothing reads
the settings file directly.

Failure modes
-------------
* Any invalid field raises ``ConfigurationError`` naming the field.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, InvalidOperation
from typing import Any, Self

from pos_engines.payroll import PayrollType
from pos_kernel.domain.currency import CurrencyRegistry
from pos_kernel.exceptions import ConfigurationError
from pos_kernel.logging_config import get_logger

logger = get_logger("config.schema")

VALID_LANGUAGES = {"en", "si", "ta", "es", "fr", "de"}

_DECIMAL_FIELDS = ("tax_rate", "overtime_multiplier", "standard_hours_per_day")


@dataclass(frozen=True)
class StoreSettings:
    """
    Store-wide configuration.

    ``tax_rate`` is a percentage (8 means 8 %); ``tax_fraction`` is the
    multiplier the order calculator uses.  Tax is only charged when
    ``enable_tax`` is set, whatever the rate.
    """

    store_name: str = "Cashy"
    currency: str = "USD"
    language: str = "en"

    enable_tax: bool = False
    tax_rate: Decimal = Decimal("0")

    payroll_type: str = PayrollType.SALARY_THEORY.value
    overtime_multiplier: Decimal = Decimal("1.5")
    standard_hours_per_day: Decimal = Decimal("8")

    enable_cash_drawer: bool = True
    credit_terms_days: int = 30

    receipt_header_text: str = "Thank you for shopping with us!"
    receipt_footer_text: str = "Please come again."

    is_setup_complete: bool = False

    def __post_init__(self):
        if not self.store_name or not self.store_name.strip():
            raise ConfigurationError("store_name", "must not be empty")
        if not CurrencyRegistry.is_valid(self.currency):
            raise ConfigurationError(
                "currency", f"'{self.currency}' is not a supported ISO 4217 code"
            )
        object.__setattr__(self, "currency", self.currency.upper().strip())
        if self.language not in VALID_LANGUAGES:
            raise ConfigurationError(
                "language", f"must be one of {sorted(VALID_LANGUAGES)}"
            )
        for name in _DECIMAL_FIELDS:
            object.__setattr__(self, name, _to_decimal(name, getattr(self, name)))
        if not Decimal("0") <= self.tax_rate <= Decimal("100"):
            raise ConfigurationError("tax_rate", "must be between 0 and 100")
        try:
            PayrollType(self.payroll_type)
        except ValueError:
            raise ConfigurationError(
                "payroll_type",
                f"must be one of {[t.value for t in PayrollType]}",
            ) from None
        if self.overtime_multiplier < Decimal("1"):
            raise ConfigurationError("overtime_multiplier", "must be at least 1")
        if not Decimal("0") < self.standard_hours_per_day <= Decimal("24"):
            raise ConfigurationError(
                "standard_hours_per_day", "must be between 0 and 24"
            )
        if self.credit_terms_days < 0:
            raise ConfigurationError("credit_terms_days", "must not be negative")

    @property
    def tax_fraction(self) -> Decimal:
        """Tax rate as a multiplier (8 % -> 0.08)."""
        return self.tax_rate / Decimal("100")

    @property
    def payroll_kind(self) -> PayrollType:
        return PayrollType(self.payroll_type)

    @property
    def payroll_divisor(self) -> int:
        """Days in the month used to derive a daily rate (30 or 26)."""
        return self.payroll_kind.divisor

    @classmethod
    def with_defaults(cls) -> Self:
        """Settings for a freshly installed store."""
        logger.info("store_settings_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create settings from a mapping (e.g. parsed YAML).

        Raises:
            ConfigurationError: on unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(unknown[0], "unknown setting")
        logger.info(
            "store_settings_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        """Plain mapping with decimals as strings, suitable for YAML."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = str(value) if isinstance(value, Decimal) else value
        return result


def _to_decimal(name: str, value: Any) -> Decimal:
    if isinstance(value, bool):
        raise ConfigurationError(name, "must be a number")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(name, f"'{value}' is not a number") from None
