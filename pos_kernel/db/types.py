"""
Module: pos_kernel.db.types
Responsibility: Annotated column type aliases and the rounding helpers shared
    by ORM models and services.

Invariants enforced:
    - No floats anywhere.  All monetary amounts use Decimal with explicit
      precision, rounded ROUND_HALF_UP.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated
from uuid import UUID

from sqlalchemy import String

# Stock-keeping unit / short identifier strings
ShortCode = Annotated[str, String(50)]

# Names and labels
Name = Annotated[str, String(200)]

# Free text (reasons, receipt header/footer)
LongText = Annotated[str, String(2000)]

# ISO 4217 currency code
CurrencyCode = Annotated[str, String(3)]

MONEY_DECIMAL_PLACES = 2
DEFAULT_ROUNDING = ROUND_HALF_UP

# Actor recorded on rows written by unattended processes (imports, tests)
SYSTEM_ACTOR_ID = UUID("00000000-0000-0000-0000-000000000001")


def money_from_str(value: str) -> Decimal:
    """
    Parse a user-entered amount.

    Raises:
        ValueError: If value is not a finite number.
    """
    try:
        result = Decimal(value.strip().replace(",", ""))
    except (InvalidOperation, AttributeError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def round_money(
    value: Decimal,
    decimal_places: int = MONEY_DECIMAL_PLACES,
    rounding: str = DEFAULT_ROUNDING,
) -> Decimal:
    """
    Round a monetary value to specified decimal places.

    This is the rounding used for every stored amount; calculators round
    through ``Money.round`` which applies the same mode.
    """
    quantize_str = "0." + "0" * decimal_places if decimal_places > 0 else "1"
    return value.quantize(Decimal(quantize_str), rounding=rounding)
