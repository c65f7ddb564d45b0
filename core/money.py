"""
Decimal money helpers.

Every monetary intermediate in the engine goes through round2(), so all
call sites round the same way: half-up at two decimal places.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Annotated, Any

from pydantic import BeforeValidator

from core.exceptions import InvalidLineItem

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def round2(value: Decimal | int) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _reject_float(value: Any) -> Any:
    if isinstance(value, float):
        raise ValueError(
            "Binary floats are not accepted for amounts or rates. "
            "Pass a Decimal, an int or a decimal string."
        )
    return value


# Exact decimal input only: Decimal, int or decimal text
Money = Annotated[Decimal, BeforeValidator(_reject_float)]


def normalize_vat_rate(value: Decimal | int | float | str | None) -> Decimal:
    """
    Normalize a VAT rate to a fraction.

    Stored and UI rates show up both as fractions (0.18) and as whole
    percentages (18). Anything above 1 is treated as a percentage.
    This is a boundary helper; the engine itself only accepts fractions.

    Raises:
        InvalidLineItem: If the value is negative or not a number
    """
    if value is None or value == "":
        return ZERO

    try:
        rate = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidLineItem(f"VAT rate {value!r} is not a number")

    if rate < 0:
        raise InvalidLineItem(f"VAT rate cannot be negative: {value}")

    if rate > 1:
        rate = rate / HUNDRED
    return rate
