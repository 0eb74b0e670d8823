"""
Helpers for monetary amounts.

All money is handled as Decimal with two fractional digits; floats never
reach the database.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union
from app.core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# Largest value a Numeric(15, 2) column holds
MAX_DIGITS = 15
MAX_AMOUNT = Decimal("9999999999999.99")


def to_money(value: Union[Decimal, int, float, str, None]) -> Decimal:
    """Convert a value to a Decimal rounded to cents."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_money(value: Union[Decimal, int, float, str], field: str = "amount") -> Decimal:
    """
    Validate caller-supplied money and round it to cents.

    Raises ValidationError for anything that is not a finite number whose
    magnitude fits a money column. The sign is left to the caller.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Amount must be a number", field=field)
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number", field=field)
    if not number.is_finite():
        raise ValidationError("Amount must be a finite number", field=field)
    try:
        number = to_money(number)
    except InvalidOperation:
        raise ValidationError("Amount is too large", field=field)
    if abs(number) > MAX_AMOUNT:
        raise ValidationError("Amount is too large", field=field)
    return number
