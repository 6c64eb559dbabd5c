"""
Money helpers.

All amounts are Decimal. Intermediate sums stay at full precision and only
quote fields are rounded, half-up, to cents.
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """
    Convert int/str/float/Decimal to Decimal without binary float artifacts.

    Floats go through str() so 49.99 becomes Decimal("49.99") and not
    Decimal("49.99000000000000198951966012828052043914794921875").

    Raises:
        InvalidOperation: If the value cannot be interpreted as a number
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidOperation(f"Boolean is not a money amount: {value}")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(amount: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, currency_symbol: str = "$") -> str:
    """
    Format amount for display.

    Example:
        >>> format_money(Decimal("113.22"))
        '$113.22'
    """
    return f"{currency_symbol}{round_money(amount):.2f}"
