"""
Currency arithmetic helpers.

All monetary amounts are Decimals rounded half-up to two places.
"""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert a numeric value to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round2(value: Decimal | int | float | str) -> Decimal:
    """Round to currency precision using round-half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal | int | float | str) -> str:
    """Format an amount with exactly two decimals, e.g. ``83.00``."""
    return f"{round2(value):.2f}"
