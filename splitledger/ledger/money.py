"""
Money helpers.

All split and balance arithmetic runs on integer minor units (cents).
Decimals only appear at the edges: on the way in from user input and on
the way out into the result models.

Conversions run under `money_context()`, which widens the Decimal
precision from the default 28 digits to MONEY_PRECISION. Amounts with
more significant digits than that are not supported.
"""

from decimal import ROUND_HALF_UP, Decimal, getcontext, localcontext
from typing import Union

Number = Union[Decimal, int, float, str]

TWOPLACES = Decimal("0.01")
ONE_CENT = 1
MONEY_PRECISION = 60


def money_context():
    """Decimal context wide enough to quantize any supported amount."""
    context = getcontext().copy()
    context.prec = max(context.prec, MONEY_PRECISION)
    return localcontext(context)


def to_decimal(value: Number) -> Decimal:
    """Convert user input to Decimal without binary float drift."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Number) -> Decimal:
    """Round to two decimal places, half away from zero."""
    with money_context():
        return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def to_cents(value: Number) -> int:
    """Round to the nearest cent and return it as an integer count."""
    with money_context():
        return int(round_money(value) * 100)


def from_cents(cents: int) -> Decimal:
    with money_context():
        return (Decimal(cents) / 100).quantize(TWOPLACES)


def round_cents(value: Decimal) -> int:
    """Round a fractional cent amount to a whole cent, half away from zero."""
    with money_context():
        return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: Number, symbol: str = "$") -> str:
    """
    Format an amount for display in messages.

    Negative amounts keep their sign in front of the symbol: -$5.00.
    """
    with money_context():
        value = round_money(amount)
        sign = "-" if value < 0 else ""
        return f"{sign}{symbol}{abs(value):,.2f}"
