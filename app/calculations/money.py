"""
Money and Ratio Helpers

Decimal arithmetic shared by the report calculations. Intermediate values keep
full precision; rounding happens only when a report is serialized.
"""

from decimal import Decimal, ROUND_HALF_EVEN, localcontext
from typing import Iterable, Union

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

# Ceiling for annualized rates (percent per year)
MAX_ANNUALIZED_PERCENT = Decimal("1E+12")
MAX_ANNUALIZED_LOG_GROWTH = (ONE + MAX_ANNUALIZED_PERCENT / HUNDRED).ln()

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts, returning Decimal zero for an empty iterable."""
    return sum(amounts, ZERO)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """
    Express part as a percentage of whole.

    Returns 0 when whole is zero so data-sparse reports stay well defined.
    """
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def annualize_growth(total_percent: Decimal, years: Decimal) -> Decimal:
    """
    Convert a total percentage gain over a holding period to a compound annual rate.

    Inverse of compound growth: ((1 + total/100) ** (1/years) - 1) * 100.

    Args:
        total_percent: Total gain over the period (e.g., 25 for 25%)
        years: Length of the period in years

    Returns:
        Annual rate as percentage; 0 when years <= 0, -100 when the loss
        exceeds the whole investment, capped at MAX_ANNUALIZED_PERCENT
    """
    if years <= 0:
        return ZERO

    growth_factor = ONE + total_percent / HUNDRED
    if growth_factor <= 0:
        return -HUNDRED

    # Very short holding periods blow the exponent up; compare in log space first
    if growth_factor.ln() / years >= MAX_ANNUALIZED_LOG_GROWTH:
        return MAX_ANNUALIZED_PERCENT

    return (growth_factor ** (ONE / years) - ONE) * HUNDRED


def round_currency(value: Decimal) -> Decimal:
    """Round to cents using banker's rounding."""
    value = to_decimal(value)
    with localcontext() as ctx:
        # quantize needs every integer digit plus the two cents
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_EVEN)
