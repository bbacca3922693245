"""
Decimal helpers for prices, costs and totals
"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')


def to_decimal(value):
    """Coerce numbers coming from the DB driver or JSON into Decimal"""
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary float expansion
    return Decimal(str(value))


def quantize_cents(value):
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
