"""
Naira amounts as fixed-point decimals.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

KOBO = Decimal("0.01")

Amount = Union[Decimal, int, str]


def to_money(value: Amount) -> Decimal:
    """Convert an int, str or Decimal to a Decimal rounded to kobo.

    Floats are refused so that binary rounding never enters a bill.
    """
    if isinstance(value, float):
        raise TypeError("Monetary amounts must not be floats")
    return Decimal(value).quantize(KOBO, rounding=ROUND_HALF_UP)


ZERO = to_money(0)
