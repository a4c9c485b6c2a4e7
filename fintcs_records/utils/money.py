"""Fixed-point money helpers - all currency is Decimal with 2 places"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, str]


def to_money(value: MoneyLike) -> Decimal:
    """
    Quantize a value to 2 decimal places, rounding half-up.

    Floats are rejected: binary floats cannot represent most cent values exactly.
    """
    if isinstance(value, float):
        raise TypeError("Monetary values must be Decimal, int or str, not float")
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
