# path: cyclocoach/utils/numbers.py

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, localcontext
import math


def round_half_up(value: float) -> int:
    # Ties go towards +inf (2.5 -> 3, -2.5 -> -2), not to even.
    return int(math.floor(value + 0.5))


def format_fixed(value: float, digits: int) -> str:
    """
    Fixed-point string with `digits` decimals, ties rounded away from zero.

    Works on the exact binary value of the float, so 44.25 -> "44.3" while
    2.675 (really 2.67499...) -> "2.67".
    """
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        # Room for every integer digit of the largest float plus the decimals.
        ctx.prec = 330 + digits
        return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    # Shortest round-trip form; integral values drop the ".0".
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))
