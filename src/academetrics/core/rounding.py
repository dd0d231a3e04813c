from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
import math
from typing import Optional


def round_half_up(value: float, places: int = 2) -> float:
    # inf and nan have no decimal places to round
    if not math.isfinite(value):
        return value

    # str() keeps the shortest repr, so 7.665 rounds to 7.67 instead of 7.66
    number = Decimal(str(value))
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return float(number.quantize(quantum, rounding=ROUND_HALF_UP))


def round_optional(value: Optional[float], places: Optional[int] = 2) -> Optional[float]:
    if value is None or places is None:
        return value
    return round_half_up(value, places)
