"""
Presentation rounding for monetary and percentage values.

Stored and intermediate values keep full float precision; only values
handed to a caller go through round_money().
"""

from decimal import Decimal, ROUND_HALF_UP


def round_money(value: float | None, places: int = 2) -> float:
    """Round half away from zero to `places` decimals. None becomes 0."""
    if value is None:
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
