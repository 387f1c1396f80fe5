import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going up (2.5 -> 3), unlike the built-in banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor
