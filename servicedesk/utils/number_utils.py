"""Rounding helpers for percentages shown on dashboards."""
import math


def round_half_up(value: float) -> int:
    """Round .5 upwards (Python's round() rounds half to even)."""
    return int(math.floor(value + 0.5))


def percent(part: float, whole: float) -> int:
    """Whole-number percentage, 0 when `whole` is 0."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)
