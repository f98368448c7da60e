"""
Helpers for the statistics endpoints.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def completion_rate(completed: int, total: int) -> int:
    """Whole-number percentage of completed items; 0 when there are none."""
    if total <= 0:
        return 0
    return round_half_up(completed / total * 100)
