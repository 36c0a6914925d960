"""
Rounding helpers shared by the demand generator and the simulator.
"""

import math


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves towards positive infinity.

    Python's built-in round() uses banker's rounding, which gives different
    results on exact .5 values (round(2.5) == 2, round_half_up(2.5) == 3).
    """
    return int(math.floor(value + 0.5))
