"""
Percentage rounding helpers.

Python's round() rounds half to even, so round(12.5) == 12. Scores and
course percentages are reported with half-up rounding instead.
"""

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: Decimal | float | int) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percent(part: int, whole: int) -> int:
    """
    Integer percentage of part/whole with half-up rounding.

    Computed in Decimal so that 2/3 gives 67 and 1/8 gives 13.
    Returns 0 when whole is 0.
    """
    if whole <= 0:
        return 0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))
