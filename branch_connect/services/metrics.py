"""
Arithmetic shared by every dashboard aggregate.

All percentages are whole numbers rounded half away from zero, and every
ratio with an empty denominator is 0.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from branch_connect.models.branch_visit import QualitativeRating

RATING_SCALE = {
    QualitativeRating.VERY_POOR.value: 1,
    QualitativeRating.POOR.value: 2,
    QualitativeRating.NEUTRAL.value: 3,
    QualitativeRating.GOOD.value: 4,
    QualitativeRating.EXCELLENT.value: 5,
}


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_half_away_to(value: float, digits: int = 2) -> float:
    """Round to `digits` decimals, halves away from zero (0.125 -> 0.13)."""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: float, whole: float) -> int:
    if not whole:
        return 0
    return round_half_away(100 * part / whole)


def average(values: Iterable[Optional[float]]) -> float:
    """Mean of the non-null values; 0 when there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return 0
    return sum(present) / len(present)


def rounded_average(values: Iterable[Optional[float]]) -> int:
    return round_half_away(average(values))


def ratio_of_sums(numerators: Iterable[Optional[float]], denominators: Iterable[Optional[float]]) -> int:
    """
    Participation rate as sum(participants) / sum(invited), in percent.

    A session with 0 invited adds nothing to either side, so it never drags
    the rate toward zero the way a mean of per-visit rates would.
    """
    total_numerator = sum(v for v in numerators if v is not None)
    total_denominator = sum(v for v in denominators if v is not None)
    return percentage(total_numerator, total_denominator)


def rating_value(label: Optional[str]) -> int:
    """Map an ordinal rating label to 1..5; missing or unknown labels are 0."""
    if not label:
        return 0
    key = label.value if isinstance(label, QualitativeRating) else str(label).lower()
    return RATING_SCALE.get(key, 0)


def delta(current: int, previous: int) -> int:
    return int(current) - int(previous)
