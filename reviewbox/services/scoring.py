"""
Score calculation for reviews.

A review carries one integer score (1-5) per evaluation criterion of its
group. Its total is the plain mean of those scores rounded half-up to two
decimals, so {Taste: 4, Price: 2} gives 3.00 and {5, 4, 4} gives 4.33.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from reviewbox.config import Limits
from reviewbox.core.errors import ValidationError

TWO_PLACES = Decimal("0.01")


def round_score(value: Decimal | float) -> float:
    """Round half-up to two decimals."""
    return float(Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def calculate_total_score(scores: Iterable[int]) -> float:
    """Unweighted mean of the criterion scores, rounded to two decimals."""
    values = list(scores)
    if not values:
        raise ValidationError("Scores required")
    return round_score(Decimal(sum(values)) / Decimal(len(values)))


def mean(values: Iterable[float]) -> float:
    """Mean of values rounded to two decimals, 0.0 when there are none."""
    items = list(values)
    if not items:
        return 0.0
    total = sum((Decimal(str(item)) for item in items), Decimal(0))
    return round_score(total / Decimal(len(items)))


def validate_scores(scores: dict[str, int], criteria_ids: Iterable[str]) -> None:
    """
    Check a score submission against the group's criteria.

    Every criterion must be scored exactly once with an integer in
    [Limits.MIN_SCORE, Limits.MAX_SCORE], and nothing else may be scored.

    Raises:
        ValidationError: naming the first offending criterion
    """
    expected = list(criteria_ids)
    if not expected:
        raise ValidationError("No evaluation criteria found")

    for criteria_id, score in scores.items():
        if criteria_id not in expected:
            raise ValidationError(f"Invalid criteria ID: {criteria_id}")
        if isinstance(score, bool) or not isinstance(score, int):
            raise ValidationError(f"Invalid score for {criteria_id}. Must be an integer")
        if not Limits.MIN_SCORE <= score <= Limits.MAX_SCORE:
            raise ValidationError(
                f"Invalid score for {criteria_id}. "
                f"Must be between {Limits.MIN_SCORE} and {Limits.MAX_SCORE}"
            )

    missing = [criteria_id for criteria_id in expected if criteria_id not in scores]
    if missing:
        raise ValidationError(f"Missing score for criteria ID: {missing[0]}")
