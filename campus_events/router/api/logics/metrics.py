from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Mapping, Optional, TypeVar

from campus_events.schema.feedback_schema import RatingDistribution

T = TypeVar("T")

SORT_DIRECTIONS = ("ASC", "DESC")
STAR_LABELS = {5: "five_star", 4: "four_star", 3: "three_star", 2: "two_star", 1: "one_star"}


def round_half_up(value: float, digits: int = 2) -> float:
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int, digits: int = 2) -> float:
    """part / whole * 100, rounded half-up; 0 when whole is 0"""
    if not whole:
        return 0.0
    return round_half_up(part / whole * 100, digits)


def rounded_average(value) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(float(value), 2)


def rating_distribution(star_counts: Mapping[int, int], total: int) -> RatingDistribution:
    """Whole-number share of each star value over the total feedback count"""
    return RatingDistribution(**{
        label: int(percentage(star_counts.get(star, 0), total, digits=0))
        for star, label in STAR_LABELS.items()
    })


def star_count_fields(star_counts: Mapping[int, int]) -> Dict[str, int]:
    return {f"{label}_count": int(star_counts.get(star, 0)) for star, label in STAR_LABELS.items()}


def resolve_sort(value: Optional[str], allowed: Mapping[str, T], default: str) -> T:
    """Map a user-supplied sort key onto an allowlisted column; unknown keys use the default"""
    return allowed.get(value, allowed[default]) if value else allowed[default]


def resolve_direction(value: Optional[str], default: str) -> str:
    direction = (value or "").upper()
    return direction if direction in SORT_DIRECTIONS else default


def ordered(column, direction: str):
    return column.desc() if direction == "DESC" else column.asc()
