"""Rating Aggregation — canteen averages and feedback statistics.

Invariants:
    - All averages rounded to one decimal place
    - Canteen sub-ratings average only over feedback that supplied them
    - Report-style stats (canteen dashboard, admin overview) average over all
      feedback, counting a missing sub-rating as 0
    - Empty input yields zeros, never raises
"""

from collections.abc import Sequence
from typing import Protocol


class RatedFeedback(Protocol):
    rating: int
    food_quality: int | None
    service_speed: int | None
    app_experience: int | None
    is_resolved: bool


SUB_RATINGS = ("food_quality", "service_speed", "app_experience")


def _avg(total: float, count: int) -> float:
    return round(total / count, 1) if count else 0.0


def canteen_rating_summary(feedback: Sequence[RatedFeedback]) -> dict:
    """Values stored on the canteen row after each new feedback."""
    summary = {
        "average_rating": _avg(sum(f.rating for f in feedback), len(feedback)),
        "total_ratings": len(feedback),
    }
    for name in SUB_RATINGS:
        given = [getattr(f, name) for f in feedback if getattr(f, name)]
        summary[name] = _avg(sum(given), len(given))
    return summary


def feedback_report(feedback: Sequence[RatedFeedback]) -> dict:
    """Averages for dashboards; missing sub-ratings count as zero."""
    count = len(feedback)
    return {
        "overallRating": _avg(sum(f.rating for f in feedback), count),
        "foodQuality": _avg(sum(f.food_quality or 0 for f in feedback), count),
        "serviceSpeed": _avg(sum(f.service_speed or 0 for f in feedback), count),
        "appExperience": _avg(sum(f.app_experience or 0 for f in feedback), count),
    }


def overall_feedback_stats(feedback: Sequence[RatedFeedback]) -> dict:
    report = feedback_report(feedback)
    return {
        "totalFeedback": len(feedback),
        "resolvedFeedback": sum(1 for f in feedback if f.is_resolved),
        "averageRating": report["overallRating"],
        "foodQuality": report["foodQuality"],
        "serviceSpeed": report["serviceSpeed"],
        "appExperience": report["appExperience"],
    }
