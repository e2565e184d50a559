"""Book discovery and recommendations."""

from .recommendations import (
    DEFAULT_LIMIT,
    RECOMMENDABLE_STATUSES,
    Recommendation,
    rank_recommendations,
    score_book,
    score_components,
)

__all__ = [
    "DEFAULT_LIMIT",
    "RECOMMENDABLE_STATUSES",
    "Recommendation",
    "rank_recommendations",
    "score_book",
    "score_components",
]
