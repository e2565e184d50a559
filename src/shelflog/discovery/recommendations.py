"""What-to-read-next recommendation scoring.

Every untouched or in-progress book gets an additive score built from
independent signals:

- in progress: +100
- external average rating (0-5): rating x 10
- external ratings count: count / 100, capped at 20
- length: (500 - pages) / 100, never negative
- time in library: days / 10, capped at 15

A missing signal contributes nothing. Scores are recomputed on every call.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from ..activity.source import NOT_STARTED, CatalogEntry
from ..db.schemas import ReadingStatus

DEFAULT_LIMIT = 10

READING_BONUS = 100.0
RATING_WEIGHT = 10.0
POPULARITY_DIVISOR = 100.0
POPULARITY_CAP = 20.0
LENGTH_BASELINE = 500
LENGTH_DIVISOR = 100.0
AGE_DIVISOR = 10.0
AGE_CAP = 15.0

RECOMMENDABLE_STATUSES = frozenset({NOT_STARTED, ReadingStatus.READING.value})


@dataclass
class Recommendation:
    """A scored book recommendation."""

    book: CatalogEntry
    score: float = 0.0
    components: dict[str, float] = field(default_factory=dict)

    @property
    def in_progress(self) -> bool:
        return self.book.status == ReadingStatus.READING.value


def days_in_library(entry: CatalogEntry, now: datetime) -> int:
    """Whole days since the book was added, 0 when unknown or in the future."""
    if entry.added_at is None:
        return 0
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return max(0, (now - entry.added_at).days)


def score_components(entry: CatalogEntry, now: datetime) -> dict[str, float]:
    """Score contribution of each signal present for a book."""
    components: dict[str, float] = {}
    info = entry.rating_info

    if entry.status == ReadingStatus.READING.value:
        components["in_progress"] = READING_BONUS

    if info is not None and info.average_rating is not None:
        components["rating"] = float(info.average_rating) * RATING_WEIGHT

    if info is not None and info.ratings_count is not None:
        components["popularity"] = min(info.ratings_count / POPULARITY_DIVISOR, POPULARITY_CAP)

    if entry.pages:
        components["length"] = max(0.0, (LENGTH_BASELINE - entry.pages) / LENGTH_DIVISOR)

    if entry.added_at is not None:
        components["age"] = min(days_in_library(entry, now) / AGE_DIVISOR, AGE_CAP)

    return components


def score_book(entry: CatalogEntry, now: datetime) -> float:
    """Total recommendation score for a book."""
    return sum(score_components(entry, now).values())


def rank_recommendations(
    catalog: Iterable[CatalogEntry],
    now: datetime,
    limit: int = DEFAULT_LIMIT,
) -> list[Recommendation]:
    """Rank unread and in-progress books by score.

    Args:
        catalog: Catalog entries with status and rating info
        now: Current instant, used for time-in-library
        limit: Maximum recommendations to return

    Returns:
        Highest scores first; equal scores keep catalog order
    """
    if limit < 1:
        raise ValueError(f"limit must be positive, got {limit}")

    recommendations = []
    for entry in catalog:
        if entry.status not in RECOMMENDABLE_STATUSES:
            continue
        components = score_components(entry, now)
        recommendations.append(Recommendation(
            book=entry,
            score=sum(components.values()),
            components=components,
        ))

    # Stable sort keeps catalog order for ties
    recommendations.sort(key=lambda r: r.score, reverse=True)
    return recommendations[:limit]
