"""Reading activity: source adapter and daily aggregation."""

from .daily import (
    DEFAULT_WINDOW_DAYS,
    aggregate_daily_activity,
    build_finished_map,
    build_session_map,
    merge_activity,
)
from .schemas import DailyActivity
from .source import (
    NOT_STARTED,
    ActivitySource,
    CatalogEntry,
    ExternalRatingInfo,
    FinishedRecord,
    GoalTarget,
    SessionRecord,
)

__all__ = [
    "DEFAULT_WINDOW_DAYS",
    "aggregate_daily_activity",
    "build_finished_map",
    "build_session_map",
    "merge_activity",
    "DailyActivity",
    "NOT_STARTED",
    "ActivitySource",
    "CatalogEntry",
    "ExternalRatingInfo",
    "FinishedRecord",
    "GoalTarget",
    "SessionRecord",
]
