"""Reading statistics."""

from .completion import LibraryCompletion, calculate_completion
from .goals import DEFAULT_TARGET_BOOKS, GoalProgress, calculate_goal_progress
from .history import DEFAULT_HISTORY_MONTHS, HistoryPoint, calculate_reading_history

__all__ = [
    "LibraryCompletion",
    "calculate_completion",
    "DEFAULT_TARGET_BOOKS",
    "GoalProgress",
    "calculate_goal_progress",
    "DEFAULT_HISTORY_MONTHS",
    "HistoryPoint",
    "calculate_reading_history",
]
