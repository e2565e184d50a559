"""Reading streaks."""

from .calculator import (
    best_streak,
    calculate_streaks,
    collect_active_dates,
    current_streak,
)
from .schemas import StreakSummary

__all__ = [
    "best_streak",
    "calculate_streaks",
    "collect_active_dates",
    "current_streak",
    "StreakSummary",
]
