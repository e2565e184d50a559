"""Reading activity analytics.

``ActivityAnalytics`` is the entry point used by the CLI and any other
front end. It reads a fresh snapshot through the activity source on every
call and hands it to the pure calculators. Nothing is cached between calls.

Data-access failures propagate as ``DataAccessError``; an empty result always
means the store really has no matching data.
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from .activity.daily import aggregate_daily_activity, window_start
from .activity.schemas import DailyActivity
from .activity.source import ActivitySource
from .config import Config, get_config
from .db.sqlite import Database
from .discovery.recommendations import Recommendation, rank_recommendations
from .periods import months_before, validate_period, validate_year
from .recap.generator import build_monthly_recap
from .recap.schemas import MonthlyRecap
from .stats.completion import LibraryCompletion, calculate_completion
from .stats.goals import GoalProgress, calculate_goal_progress
from .stats.history import DEFAULT_HISTORY_MONTHS, HistoryPoint, calculate_reading_history
from .streaks.calculator import calculate_streaks, collect_active_dates
from .streaks.schemas import StreakSummary

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local time as an aware datetime."""
    return datetime.now().astimezone()


class ActivityAnalytics:
    """Derives activity, streak, recommendation, recap and goal reports."""

    def __init__(
        self,
        db: Optional[Database] = None,
        source: Optional[ActivitySource] = None,
        config: Optional[Config] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize analytics.

        Args:
            db: Database instance, used when no source is given
            source: Activity source to read snapshots from
            config: Configuration (default: global config)
            clock: Returns the current instant (default: local time)
        """
        self.source = source or ActivitySource(db)
        self.config = config or get_config()
        self.clock = clock or local_now

    def _today(self, today: Optional[date]) -> date:
        return today if today is not None else self.clock().date()

    def compute_daily_activity(
        self,
        window_days: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[DailyActivity]:
        """Daily pages, minutes and event counts for the recent window.

        Args:
            window_days: Days to look back (default: configured window)
            today: Window anchor (default: from the clock)

        Returns:
            One entry per active date, oldest first
        """
        if window_days is None:
            window_days = self.config.activity_window_days
        today = self._today(today)
        since = window_start(today, window_days)

        sessions = self.source.read_sessions(since=since)
        finished = self.source.read_finished(since=since)
        activity = aggregate_daily_activity(sessions, finished, today, window_days)

        logger.info("Daily activity since %s: %d active dates", since, len(activity))
        return activity

    def compute_streaks(self, today: Optional[date] = None) -> StreakSummary:
        """Current and best reading streaks over the whole history."""
        today = self._today(today)
        active = collect_active_dates(
            self.source.read_sessions(),
            self.source.read_finished(),
        )
        summary = calculate_streaks(active, today)

        logger.info(
            "Streaks as of %s: current=%d best=%d days=%d",
            today,
            summary.current_streak,
            summary.best_streak,
            summary.total_active_days,
        )
        return summary

    def compute_recommendations(
        self,
        limit: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[Recommendation]:
        """Top-scored unread and in-progress books."""
        if limit is None:
            limit = self.config.recommendation_limit
        now = now or self.clock()

        recommendations = rank_recommendations(self.source.read_catalog(), now, limit)

        logger.info("Ranked %d recommendations", len(recommendations))
        return recommendations

    def compute_monthly_recap(self, year: int, month: int) -> MonthlyRecap:
        """Summary of the books finished in a calendar month.

        Raises:
            InvalidPeriodError: If year or month is out of range
        """
        validate_period(year, month)
        finished = self.source.read_finished(year=year, month=month)
        recap = build_monthly_recap(finished, year, month)

        logger.info("Recap for %s %d: %d books", recap.month, year, recap.books_finished)
        return recap

    def compute_library_completion(self, today: Optional[date] = None) -> LibraryCompletion:
        """Share of the library finished and the estimated months left."""
        today = self._today(today)
        completion = calculate_completion(
            self.source.count_books(),
            self.source.read_finished(),
            today,
        )

        logger.info(
            "Library completion: %d/%d (%d%%)",
            completion.books_read,
            completion.total_books,
            completion.percentage,
        )
        return completion

    def compute_goal_progress(self, year: Optional[int] = None) -> GoalProgress:
        """Books and pages finished in a year against the year's goal.

        Args:
            year: Goal year (default: the clock's current year)

        Raises:
            InvalidYearError: If year is out of range
        """
        if year is None:
            year = self.clock().year
        validate_year(year)

        progress = calculate_goal_progress(
            year,
            self.source.read_finished(year=year),
            self.source.read_goal(year),
        )

        logger.info(
            "Goal %d: %d/%d books (default=%s)",
            year,
            progress.current_books,
            progress.target_books,
            progress.is_default,
        )
        return progress

    def compute_reading_history(
        self,
        months: int = DEFAULT_HISTORY_MONTHS,
        today: Optional[date] = None,
    ) -> list[HistoryPoint]:
        """Books and pages finished per date over the last months."""
        today = self._today(today)
        since = months_before(today, months)

        history = calculate_reading_history(
            self.source.read_finished(since=since), today, months
        )

        logger.info("Reading history since %s: %d dates", since, len(history))
        return history
