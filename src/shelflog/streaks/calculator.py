"""Streak calculation over active reading dates.

A date is active when it has a reading session or a finished book. Only
presence matters here, so the dates are taken straight from both streams
without the daily aggregation's precedence rule.
"""

from datetime import date
from typing import Iterable, Optional

from ..activity.source import FinishedRecord, SessionRecord
from .schemas import StreakSummary


def collect_active_dates(
    sessions: Iterable[SessionRecord],
    finished: Iterable[FinishedRecord],
) -> set[date]:
    """Distinct dates with a session or a finished book."""
    active = {s.session_date for s in sessions if s.session_date is not None}
    active.update(f.date_finished for f in finished if f.date_finished is not None)
    return active


def current_streak(dates_desc: list[date], today: date) -> int:
    """Length of the streak ending today or yesterday.

    Args:
        dates_desc: Distinct active dates, newest first
        today: Anchor date

    Returns:
        0 when the newest active date is older than yesterday
    """
    streak = 0
    cursor = today
    for day in dates_desc:
        gap = (cursor - day).days
        if gap < 0:
            # Activity logged after the anchor date does not count
            continue
        if gap == 1 or (gap == 0 and streak == 0):
            streak += 1
            cursor = day
        else:
            break
    return streak


def best_streak(dates_desc: list[date]) -> int:
    """Longest run of consecutive dates anywhere in the history."""
    if not dates_desc:
        return 0

    best = 0
    run = 1
    for newer, older in zip(dates_desc, dates_desc[1:]):
        if (newer - older).days == 1:
            run += 1
        else:
            best = max(best, run)
            run = 1
    return max(best, run)


def calculate_streaks(
    active_dates: Iterable[Optional[date]],
    today: date,
) -> StreakSummary:
    """Compute current streak, best streak and active day count.

    Args:
        active_dates: Dates with activity; duplicates and None are ignored
        today: Anchor date for the current streak

    Returns:
        StreakSummary
    """
    dates_desc = sorted({d for d in active_dates if d is not None}, reverse=True)
    if not dates_desc:
        return StreakSummary(current_streak=0, best_streak=0, total_active_days=0)

    return StreakSummary(
        current_streak=current_streak(dates_desc, today),
        best_streak=best_streak(dates_desc),
        total_active_days=len(dates_desc),
    )
