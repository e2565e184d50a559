"""Daily activity aggregation.

Merges reading sessions and finished-book events into one sparse,
date-sorted series. The two streams are aggregated into separate maps and
combined in an explicit override step: a date with any session takes the
session figures only, and finished-book figures fill in dates that have no
sessions at all.
"""

from datetime import date, timedelta
from typing import Iterable, Optional

from .schemas import DailyActivity
from .source import FinishedRecord, SessionRecord

DEFAULT_WINDOW_DAYS = 365


def window_start(today: date, window_days: int) -> date:
    """First date included in a window of window_days ending today."""
    if window_days < 0:
        raise ValueError(f"window_days must not be negative, got {window_days}")
    return today - timedelta(days=window_days)


def build_session_map(
    sessions: Iterable[SessionRecord],
    since: Optional[date] = None,
) -> dict[date, DailyActivity]:
    """Accumulate sessions per date. Sessions without a date are skipped."""
    days: dict[date, DailyActivity] = {}
    for record in sessions:
        if record.session_date is None:
            continue
        if since is not None and record.session_date < since:
            continue
        day = days.get(record.session_date)
        if day is None:
            day = days[record.session_date] = DailyActivity(date=record.session_date)
        day.pages_read += record.pages_read or 0
        day.minutes_read += record.minutes_read or 0
        day.session_count += 1
    return days


def build_finished_map(
    finished: Iterable[FinishedRecord],
    since: Optional[date] = None,
) -> dict[date, DailyActivity]:
    """Accumulate finished books per finish date.

    Each book counts its page total (0 when unknown) and one event. There
    is no time information for this stream, so minutes stay at 0.
    """
    days: dict[date, DailyActivity] = {}
    for record in finished:
        if record.date_finished is None:
            continue
        if since is not None and record.date_finished < since:
            continue
        day = days.get(record.date_finished)
        if day is None:
            day = days[record.date_finished] = DailyActivity(date=record.date_finished)
        day.pages_read += record.pages or 0
        day.session_count += 1
    return days


def merge_activity(
    session_map: dict[date, DailyActivity],
    finished_map: dict[date, DailyActivity],
) -> list[DailyActivity]:
    """Combine both maps, session figures winning outright on shared dates."""
    merged = dict(finished_map)
    merged.update(session_map)
    return [merged[day] for day in sorted(merged)]


def aggregate_daily_activity(
    sessions: Iterable[SessionRecord],
    finished: Iterable[FinishedRecord],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> list[DailyActivity]:
    """Build the daily activity series for the window ending today.

    Args:
        sessions: Reading session records
        finished: Finished-book records
        today: Anchor date for the window
        window_days: How many days back to look

    Returns:
        One DailyActivity per active date, ascending, no duplicates
    """
    since = window_start(today, window_days)
    return merge_activity(
        build_session_map(sessions, since=since),
        build_finished_map(finished, since=since),
    )
