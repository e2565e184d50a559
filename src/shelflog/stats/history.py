"""Reading history: books and pages finished per day."""

from datetime import date
from typing import Iterable

from pydantic import BaseModel, Field

from ..activity.source import FinishedRecord
from ..periods import months_before

DEFAULT_HISTORY_MONTHS = 12


class HistoryPoint(BaseModel):
    """Books finished on one date and the pages in them."""

    date: date
    books_read: int = Field(0, ge=0)
    pages_read: int = Field(0, ge=0)


def calculate_reading_history(
    finished: Iterable[FinishedRecord],
    today: date,
    months: int = DEFAULT_HISTORY_MONTHS,
) -> list[HistoryPoint]:
    """Group finished books by finish date over the last months.

    Args:
        finished: Finished-book records
        today: End of the history window
        months: Calendar months to look back

    Returns:
        One HistoryPoint per date with a finished book, oldest first

    Raises:
        ValueError: If months is negative
    """
    since = months_before(today, months)

    points: dict[date, HistoryPoint] = {}
    for record in finished:
        day = record.date_finished
        if day is None or day < since:
            continue
        point = points.get(day)
        if point is None:
            point = points[day] = HistoryPoint(date=day)
        point.books_read += 1
        point.pages_read += record.pages or 0

    return [points[day] for day in sorted(points)]
