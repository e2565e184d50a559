"""Monthly reading recap.

Summarizes the books finished in one calendar month. Each superlative is
computed on its own and is None when the month has nothing to base it on.
"""

import calendar
from collections import Counter
from datetime import date
from typing import Iterable, Optional

from ..activity.source import FinishedRecord
from ..periods import validate_month, validate_period
from .schemas import FastestBook, MonthlyRecap, TopRatedBook

UNKNOWN_AUTHOR = "Unknown"


def month_name(month: int) -> str:
    """English name of a month number (1 = January)."""
    validate_month(month)
    return calendar.month_name[month]


def finished_in_month(
    records: Iterable[FinishedRecord], year: int, month: int
) -> list[FinishedRecord]:
    """Records whose finish date falls inside the month."""
    return [
        r for r in records
        if r.date_finished is not None
        and r.date_finished.year == year
        and r.date_finished.month == month
    ]


def _most_common(counts: Counter) -> Optional[str]:
    top = counts.most_common(1)
    return top[0][0] if top else None


def top_genre(records: list[FinishedRecord]) -> Optional[str]:
    """Genre tagged on the most distinct books."""
    books_by_genre: dict[str, set[str]] = {}
    for record in records:
        for genre in record.genres:
            books_by_genre.setdefault(genre, set()).add(record.book_id)
    return _most_common(Counter({g: len(ids) for g, ids in books_by_genre.items()}))


def favorite_author(records: list[FinishedRecord]) -> Optional[str]:
    """Author credited on the most distinct books."""
    books_by_author: dict[str, set[str]] = {}
    for record in records:
        for author in record.authors:
            books_by_author.setdefault(author, set()).add(record.book_id)
    return _most_common(Counter({a: len(ids) for a, ids in books_by_author.items()}))


def top_rated_book(records: list[FinishedRecord]) -> Optional[TopRatedBook]:
    """Highest rated book, the most recently finished one winning ties."""
    rated = [r for r in records if r.rating is not None]
    if not rated:
        return None
    best = max(rated, key=lambda r: (r.rating, r.date_finished or date.min))
    return TopRatedBook(
        title=best.title,
        rating=best.rating,
        authors=best.author_display or UNKNOWN_AUTHOR,
    )


def fastest_book(records: list[FinishedRecord]) -> Optional[FastestBook]:
    """Book with the fewest positive reading days."""
    timed = [r for r in records if r.reading_days is not None and r.reading_days > 0]
    if not timed:
        return None
    fastest = min(timed, key=lambda r: r.reading_days)
    return FastestBook(title=fastest.title, days=fastest.reading_days)


def build_monthly_recap(
    records: Iterable[FinishedRecord], year: int, month: int
) -> MonthlyRecap:
    """Build the recap for a month.

    Args:
        records: Finished-book records; anything finished outside the
            month is ignored
        year: Calendar year
        month: Month number 1-12

    Returns:
        MonthlyRecap

    Raises:
        InvalidPeriodError: If year or month is out of range
    """
    validate_period(year, month)
    in_month = finished_in_month(records, year, month)

    return MonthlyRecap(
        month=month_name(month),
        year=year,
        books_finished=len(in_month),
        pages_read=sum(r.pages or 0 for r in in_month),
        top_genre=top_genre(in_month),
        top_rated_book=top_rated_book(in_month),
        fastest_book=fastest_book(in_month),
        total_reading_days=sum(r.reading_days or 0 for r in in_month),
        favorite_author=favorite_author(in_month),
    )
