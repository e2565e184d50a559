"""Library completion statistics."""

import math
from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from ..activity.source import FinishedRecord


class LibraryCompletion(BaseModel):
    """How much of the library has been read, and a finish estimate."""

    total_books: int = Field(0, ge=0)
    books_read: int = Field(0, ge=0)
    percentage: int = Field(0, ge=0)
    estimated_completion_months: Optional[int] = None


def months_spanned(first: date, today: date) -> int:
    """Calendar months from first's month to today's month, inclusive."""
    return (today.year - first.year) * 12 + (today.month - first.month) + 1


def calculate_completion(
    total_books: int,
    finished: Iterable[FinishedRecord],
    today: date,
) -> LibraryCompletion:
    """Share of the catalog finished and months left at the current pace.

    Args:
        total_books: Number of books in the catalog
        finished: Finished-book records (all time)
        today: Anchor date for the reading pace

    Returns:
        LibraryCompletion; the estimate is None until a book is finished
    """
    finished = list(finished)
    books_read = len({r.book_id for r in finished})
    percentage = math.floor(books_read / total_books * 100 + 0.5) if total_books else 0

    estimate = None
    dates = [r.date_finished for r in finished if r.date_finished is not None]
    if dates and books_read:
        months = max(1, months_spanned(min(dates), today))
        per_month = books_read / months
        remaining = max(0, total_books - books_read)
        estimate = math.ceil(remaining / per_month)

    return LibraryCompletion(
        total_books=total_books,
        books_read=books_read,
        percentage=percentage,
        estimated_completion_months=estimate,
    )
