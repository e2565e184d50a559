"""Yearly reading goal progress.

Progress counts the books finished in the goal's year and the pages in
those books. A year without a stored goal is measured against the default
target of one book a week.
"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

from ..activity.source import FinishedRecord, GoalTarget
from ..periods import validate_year

DEFAULT_TARGET_BOOKS = 52


class GoalProgress(BaseModel):
    """Books and pages finished in a year against its targets."""

    year: int
    target_books: int = Field(DEFAULT_TARGET_BOOKS, ge=1)
    target_pages: Optional[int] = None
    current_books: int = Field(0, ge=0)
    current_pages: int = Field(0, ge=0)
    is_default: bool = False

    @property
    def progress_percent(self) -> float:
        """Book progress as a percentage, capped at 100."""
        return min(100.0, round(self.current_books / self.target_books * 100, 1))

    @property
    def pages_percent(self) -> Optional[float]:
        """Page progress as a percentage, None without a page target."""
        if not self.target_pages:
            return None
        return min(100.0, round(self.current_pages / self.target_pages * 100, 1))

    @property
    def remaining_books(self) -> int:
        return max(0, self.target_books - self.current_books)

    @property
    def is_complete(self) -> bool:
        return self.current_books >= self.target_books


def calculate_goal_progress(
    year: int,
    finished: Iterable[FinishedRecord],
    goal: Optional[GoalTarget] = None,
) -> GoalProgress:
    """Measure a year's finished books against its goal.

    Args:
        year: Goal year
        finished: Finished-book records; other years are ignored
        goal: Stored goal for the year, or None for the default target

    Returns:
        GoalProgress
    """
    validate_year(year)
    in_year = [
        r for r in finished
        if r.date_finished is not None and r.date_finished.year == year
    ]

    progress = GoalProgress(
        year=year,
        current_books=len(in_year),
        current_pages=sum(r.pages or 0 for r in in_year),
    )
    if goal is None:
        progress.is_default = True
    else:
        progress.target_books = goal.target_books
        progress.target_pages = goal.target_pages
    return progress
