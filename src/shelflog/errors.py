"""Exceptions raised by shelflog.

Callers at the boundary (CLI, web handlers) decide how to present these;
the analytics code never turns them into empty results.
"""

from datetime import MAXYEAR, MINYEAR


class ShelflogError(Exception):
    """Base exception for shelflog errors."""

    pass


class DataAccessError(ShelflogError):
    """Raised when the store of record cannot be read or written."""

    pass


class InvalidPeriodError(ShelflogError, ValueError):
    """Raised when a requested calendar period does not exist."""

    pass


class InvalidMonthError(InvalidPeriodError):
    """Raised when a month outside 1..12 is requested."""

    def __init__(self, month: int):
        super().__init__(f"Month must be between 1 and 12, got {month}")
        self.month = month


class InvalidYearError(InvalidPeriodError):
    """Raised when a year outside the supported calendar range is requested."""

    def __init__(self, year: int):
        super().__init__(f"Year must be between {MINYEAR} and {MAXYEAR}, got {year}")
        self.year = year


class BookNotFoundError(ShelflogError, LookupError):
    """Raised when an operation references an unknown book."""

    def __init__(self, book_id: str):
        super().__init__(f"Book not found: {book_id}")
        self.book_id = book_id
