"""Calendar period helpers shared by the recap and statistics reports."""

import calendar
from datetime import MAXYEAR, MINYEAR, date

from .errors import InvalidMonthError, InvalidYearError


def validate_year(year: int) -> None:
    """Reject years the calendar cannot represent."""
    if not isinstance(year, int) or isinstance(year, bool) or not MINYEAR <= year <= MAXYEAR:
        raise InvalidYearError(year)


def validate_month(month: int) -> None:
    """Reject months outside 1..12."""
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise InvalidMonthError(month)


def validate_period(year: int, month: int) -> None:
    validate_year(year)
    validate_month(month)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of a month."""
    validate_period(year, month)
    _, days_in_month = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, days_in_month)


def months_before(today: date, months: int) -> date:
    """Same day of the month, months earlier, clamped to the month's length.

    Raises:
        ValueError: If months is negative
    """
    if months < 0:
        raise ValueError(f"months must not be negative, got {months}")
    index = today.year * 12 + today.month - 1 - months
    year, month = divmod(index, 12)
    month += 1
    validate_year(year)
    _, days_in_month = calendar.monthrange(year, month)
    return date(year, month, min(today.day, days_in_month))
