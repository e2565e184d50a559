"""Database module for local SQLite storage."""

from .models import (
    Author,
    Book,
    BookAuthor,
    BookGenre,
    ExternalRating,
    Genre,
    ReadingGoal,
    ReadingLogEntry,
    ReadingSession,
)
from .schemas import (
    BookCreate,
    ExternalRatingCreate,
    ReadingGoalSet,
    ReadingSessionCreate,
    ReadingStatus,
    ReadingStatusUpdate,
)
from .sqlite import Database, SessionResult, get_db, reset_db

__all__ = [
    "Author",
    "Book",
    "BookAuthor",
    "BookGenre",
    "ExternalRating",
    "Genre",
    "ReadingGoal",
    "ReadingLogEntry",
    "ReadingSession",
    "BookCreate",
    "ExternalRatingCreate",
    "ReadingGoalSet",
    "ReadingSessionCreate",
    "ReadingStatus",
    "ReadingStatusUpdate",
    "Database",
    "SessionResult",
    "get_db",
    "reset_db",
]
