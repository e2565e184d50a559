"""Pytest configuration and shared fixtures.

This module provides fixtures for testing shelflog, including temporary
databases and helpers for seeding books, sessions and reading log entries.
"""

import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Generator, Optional

import pytest

from shelflog.config import reset_config
from shelflog.db.schemas import (
    BookCreate,
    ExternalRatingCreate,
    ReadingGoalSet,
    ReadingSessionCreate,
    ReadingStatus,
    ReadingStatusUpdate,
)
from shelflog.db.sqlite import Database, reset_db


# Fixed anchor used by tests that need a deterministic "today"
TODAY = date(2024, 3, 15)
NOW = datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    # Reset any global state
    reset_db()
    reset_config()

    os.environ["SHELFLOG_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path), timeout=1.0)
    database.create_tables()
    yield database

    # Cleanup
    reset_db()
    reset_config()
    database.engine.dispose()
    if "SHELFLOG_DB_PATH" in os.environ:
        del os.environ["SHELFLOG_DB_PATH"]


# ============================================================================
# Seeding Helpers
# ============================================================================


class Library:
    """Small helper for seeding a test database."""

    def __init__(self, db: Database):
        self.db = db

    def book(
        self,
        title: str,
        pages: Optional[int] = None,
        authors: Optional[list[str]] = None,
        genres: Optional[list[str]] = None,
        added_at: Optional[datetime] = None,
    ) -> str:
        book = self.db.create_book(BookCreate(
            title=title,
            pages=pages,
            authors=authors or [],
            genres=genres or [],
            added_at=added_at or NOW,
        ))
        return book.id

    def session(
        self,
        book_id: str,
        on: date,
        pages: Optional[int] = None,
        minutes: Optional[int] = None,
    ):
        return self.db.record_reading_session(ReadingSessionCreate(
            book_id=book_id,
            session_date=on,
            pages_read=pages,
            minutes_read=minutes,
        ))

    def finish(
        self,
        book_id: str,
        on: date,
        rating: Optional[int] = None,
        started: Optional[date] = None,
        reading_days: Optional[int] = None,
    ):
        return self.db.update_reading_status(book_id, ReadingStatusUpdate(
            status=ReadingStatus.FINISHED,
            date_finished=on,
            date_started=started,
            rating=rating,
            reading_days=reading_days,
        ))

    def status(self, book_id: str, status: ReadingStatus):
        return self.db.update_reading_status(book_id, ReadingStatusUpdate(status=status))

    def rating(
        self,
        book_id: str,
        average: Optional[float] = None,
        count: Optional[int] = None,
    ):
        return self.db.upsert_external_rating(
            book_id,
            ExternalRatingCreate(average_rating=average, ratings_count=count),
        )

    def goal(self, year: int, books: int, pages: Optional[int] = None):
        return self.db.set_reading_goal(
            ReadingGoalSet(year=year, target_books=books, target_pages=pages)
        )


@pytest.fixture
def library(db: Database) -> Library:
    """Seeding helper bound to the test database."""
    return Library(db)


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from shelflog.cli import app
    return app
