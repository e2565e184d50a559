"""SQLite database operations.

Handles database connection, session management, and the write operations
that feed the analytics engine.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..errors import BookNotFoundError, DataAccessError
from .models import (
    Author,
    Base,
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

logger = logging.getLogger(__name__)


@dataclass
class SessionResult:
    """Outcome of logging a reading session."""

    session: ReadingSession
    book_title: str
    book_completed: bool
    status: str
    current_page: int


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None, timeout: Optional[float] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses the
                     configured SHELFLOG_DB_PATH.
            timeout: Seconds to wait on a locked database before failing.
        """
        if db_path is None or timeout is None:
            config = get_config()
            db_path = db_path if db_path is not None else str(config.db_path)
            timeout = timeout if timeout is not None else config.db_timeout

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        connect_args = {"check_same_thread": False, "timeout": timeout}

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args=connect_args,
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables.

        Raises:
            DataAccessError: If the database file cannot be opened or written
        """
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            logger.error("Could not create tables in %s: %s", self.db_path, exc)
            raise DataAccessError(f"Cannot open database {self.db_path}: {exc}") from exc

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager.

        SQLAlchemy failures are re-raised as DataAccessError.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Database operation failed on %s: %s", self.db_path, exc)
            raise DataAccessError(f"Database operation failed: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Book Operations
    # ========================================================================

    def _get_or_create_author(self, s: Session, name: str) -> Author:
        author = s.execute(select(Author).where(Author.name == name)).scalar_one_or_none()
        if author is None:
            author = Author(name=name)
            s.add(author)
            s.flush()
        return author

    def _get_or_create_genre(self, s: Session, name: str) -> Genre:
        genre = s.execute(select(Genre).where(Genre.name == name)).scalar_one_or_none()
        if genre is None:
            genre = Genre(name=name)
            s.add(genre)
            s.flush()
        return genre

    def create_book(self, book: BookCreate) -> Book:
        """Create a new book with its author and genre links."""
        with self.get_session() as s:
            added_at = book.added_at or datetime.now(timezone.utc)
            db_book = Book(
                title=book.title,
                isbn=book.isbn,
                year=book.year,
                pages=book.pages,
                added_at=added_at.isoformat(),
            )
            s.add(db_book)
            s.flush()

            for position, name in enumerate(book.authors, start=1):
                author = self._get_or_create_author(s, name)
                s.add(BookAuthor(book_id=db_book.id, author_id=author.id, position=position))
            for name in book.genres:
                genre = self._get_or_create_genre(s, name)
                s.add(BookGenre(book_id=db_book.id, genre_id=genre.id))
            s.flush()

            logger.debug("Created book %s (%s)", db_book.id, db_book.title)
            s.expunge(db_book)
            return db_book

    def get_book(self, book_id: str) -> Optional[Book]:
        """Get a book by ID."""
        with self.get_session() as s:
            book = s.get(Book, book_id)
            if book:
                s.expunge(book)
            return book

    def find_books(self, title: str, limit: int = 20) -> list[Book]:
        """Find books whose title contains the given text."""
        with self.get_session() as s:
            stmt = (
                select(Book)
                .where(Book.title.ilike(f"%{title}%"))
                .order_by(Book.title)
                .limit(limit)
            )
            books = list(s.execute(stmt).scalars().all())
            for book in books:
                s.expunge(book)
            return books

    # ========================================================================
    # Reading Log Operations
    # ========================================================================

    def get_reading_log(self, book_id: str) -> Optional[ReadingLogEntry]:
        """Get the reading log entry for a book."""
        with self.get_session() as s:
            stmt = select(ReadingLogEntry).where(ReadingLogEntry.book_id == book_id)
            entry = s.execute(stmt).scalar_one_or_none()
            if entry:
                s.expunge(entry)
            return entry

    def update_reading_status(
        self,
        book_id: str,
        update: ReadingStatusUpdate,
        today: Optional[date] = None,
    ) -> ReadingLogEntry:
        """Create or update the reading log entry for a book.

        Args:
            book_id: Book to update
            update: New status and optional fields
            today: Finish date used when marking finished without one

        Returns:
            The stored ReadingLogEntry
        """
        with self.get_session() as s:
            book = s.get(Book, book_id)
            if not book:
                raise BookNotFoundError(book_id)

            stmt = select(ReadingLogEntry).where(ReadingLogEntry.book_id == book_id)
            entry = s.execute(stmt).scalar_one_or_none()
            if entry is None:
                entry = ReadingLogEntry(book_id=book_id, current_page=0)
                s.add(entry)

            entry.status = update.status.value
            if update.rating is not None:
                entry.rating = update.rating
            if update.review is not None:
                entry.review = update.review
            if update.current_page is not None:
                entry.current_page = update.current_page
            if update.date_started is not None:
                entry.date_started = update.date_started.isoformat()

            if update.status == ReadingStatus.FINISHED:
                finished = update.date_finished or today or date.today()
                entry.date_finished = finished.isoformat()
                if book.pages:
                    entry.current_page = book.pages
            else:
                entry.date_finished = None

            if update.reading_days is not None:
                entry.reading_days = update.reading_days
            else:
                entry.reading_days = _reading_days(entry.date_started, entry.date_finished)

            s.flush()
            s.expunge(entry)
            return entry

    # ========================================================================
    # Reading Session Operations
    # ========================================================================

    def record_reading_session(self, data: ReadingSessionCreate) -> SessionResult:
        """Store a reading session and advance the book's reading log.

        The log's current page moves forward by the pages read. Reaching the
        book's page count marks it finished on the session date.
        """
        with self.get_session() as s:
            book = s.get(Book, data.book_id)
            if not book:
                raise BookNotFoundError(data.book_id)

            session_date = data.session_date.isoformat()
            db_session = ReadingSession(
                book_id=data.book_id,
                session_date=session_date,
                pages_read=data.pages_read,
                minutes_read=data.minutes_read,
                start_page=data.start_page,
                end_page=data.end_page,
                notes=data.notes,
            )
            s.add(db_session)

            stmt = select(ReadingLogEntry).where(ReadingLogEntry.book_id == data.book_id)
            entry = s.execute(stmt).scalar_one_or_none()

            current_page = (entry.current_page if entry else 0) or 0
            current_page += data.pages_read or 0
            total_pages = book.pages or 0
            already_finished = (
                entry is not None and entry.status == ReadingStatus.FINISHED.value
            )
            completed = total_pages > 0 and current_page >= total_pages

            if entry is None:
                entry = ReadingLogEntry(
                    book_id=data.book_id,
                    status=ReadingStatus.READING.value,
                    date_started=session_date,
                )
                s.add(entry)
            elif entry.status == ReadingStatus.WANT_TO_READ.value:
                entry.status = ReadingStatus.READING.value
            if not entry.date_started:
                entry.date_started = session_date

            if completed:
                entry.current_page = total_pages
                if not already_finished:
                    entry.status = ReadingStatus.FINISHED.value
                    entry.date_finished = session_date
                    entry.reading_days = _reading_days(entry.date_started, session_date)
            else:
                entry.current_page = current_page

            s.flush()
            logger.debug(
                "Logged session for %s on %s (%s pages, completed=%s)",
                book.title,
                session_date,
                data.pages_read,
                completed and not already_finished,
            )

            result = SessionResult(
                session=db_session,
                book_title=book.title,
                book_completed=completed and not already_finished,
                status=entry.status,
                current_page=entry.current_page,
            )
            s.expunge(db_session)
            return result

    def delete_reading_session(self, session_id: str) -> bool:
        """Delete a reading session. Returns False if it does not exist."""
        with self.get_session() as s:
            db_session = s.get(ReadingSession, session_id)
            if not db_session:
                return False
            s.delete(db_session)
            return True

    # ========================================================================
    # External Rating Operations
    # ========================================================================

    def upsert_external_rating(
        self, book_id: str, rating: ExternalRatingCreate
    ) -> ExternalRating:
        """Store rating info fetched by the external metadata lookup."""
        with self.get_session() as s:
            if not s.get(Book, book_id):
                raise BookNotFoundError(book_id)

            info = s.get(ExternalRating, book_id)
            if info is None:
                info = ExternalRating(book_id=book_id)
                s.add(info)
            info.average_rating = rating.average_rating
            info.ratings_count = rating.ratings_count
            info.description = rating.description

            s.flush()
            s.expunge(info)
            return info

    # ========================================================================
    # Reading Goal Operations
    # ========================================================================

    def set_reading_goal(self, goal: ReadingGoalSet) -> ReadingGoal:
        """Create or replace the reading goal for a year."""
        with self.get_session() as s:
            stmt = select(ReadingGoal).where(ReadingGoal.year == goal.year)
            db_goal = s.execute(stmt).scalar_one_or_none()
            if db_goal is None:
                db_goal = ReadingGoal(year=goal.year)
                s.add(db_goal)
            db_goal.target_books = goal.target_books
            db_goal.target_pages = goal.target_pages

            s.flush()
            logger.debug("Set %d goal: %d books", goal.year, goal.target_books)
            s.expunge(db_goal)
            return db_goal

    def get_reading_goal(self, year: int) -> Optional[ReadingGoal]:
        """Get the reading goal for a year, if one was set."""
        with self.get_session() as s:
            stmt = select(ReadingGoal).where(ReadingGoal.year == year)
            db_goal = s.execute(stmt).scalar_one_or_none()
            if db_goal:
                s.expunge(db_goal)
            return db_goal


def _reading_days(date_started: Optional[str], date_finished: Optional[str]) -> Optional[int]:
    """Days between start and finish, or None when either is unknown."""
    if not date_started or not date_finished:
        return None
    days = (date.fromisoformat(date_finished) - date.fromisoformat(date_started)).days
    return days if days >= 0 else None


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        db = Database(db_path)
        db.create_tables()
        _db = db
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
