"""Activity source adapter.

Bulk reads of reading sessions, finished-book log entries, the book
catalog and yearly goals. Rows are copied into plain snapshot records inside the database
session so the analytics code never touches ORM objects. No derivation
happens here.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from ..db.models import (
    Book,
    BookAuthor,
    BookGenre,
    ReadingGoal,
    ReadingLogEntry,
    ReadingSession,
)
from ..db.schemas import ReadingStatus
from ..db.sqlite import Database, get_db
from ..periods import month_bounds, validate_year

logger = logging.getLogger(__name__)

# Status reported for catalog books that have no reading log row
NOT_STARTED = "not_started"


@dataclass
class SessionRecord:
    """A reading session as seen by the analytics engine."""

    book_id: str
    session_date: Optional[date]
    pages_read: Optional[int] = None
    minutes_read: Optional[int] = None


@dataclass
class FinishedRecord:
    """A finished-book log entry joined with its book metadata."""

    book_id: str
    title: str
    date_finished: Optional[date]
    pages: Optional[int] = None
    date_started: Optional[date] = None
    rating: Optional[int] = None
    reading_days: Optional[int] = None
    authors: list[str] = field(default_factory=list)
    genres: list[str] = field(default_factory=list)

    @property
    def author_display(self) -> Optional[str]:
        """Authors joined for display, None when no author is linked."""
        return ", ".join(self.authors) if self.authors else None


@dataclass
class ExternalRatingInfo:
    """Best-effort rating info from the external metadata lookup."""

    average_rating: Optional[float] = None
    ratings_count: Optional[int] = None
    description: Optional[str] = None


@dataclass
class CatalogEntry:
    """A catalog book joined with its reading status and rating info."""

    book_id: str
    title: str
    status: str
    added_at: Optional[datetime] = None
    pages: Optional[int] = None
    year: Optional[int] = None
    authors: list[str] = field(default_factory=list)
    rating_info: ExternalRatingInfo = field(default_factory=ExternalRatingInfo)


@dataclass
class GoalTarget:
    """A stored yearly reading goal."""

    year: int
    target_books: int
    target_pages: Optional[int] = None


RatingLookup = Callable[[str], Optional[ExternalRatingInfo]]


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a stored ISO date, returning None for empty values."""
    if not value:
        return None
    return date.fromisoformat(value[:10])


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO timestamp as an aware datetime (naive means UTC)."""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ActivitySource:
    """Reads activity and catalog snapshots from the store of record."""

    def __init__(
        self,
        db: Optional[Database] = None,
        rating_lookup: Optional[RatingLookup] = None,
    ):
        """Initialize the source.

        Args:
            db: Database instance
            rating_lookup: Optional external lookup consulted for books with
                no stored rating info. Failures are treated as "no rating".
        """
        self.db = db or get_db()
        self.rating_lookup = rating_lookup

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def read_sessions(self, since: Optional[date] = None) -> list[SessionRecord]:
        """Read reading sessions, optionally only those on or after a date."""
        with self.db.get_session() as session:
            stmt = select(ReadingSession)
            if since is not None:
                stmt = stmt.where(ReadingSession.session_date >= since.isoformat())
            stmt = stmt.order_by(ReadingSession.session_date)

            records = [
                SessionRecord(
                    book_id=row.book_id,
                    session_date=parse_iso_date(row.session_date),
                    pages_read=row.pages_read,
                    minutes_read=row.minutes_read,
                )
                for row in session.execute(stmt).scalars().all()
            ]

        logger.debug("Read %d reading sessions (since=%s)", len(records), since)
        return records

    # -------------------------------------------------------------------------
    # Finished books
    # -------------------------------------------------------------------------

    def read_finished(
        self,
        since: Optional[date] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> list[FinishedRecord]:
        """Read finished log entries joined with book, authors and genres.

        Args:
            since: Only entries finished on or after this date
            year: Only entries finished in this year (with month: that month)
            month: Month within year (1-12)

        Returns:
            Records ordered by finish date, newest first
        """
        with self.db.get_session() as session:
            stmt = (
                select(ReadingLogEntry)
                .join(Book, ReadingLogEntry.book_id == Book.id)
                .where(ReadingLogEntry.status == ReadingStatus.FINISHED.value)
                .options(
                    selectinload(ReadingLogEntry.book)
                    .selectinload(Book.book_authors)
                    .selectinload(BookAuthor.author),
                    selectinload(ReadingLogEntry.book)
                    .selectinload(Book.book_genres)
                    .selectinload(BookGenre.genre),
                )
            )
            if since is not None:
                stmt = stmt.where(ReadingLogEntry.date_finished >= since.isoformat())
            if year is not None:
                if month is not None:
                    start, end = month_bounds(year, month)
                else:
                    validate_year(year)
                    start, end = date(year, 1, 1), date(year, 12, 31)
                stmt = stmt.where(
                    ReadingLogEntry.date_finished >= start.isoformat(),
                    ReadingLogEntry.date_finished <= end.isoformat(),
                )
            stmt = stmt.order_by(ReadingLogEntry.date_finished.desc())

            records = []
            for entry in session.execute(stmt).scalars().all():
                book = entry.book
                records.append(FinishedRecord(
                    book_id=book.id,
                    title=book.title,
                    date_finished=parse_iso_date(entry.date_finished),
                    pages=book.pages,
                    date_started=parse_iso_date(entry.date_started),
                    rating=entry.rating,
                    reading_days=entry.reading_days,
                    authors=book.author_names,
                    genres=book.genre_names,
                ))

        logger.debug(
            "Read %d finished entries (since=%s, year=%s, month=%s)",
            len(records), since, year, month,
        )
        return records

    # -------------------------------------------------------------------------
    # Catalog
    # -------------------------------------------------------------------------

    def read_catalog(self) -> list[CatalogEntry]:
        """Read every book with its reading status and rating info.

        Books are returned newest-added first.
        """
        with self.db.get_session() as session:
            stmt = (
                select(Book)
                .options(
                    selectinload(Book.reading_log),
                    selectinload(Book.external_rating),
                    selectinload(Book.book_authors).selectinload(BookAuthor.author),
                )
                .order_by(Book.added_at.desc())
            )

            rows = []
            for book in session.execute(stmt).scalars().all():
                stored = book.external_rating
                rows.append((
                    dict(
                        book_id=book.id,
                        title=book.title,
                        status=book.reading_log.status if book.reading_log else NOT_STARTED,
                        added_at=parse_iso_datetime(book.added_at),
                        pages=book.pages,
                        year=book.year,
                        authors=book.author_names,
                    ),
                    ExternalRatingInfo(
                        average_rating=stored.average_rating,
                        ratings_count=stored.ratings_count,
                        description=stored.description,
                    ) if stored else None,
                ))

        # Lookups run outside the database session
        entries = [
            CatalogEntry(**fields, rating_info=(
                stored if stored is not None else self._lookup_rating(fields["book_id"])
            ))
            for fields, stored in rows
        ]

        logger.debug("Read %d catalog entries", len(entries))
        return entries

    def _lookup_rating(self, book_id: str) -> ExternalRatingInfo:
        """Ask the external lookup for rating info, degrading to empty."""
        if self.rating_lookup is None:
            return ExternalRatingInfo()
        try:
            info = self.rating_lookup(book_id)
        except Exception as exc:  # external collaborator, any failure means "no rating"
            logger.warning("Rating lookup failed for book %s: %s", book_id, exc)
            return ExternalRatingInfo()
        return info or ExternalRatingInfo()

    def count_books(self) -> int:
        """Count books in the catalog."""
        with self.db.get_session() as session:
            return session.execute(select(func.count()).select_from(Book)).scalar() or 0

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def read_goal(self, year: int) -> Optional[GoalTarget]:
        """Read the reading goal set for a year, None when there is none."""
        with self.db.get_session() as session:
            stmt = select(ReadingGoal).where(ReadingGoal.year == year)
            goal = session.execute(stmt).scalar_one_or_none()
            if goal is None:
                return None
            return GoalTarget(
                year=goal.year,
                target_books=goal.target_books,
                target_pages=goal.target_pages,
            )
