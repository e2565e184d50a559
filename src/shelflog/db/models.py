"""SQLAlchemy ORM models for the local SQLite store.

Tables:
- books: Catalog of books
- authors / genres: Lookup tables, linked to books many-to-many
- book_authors / book_genres: Association tables
- reading_log: At most one status row per book
- reading_sessions: Individual reading session entries
- external_ratings: Optional rating info from the metadata lookup
- reading_goals: Yearly book and page targets
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import ReadingStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Book(Base):
    """Book model - one row per catalog entry."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    isbn: Mapped[Optional[str]] = mapped_column(String(17), index=True)
    year: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    pages: Mapped[Optional[int]] = mapped_column(Integer)
    added_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)  # ISO datetime

    # Relationships
    book_authors: Mapped[list["BookAuthor"]] = relationship(
        "BookAuthor",
        back_populates="book",
        cascade="all, delete-orphan",
        order_by="BookAuthor.position",
    )
    book_genres: Mapped[list["BookGenre"]] = relationship(
        "BookGenre", back_populates="book", cascade="all, delete-orphan"
    )
    reading_log: Mapped[Optional["ReadingLogEntry"]] = relationship(
        "ReadingLogEntry", back_populates="book", uselist=False, cascade="all, delete-orphan"
    )
    reading_sessions: Mapped[list["ReadingSession"]] = relationship(
        "ReadingSession", back_populates="book", cascade="all, delete-orphan"
    )
    external_rating: Mapped[Optional["ExternalRating"]] = relationship(
        "ExternalRating", back_populates="book", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"

    @property
    def author_names(self) -> list[str]:
        """Author names in credit order."""
        return [link.author.name for link in self.book_authors]

    @property
    def genre_names(self) -> list[str]:
        """Genre names."""
        return [link.genre.name for link in self.book_genres]


class Author(Base):
    """Author model."""

    __tablename__ = "authors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    book_links: Mapped[list["BookAuthor"]] = relationship(
        "BookAuthor", back_populates="author", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"


class Genre(Base):
    """Genre model."""

    __tablename__ = "genres"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    book_links: Mapped[list["BookGenre"]] = relationship(
        "BookGenre", back_populates="genre", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Genre(id={self.id}, name='{self.name}')>"


class BookAuthor(Base):
    """Association table for book-author many-to-many relationship."""

    __tablename__ = "book_authors"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("authors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=1)

    book: Mapped["Book"] = relationship("Book", back_populates="book_authors")
    author: Mapped["Author"] = relationship("Author", back_populates="book_links")

    __table_args__ = (
        UniqueConstraint("book_id", "author_id", name="uq_book_author"),
    )


class BookGenre(Base):
    """Association table for book-genre many-to-many relationship."""

    __tablename__ = "book_genres"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    genre_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("genres.id", ondelete="CASCADE"), nullable=False, index=True
    )

    book: Mapped["Book"] = relationship("Book", back_populates="book_genres")
    genre: Mapped["Genre"] = relationship("Genre", back_populates="book_links")

    __table_args__ = (
        UniqueConstraint("book_id", "genre_id", name="uq_book_genre"),
    )


class ReadingLogEntry(Base):
    """Reading log model - current reading status of a book."""

    __tablename__ = "reading_log"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    book_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ReadingStatus.WANT_TO_READ.value, index=True
    )

    # Dates (ISO)
    date_started: Mapped[Optional[str]] = mapped_column(String(10), index=True)
    date_finished: Mapped[Optional[str]] = mapped_column(String(10), index=True)

    current_page: Mapped[int] = mapped_column(Integer, default=0)
    rating: Mapped[Optional[int]] = mapped_column(Integer, index=True)
    reading_days: Mapped[Optional[int]] = mapped_column(Integer)
    review: Mapped[Optional[str]] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    book: Mapped["Book"] = relationship("Book", back_populates="reading_log")

    __table_args__ = (
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_log_rating"),
        CheckConstraint(
            "status IN ('want_to_read', 'reading', 'finished', 'did_not_finish', 'on_hold')",
            name="ck_log_status",
        ),
    )

    def __repr__(self) -> str:
        return f"<ReadingLogEntry(book_id={self.book_id}, status={self.status})>"


class ReadingSession(Base):
    """Reading session model - one sitting with a book."""

    __tablename__ = "reading_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    session_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # ISO date
    pages_read: Mapped[Optional[int]] = mapped_column(Integer)
    minutes_read: Mapped[Optional[int]] = mapped_column(Integer)
    start_page: Mapped[Optional[int]] = mapped_column(Integer)
    end_page: Mapped[Optional[int]] = mapped_column(Integer)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)

    book: Mapped["Book"] = relationship("Book", back_populates="reading_sessions")

    def __repr__(self) -> str:
        return f"<ReadingSession(id={self.id}, book_id={self.book_id}, date={self.session_date})>"


class ExternalRating(Base):
    """Rating info scraped by the external metadata lookup (0 or 1 per book)."""

    __tablename__ = "external_ratings"

    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True
    )
    average_rating: Mapped[Optional[float]] = mapped_column(Float)
    ratings_count: Mapped[Optional[int]] = mapped_column(Integer)
    description: Mapped[Optional[str]] = mapped_column(Text)
    last_updated: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    book: Mapped["Book"] = relationship("Book", back_populates="external_rating")

    def __repr__(self) -> str:
        return f"<ExternalRating(book_id={self.book_id}, avg={self.average_rating})>"


class ReadingGoal(Base):
    """Reading goal model - book and page targets for one year."""

    __tablename__ = "reading_goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    year: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    target_books: Mapped[int] = mapped_column(Integer, nullable=False)
    target_pages: Mapped[Optional[int]] = mapped_column(Integer)

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    __table_args__ = (
        CheckConstraint("target_books > 0", name="ck_goal_books"),
        CheckConstraint("target_pages IS NULL OR target_pages > 0", name="ck_goal_pages"),
    )

    def __repr__(self) -> str:
        return f"<ReadingGoal(year={self.year}, books={self.target_books})>"
