"""Pydantic schemas for data validation.

These schemas validate everything written to the store of record: books
with their author and genre links, reading sessions, reading log status
changes, externally sourced rating info and yearly reading goals.
"""

from datetime import MAXYEAR, MINYEAR, date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class ReadingStatus(str, Enum):
    """Reading log status of a book."""

    WANT_TO_READ = "want_to_read"
    READING = "reading"
    FINISHED = "finished"
    DID_NOT_FINISH = "did_not_finish"
    ON_HOLD = "on_hold"


# ============================================================================
# Book Schemas
# ============================================================================


class BookCreate(BaseModel):
    """Schema for creating a new book."""

    title: str = Field(..., min_length=1, description="Book title")
    isbn: Optional[str] = Field(None, max_length=17)
    year: Optional[int] = None
    pages: Optional[int] = Field(None, ge=0)
    added_at: Optional[datetime] = None
    authors: list[str] = Field(default_factory=list, description="Credit order")
    genres: list[str] = Field(default_factory=list)

    @field_validator("isbn", mode="before")
    @classmethod
    def clean_isbn(cls, v: Optional[str]) -> Optional[str]:
        """Strip dashes and whitespace from ISBN values."""
        if v is None:
            return None
        v = str(v).replace("-", "").replace(" ", "").strip()
        return v if v else None

    @field_validator("authors", "genres", mode="before")
    @classmethod
    def clean_names(cls, v) -> list[str]:
        """Drop blank names and duplicates, keeping first-seen order."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        cleaned = []
        for name in v:
            name = str(name).strip()
            if name and name not in cleaned:
                cleaned.append(name)
        return cleaned


# ============================================================================
# Reading Log Schemas
# ============================================================================


class ReadingStatusUpdate(BaseModel):
    """Schema for changing a book's reading log entry."""

    status: ReadingStatus
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating 1-5")
    date_started: Optional[date] = None
    date_finished: Optional[date] = None
    current_page: Optional[int] = Field(None, ge=0)
    reading_days: Optional[int] = Field(None, ge=0)
    review: Optional[str] = None

    @model_validator(mode="after")
    def check_dates(self) -> "ReadingStatusUpdate":
        """A finish date only makes sense for finished books."""
        if self.date_finished and self.status != ReadingStatus.FINISHED:
            raise ValueError("date_finished can only be set when status is finished")
        if (
            self.date_started
            and self.date_finished
            and self.date_finished < self.date_started
        ):
            raise ValueError("date_finished must be on or after date_started")
        return self


# ============================================================================
# Reading Session Schemas
# ============================================================================


class ReadingSessionCreate(BaseModel):
    """Schema for logging a reading session."""

    book_id: str
    session_date: date
    pages_read: Optional[int] = Field(None, ge=0)
    minutes_read: Optional[int] = Field(None, ge=0)
    start_page: Optional[int] = Field(None, ge=0)
    end_page: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def derive_pages(self) -> "ReadingSessionCreate":
        """Fill pages_read from a page range when only the range is given."""
        if (
            self.pages_read is None
            and self.start_page is not None
            and self.end_page is not None
        ):
            if self.end_page < self.start_page:
                raise ValueError("end_page must be >= start_page")
            self.pages_read = self.end_page - self.start_page
        return self


# ============================================================================
# External Rating Schemas
# ============================================================================


class ExternalRatingCreate(BaseModel):
    """Rating info supplied by the external metadata lookup."""

    average_rating: Optional[float] = Field(None, ge=0, le=5)
    ratings_count: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None


# ============================================================================
# Reading Goal Schemas
# ============================================================================


class ReadingGoalSet(BaseModel):
    """Schema for setting a yearly reading goal."""

    year: int = Field(..., ge=MINYEAR, le=MAXYEAR)
    target_books: int = Field(..., ge=1, description="Books to finish in the year")
    target_pages: Optional[int] = Field(None, ge=1)
