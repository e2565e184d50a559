"""Tests for input validation schemas."""

from datetime import date

import pytest
from pydantic import ValidationError

from shelflog.db.schemas import (
    BookCreate,
    ExternalRatingCreate,
    ReadingGoalSet,
    ReadingSessionCreate,
    ReadingStatus,
    ReadingStatusUpdate,
)


class TestBookCreate:
    """Tests for BookCreate."""

    def test_minimal(self):
        book = BookCreate(title="Dune")
        assert book.authors == []
        assert book.genres == []

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            BookCreate(title="")

    def test_isbn_cleaned(self):
        """Test dashes and spaces are stripped."""
        assert BookCreate(title="X", isbn="978-0-441 17271-9").isbn == "9780441172719"
        assert BookCreate(title="X", isbn=" - ").isbn is None

    def test_comma_separated_names(self):
        """Test names given as one string are split and deduplicated."""
        book = BookCreate(title="X", authors="Pratchett, Gaiman, , Pratchett")
        assert book.authors == ["Pratchett", "Gaiman"]

    def test_negative_pages_rejected(self):
        with pytest.raises(ValidationError):
            BookCreate(title="X", pages=-1)


class TestReadingStatusUpdate:
    """Tests for ReadingStatusUpdate."""

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            ReadingStatusUpdate(status=ReadingStatus.FINISHED, rating=rating)

    def test_finish_date_requires_finished(self):
        """Test a finish date on an unfinished book is rejected."""
        with pytest.raises(ValidationError):
            ReadingStatusUpdate(status=ReadingStatus.READING, date_finished=date(2024, 3, 1))

    def test_finish_before_start_rejected(self):
        with pytest.raises(ValidationError):
            ReadingStatusUpdate(
                status=ReadingStatus.FINISHED,
                date_started=date(2024, 3, 10),
                date_finished=date(2024, 3, 1),
            )

    def test_status_from_string(self):
        update = ReadingStatusUpdate(status="on_hold")
        assert update.status == ReadingStatus.ON_HOLD


class TestReadingSessionCreate:
    """Tests for ReadingSessionCreate."""

    def test_pages_from_range(self):
        session = ReadingSessionCreate(
            book_id="b", session_date=date(2024, 3, 1), start_page=100, end_page=130
        )
        assert session.pages_read == 30

    def test_explicit_pages_win(self):
        session = ReadingSessionCreate(
            book_id="b", session_date=date(2024, 3, 1),
            pages_read=12, start_page=100, end_page=130,
        )
        assert session.pages_read == 12

    def test_backwards_range_rejected(self):
        with pytest.raises(ValidationError):
            ReadingSessionCreate(
                book_id="b", session_date=date(2024, 3, 1), start_page=130, end_page=100
            )

    def test_negative_minutes_rejected(self):
        with pytest.raises(ValidationError):
            ReadingSessionCreate(book_id="b", session_date=date(2024, 3, 1), minutes_read=-5)


class TestExternalRatingCreate:
    """Tests for ExternalRatingCreate."""

    def test_average_range(self):
        with pytest.raises(ValidationError):
            ExternalRatingCreate(average_rating=5.5)

    def test_all_optional(self):
        info = ExternalRatingCreate()
        assert info.average_rating is None
        assert info.ratings_count is None


class TestReadingGoalSet:
    """Tests for ReadingGoalSet."""

    def test_valid(self):
        goal = ReadingGoalSet(year=2024, target_books=24)
        assert goal.target_pages is None

    @pytest.mark.parametrize("books", [0, -3])
    def test_target_must_be_positive(self, books):
        with pytest.raises(ValidationError):
            ReadingGoalSet(year=2024, target_books=books)

    def test_year_range(self):
        with pytest.raises(ValidationError):
            ReadingGoalSet(year=0, target_books=10)
