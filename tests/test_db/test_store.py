"""Tests for database write operations."""

from datetime import date, datetime, timezone

import pytest

from shelflog.db.schemas import (
    BookCreate,
    ExternalRatingCreate,
    ReadingGoalSet,
    ReadingSessionCreate,
    ReadingStatus,
    ReadingStatusUpdate,
)
from shelflog.db.sqlite import Database, get_db, reset_db
from shelflog.errors import BookNotFoundError, DataAccessError


class TestDatabase:
    """Tests for connection handling."""

    def test_memory_database(self):
        """Test an in-memory database shares one connection."""
        database = Database(":memory:", timeout=1.0)
        database.create_tables()

        book = database.create_book(BookCreate(title="In Memory"))

        assert database.get_book(book.id).title == "In Memory"

    def test_creates_parent_directory(self, tmp_path):
        """Test the database directory is created on demand."""
        path = tmp_path / "nested" / "dir" / "shelflog.db"
        Database(str(path), timeout=1.0)
        assert path.parent.exists()

    def test_global_instance(self, db):
        """Test get_db reuses the configured database."""
        first = get_db()
        assert get_db() is first
        reset_db()
        assert get_db() is not first

    def test_unopenable_path_raises(self, tmp_path):
        """Test a path that is a directory fails with a typed error."""
        database = Database(str(tmp_path), timeout=1.0)

        with pytest.raises(DataAccessError):
            database.create_tables()

    def test_failed_open_leaves_no_global(self, tmp_path):
        """Test get_db does not keep a database it could not open."""
        reset_db()
        with pytest.raises(DataAccessError):
            get_db(str(tmp_path))

        database = get_db(str(tmp_path / "ok.db"))

        assert database.db_path == tmp_path / "ok.db"
        reset_db()


class TestCreateBook:
    """Tests for adding books."""

    def test_create_with_links(self, db):
        """Test authors and genres are linked in credit order."""
        book = db.create_book(BookCreate(
            title="Good Omens",
            pages=400,
            authors=["Terry Pratchett", "Neil Gaiman"],
            genres=["Fantasy"],
        ))

        loaded = db.get_book(book.id)
        assert loaded.title == "Good Omens"
        assert loaded.pages == 400

    def test_authors_shared_between_books(self, db, library):
        """Test an author is stored once and linked to many books."""
        first = library.book("Small Gods", authors=["Terry Pratchett"])
        second = library.book("Mort", authors=["Terry Pratchett"])

        assert first != second
        assert [b.title for b in db.find_books("o")] == ["Mort", "Small Gods"]

    def test_added_at_defaults_to_now(self, db):
        """Test books get an added timestamp."""
        book = db.create_book(BookCreate(title="Fresh"))
        added = datetime.fromisoformat(book.added_at)
        assert added.tzinfo is not None
        assert added <= datetime.now(timezone.utc)

    def test_find_books_case_insensitive(self, db, library):
        """Test title search ignores case."""
        library.book("The Left Hand of Darkness")
        assert len(db.find_books("left hand")) == 1
        assert db.find_books("nothing like it") == []


class TestUpdateReadingStatus:
    """Tests for reading log updates."""

    def test_unknown_book(self, db):
        """Test updating a missing book raises."""
        with pytest.raises(BookNotFoundError):
            db.update_reading_status("missing", ReadingStatusUpdate(status=ReadingStatus.READING))

    def test_finish_computes_reading_days(self, db, library):
        """Test reading days come from the start and finish dates."""
        book_id = library.book("Dune", pages=600)

        entry = db.update_reading_status(book_id, ReadingStatusUpdate(
            status=ReadingStatus.FINISHED,
            date_started=date(2024, 3, 1),
            date_finished=date(2024, 3, 8),
            rating=4,
        ))

        assert entry.status == "finished"
        assert entry.date_finished == "2024-03-08"
        assert entry.reading_days == 7
        assert entry.current_page == 600
        assert entry.rating == 4

    def test_finish_without_date_uses_today(self, db, library):
        """Test a missing finish date defaults to today."""
        book_id = library.book("Dune")

        entry = db.update_reading_status(
            book_id,
            ReadingStatusUpdate(status=ReadingStatus.FINISHED),
            today=date(2024, 3, 15),
        )

        assert entry.date_finished == "2024-03-15"

    def test_leaving_finished_clears_date(self, db, library):
        """Test moving away from finished clears the finish date."""
        book_id = library.book("Dune")
        library.finish(book_id, date(2024, 3, 1))

        entry = db.update_reading_status(
            book_id, ReadingStatusUpdate(status=ReadingStatus.DID_NOT_FINISH)
        )

        assert entry.status == "did_not_finish"
        assert entry.date_finished is None
        assert entry.reading_days is None

    def test_get_reading_log(self, db, library):
        """Test reading back the log entry."""
        book_id = library.book("Dune")
        assert db.get_reading_log(book_id) is None

        library.status(book_id, ReadingStatus.ON_HOLD)

        assert db.get_reading_log(book_id).status == "on_hold"


class TestRecordReadingSession:
    """Tests for logging reading sessions."""

    def test_unknown_book(self, db):
        """Test logging against a missing book raises."""
        with pytest.raises(BookNotFoundError):
            db.record_reading_session(ReadingSessionCreate(
                book_id="missing", session_date=date(2024, 3, 1), pages_read=10,
            ))

    def test_first_session_starts_reading(self, db, library):
        """Test the first session creates a reading entry."""
        book_id = library.book("Dune", pages=600)

        result = library.session(book_id, date(2024, 3, 1), pages=50, minutes=40)

        assert result.status == "reading"
        assert result.current_page == 50
        assert not result.book_completed
        entry = db.get_reading_log(book_id)
        assert entry.date_started == "2024-03-01"

    def test_sessions_advance_progress(self, db, library):
        """Test pages accumulate across sessions."""
        book_id = library.book("Dune", pages=600)
        library.session(book_id, date(2024, 3, 1), pages=50)

        result = library.session(book_id, date(2024, 3, 2), pages=70)

        assert result.current_page == 120

    def test_reaching_last_page_finishes(self, db, library):
        """Test a session reaching the page count finishes the book."""
        book_id = library.book("Novella", pages=100)
        library.session(book_id, date(2024, 3, 1), pages=60)

        result = library.session(book_id, date(2024, 3, 4), pages=60)

        assert result.book_completed
        assert result.status == "finished"
        assert result.current_page == 100
        entry = db.get_reading_log(book_id)
        assert entry.date_finished == "2024-03-04"
        assert entry.reading_days == 3

    def test_finished_book_keeps_finish_date(self, db, library):
        """Test rereading sessions leave the original finish date."""
        book_id = library.book("Novella", pages=100)
        library.finish(book_id, date(2024, 2, 1))

        result = library.session(book_id, date(2024, 3, 1), pages=20)

        assert not result.book_completed
        assert db.get_reading_log(book_id).date_finished == "2024-02-01"

    def test_unknown_page_count_never_finishes(self, db, library):
        """Test books without a page count stay in progress."""
        book_id = library.book("Mystery Length")

        result = library.session(book_id, date(2024, 3, 1), pages=5000)

        assert result.status == "reading"
        assert result.current_page == 5000

    def test_want_to_read_moves_to_reading(self, db, library):
        """Test a session on a wishlisted book starts it."""
        book_id = library.book("Wishlist")
        library.status(book_id, ReadingStatus.WANT_TO_READ)

        result = library.session(book_id, date(2024, 3, 1), pages=10)

        assert result.status == "reading"

    def test_page_range(self, db, library):
        """Test pages are derived from a page range."""
        book_id = library.book("Dune", pages=600)

        result = db.record_reading_session(ReadingSessionCreate(
            book_id=book_id,
            session_date=date(2024, 3, 1),
            start_page=10,
            end_page=45,
        ))

        assert result.session.pages_read == 35
        assert result.current_page == 35

    def test_delete_session(self, db, library):
        """Test deleting a session."""
        book_id = library.book("Dune", pages=600)
        result = library.session(book_id, date(2024, 3, 1), pages=10)

        assert db.delete_reading_session(result.session.id)
        assert not db.delete_reading_session(result.session.id)


class TestExternalRating:
    """Tests for stored external rating info."""

    def test_upsert(self, db, library):
        """Test inserting then replacing rating info."""
        book_id = library.book("Dune")

        db.upsert_external_rating(book_id, ExternalRatingCreate(average_rating=4.2))
        info = db.upsert_external_rating(
            book_id, ExternalRatingCreate(average_rating=4.3, ratings_count=900)
        )

        assert info.average_rating == 4.3
        assert info.ratings_count == 900

    def test_unknown_book(self, db):
        """Test rating info needs an existing book."""
        with pytest.raises(BookNotFoundError):
            db.upsert_external_rating("missing", ExternalRatingCreate(average_rating=4.0))


class TestReadingGoals:
    """Tests for yearly reading goals."""

    def test_set_and_get(self, db):
        """Test storing a goal for a year."""
        assert db.get_reading_goal(2024) is None

        db.set_reading_goal(ReadingGoalSet(year=2024, target_books=30, target_pages=9000))

        goal = db.get_reading_goal(2024)
        assert goal.target_books == 30
        assert goal.target_pages == 9000

    def test_replace_goal(self, db):
        """Test setting a goal again replaces the targets."""
        db.set_reading_goal(ReadingGoalSet(year=2024, target_books=30, target_pages=9000))

        goal = db.set_reading_goal(ReadingGoalSet(year=2024, target_books=40))

        assert goal.target_books == 40
        assert goal.target_pages is None
        assert db.get_reading_goal(2023) is None
