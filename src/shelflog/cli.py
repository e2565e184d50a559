"""Command-line interface for shelflog.

Built with Typer for commands and Rich for output and log rendering.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .config import LOG_LEVELS, get_config
from .db import get_db, reset_db
from .db.models import Book
from .db.schemas import (
    BookCreate,
    ExternalRatingCreate,
    ReadingGoalSet,
    ReadingSessionCreate,
    ReadingStatus,
    ReadingStatusUpdate,
)
from .db.sqlite import Database
from .engine import ActivityAnalytics
from .errors import ShelflogError

# Create the main app
app = typer.Typer(
    name="shelflog",
    help="Track your reading and see streaks, recaps and what to read next.",
    no_args_is_help=True,
)

# Create sub-apps for command groups
book_app = typer.Typer(help="Manage books in your library.")
app.add_typer(book_app, name="book")
session_app = typer.Typer(help="Log and remove reading sessions.")
app.add_typer(session_app, name="session")
status_app = typer.Typer(help="Change a book's reading status.")
app.add_typer(status_app, name="status")
rating_app = typer.Typer(help="Store external rating info for a book.")
app.add_typer(rating_app, name="rating")
goal_app = typer.Typer(help="Set and track yearly reading goals.")
app.add_typer(goal_app, name="goal")

# Rich console for pretty output
console = Console()

logger = logging.getLogger(__name__)


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def setup_logging(level: str) -> None:
    """Route log records through Rich at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def resolve_book(db: Database, ref: str) -> Book:
    """Find a book by ID or by a unique title fragment."""
    try:
        book = db.get_book(ref)
        matches = [] if book else db.find_books(ref)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)
    if book:
        return book

    if not matches:
        print_error(f"No book found matching: {ref}")
        raise typer.Exit(1)
    exact = [b for b in matches if b.title.lower() == ref.lower()]
    if len(exact) == 1:
        return exact[0]
    if len(matches) > 1:
        print_error(f"'{ref}' matches {len(matches)} books, use the book ID:")
        for match in matches:
            console.print(f"  [cyan]{match.id}[/cyan]  {match.title}")
        raise typer.Exit(1)
    return matches[0]


def stars(rating: Optional[int]) -> str:
    return "★" * rating + "☆" * (5 - rating) if rating else "-"


# ============================================================================
# Global Options
# ============================================================================


@app.callback()
def main(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(
        None, "--db", help="Database file (default: SHELFLOG_DB_PATH)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help=f"One of: {', '.join(LOG_LEVELS)}"
    ),
) -> None:
    """Configure logging and the database before running a command."""
    config = get_config()
    level = (log_level or config.log_level).lower()
    if level not in LOG_LEVELS:
        print_error(f"Invalid log level: {level}. Use: {', '.join(LOG_LEVELS)}")
        raise typer.Exit(1)
    setup_logging(level)

    if ctx.invoked_subcommand == "version":
        return

    try:
        if db_path is not None:
            reset_db()
            get_db(str(db_path))
        else:
            get_db()
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)


# ============================================================================
# Book Commands
# ============================================================================


@book_app.command("add")
def book_add(
    title: str = typer.Argument(..., help="Book title"),
    author: Optional[list[str]] = typer.Option(None, "--author", "-a", help="Author (repeatable)"),
    genre: Optional[list[str]] = typer.Option(None, "--genre", "-g", help="Genre (repeatable)"),
    pages: Optional[int] = typer.Option(None, "--pages", "-p", help="Page count"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Publication year"),
    isbn: Optional[str] = typer.Option(None, "--isbn", "-i", help="ISBN"),
) -> None:
    """Add a book to your library."""
    try:
        data = BookCreate(
            title=title,
            authors=author or [],
            genres=genre or [],
            pages=pages,
            year=year,
            isbn=isbn,
        )
        book = get_db().create_book(data)
    except ValidationError as e:
        print_error(f"Invalid book data: {e}")
        raise typer.Exit(1)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Added: {book.title}")
    print_info(f"ID: {book.id}")


# ============================================================================
# Session Commands
# ============================================================================


@session_app.command("log")
def session_log(
    book: str = typer.Argument(..., help="Book ID or title"),
    pages: Optional[int] = typer.Option(None, "--pages", "-p", help="Pages read"),
    minutes: Optional[int] = typer.Option(None, "--minutes", "-m", help="Minutes read"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Session date YYYY-MM-DD (default: today)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Session notes"),
) -> None:
    """Log a reading session and update the book's progress."""
    db = get_db()
    target = resolve_book(db, book)

    try:
        data = ReadingSessionCreate(
            book_id=target.id,
            session_date=on or date.today(),
            pages_read=pages,
            minutes_read=minutes,
            notes=notes,
        )
        result = db.record_reading_session(data)
    except ValidationError as e:
        print_error(f"Invalid session: {e}")
        raise typer.Exit(1)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Logged session for {result.book_title} on {data.session_date}")
    print_info(f"Session ID: {result.session.id}")
    if result.book_completed:
        console.print(f"[bold magenta]Finished {result.book_title}![/bold magenta]")
    else:
        print_info(f"Now on page {result.current_page} ({result.status})")


@session_app.command("delete")
def session_delete(
    session_id: str = typer.Argument(..., help="Session ID"),
) -> None:
    """Delete a reading session."""
    try:
        deleted = get_db().delete_reading_session(session_id)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not deleted:
        print_error(f"Session not found: {session_id}")
        raise typer.Exit(1)
    print_success("Session deleted")


# ============================================================================
# Status & Rating Commands
# ============================================================================


@status_app.command("set")
def status_set(
    book: str = typer.Argument(..., help="Book ID or title"),
    status: ReadingStatus = typer.Argument(..., help="New reading status"),
    rating: Optional[int] = typer.Option(None, "--rating", "-r", help="Your rating 1-5"),
    started: Optional[str] = typer.Option(None, "--started", help="Date started YYYY-MM-DD"),
    finished: Optional[str] = typer.Option(None, "--finished", help="Date finished YYYY-MM-DD"),
) -> None:
    """Set a book's reading status."""
    db = get_db()
    target = resolve_book(db, book)

    try:
        update = ReadingStatusUpdate(
            status=status,
            rating=rating,
            date_started=started,
            date_finished=finished,
        )
        entry = db.update_reading_status(target.id, update)
    except ValidationError as e:
        print_error(f"Invalid status update: {e}")
        raise typer.Exit(1)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    message = f"{target.title}: {entry.status}"
    if entry.date_finished:
        message += f" on {entry.date_finished}"
    print_success(message)


@rating_app.command("set")
def rating_set(
    book: str = typer.Argument(..., help="Book ID or title"),
    average: Optional[float] = typer.Option(None, "--average", "-a", help="Average rating 0-5"),
    count: Optional[int] = typer.Option(None, "--count", "-c", help="Number of ratings"),
    description: Optional[str] = typer.Option(None, "--description", help="Book description"),
) -> None:
    """Store rating info fetched from an external book site."""
    db = get_db()
    target = resolve_book(db, book)

    try:
        db.upsert_external_rating(
            target.id,
            ExternalRatingCreate(
                average_rating=average,
                ratings_count=count,
                description=description,
            ),
        )
    except ValidationError as e:
        print_error(f"Invalid rating info: {e}")
        raise typer.Exit(1)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Rating info saved for {target.title}")


# ============================================================================
# Goal Commands
# ============================================================================


@goal_app.command("set")
def goal_set(
    books: int = typer.Argument(..., help="Books to finish"),
    pages: Optional[int] = typer.Option(None, "--pages", "-p", help="Pages to read"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Goal year (default: this year)"),
) -> None:
    """Set the reading goal for a year."""
    try:
        goal = get_db().set_reading_goal(ReadingGoalSet(
            year=year or date.today().year,
            target_books=books,
            target_pages=pages,
        ))
    except ValidationError as e:
        print_error(f"Invalid goal: {e}")
        raise typer.Exit(1)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    message = f"{goal.year} goal: {goal.target_books} books"
    if goal.target_pages:
        message += f", {goal.target_pages:,} pages"
    print_success(message)


@goal_app.command("show")
def goal_show(
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Goal year (default: this year)"),
) -> None:
    """Show progress toward a year's reading goal."""
    analytics = ActivityAnalytics(get_db())
    try:
        progress = analytics.compute_goal_progress(year)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    filled = int(progress.progress_percent // 5)
    bar = "█" * filled + "░" * (20 - filled)
    lines = [
        f"📚 Books: [bold]{progress.current_books}[/bold] / {progress.target_books}",
        f"[green]{bar}[/green] {progress.progress_percent:.1f}%",
    ]
    if progress.target_pages:
        lines.append(
            f"📄 Pages: [bold]{progress.current_pages:,}[/bold] / {progress.target_pages:,} "
            f"({progress.pages_percent:.1f}%)"
        )
    else:
        lines.append(f"📄 Pages: [bold]{progress.current_pages:,}[/bold]")
    if progress.is_complete:
        lines.append("[bold green]Goal complete![/bold green]")
    else:
        lines.append(f"{progress.remaining_books} books to go")

    console.print(Panel(
        "\n".join(lines),
        title=f"{progress.year} Reading Goal",
        border_style="magenta",
    ))
    if progress.is_default:
        print_info("No goal set for this year, showing the default of 52 books.")


# ============================================================================
# Report Commands
# ============================================================================


@app.command()
def activity(
    days: Optional[int] = typer.Option(None, "--days", "-d", help="Days to look back"),
) -> None:
    """Show daily reading activity."""
    analytics = ActivityAnalytics(get_db())
    try:
        series = analytics.compute_daily_activity(window_days=days)
    except (ShelflogError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not series:
        print_info("No reading activity in this period.")
        return

    table = Table(title="Daily Activity", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Pages", justify="right")
    table.add_column("Minutes", justify="right")
    table.add_column("Events", justify="right")

    for day in series:
        table.add_row(
            day.date.isoformat(),
            str(day.pages_read),
            str(day.minutes_read),
            str(day.session_count),
        )

    console.print(table)
    total_pages = sum(d.pages_read for d in series)
    total_minutes = sum(d.minutes_read for d in series)
    console.print(
        f"\n[bold]{len(series)}[/bold] active days, "
        f"[bold]{total_pages:,}[/bold] pages, [bold]{total_minutes:,}[/bold] minutes"
    )


@app.command()
def streaks() -> None:
    """Show current and best reading streaks."""
    analytics = ActivityAnalytics(get_db())
    try:
        summary = analytics.compute_streaks()
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if summary.total_active_days == 0:
        print_info("No reading activity recorded yet.")
        return

    fire = "🔥" if summary.current_streak > 0 else "💤"
    console.print(Panel(
        f"{fire} Current streak: [bold green]{summary.current_streak}[/bold green] days\n"
        f"🏆 Best streak: [bold yellow]{summary.best_streak}[/bold yellow] days\n"
        f"📅 Active days: [bold]{summary.total_active_days}[/bold]",
        title="Reading Streaks",
        border_style="magenta",
    ))


@app.command()
def recommend(
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Max books to show"),
) -> None:
    """Show what to read next."""
    analytics = ActivityAnalytics(get_db())
    try:
        recommendations = analytics.compute_recommendations(limit=limit)
    except (ShelflogError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not recommendations:
        print_info("No recommendations yet. Add unread books to your library.")
        return

    table = Table(title="What to Read Next", show_header=True, header_style="bold magenta")
    table.add_column("#", style="cyan", width=3)
    table.add_column("Title", no_wrap=False, max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Rating", justify="center")
    table.add_column("Pages", justify="right")
    table.add_column("Score", justify="right", style="yellow")

    for i, rec in enumerate(recommendations, 1):
        book = rec.book
        title = f"{book.title} [bold](reading)[/bold]" if rec.in_progress else book.title
        average = book.rating_info.average_rating
        table.add_row(
            str(i),
            title,
            ", ".join(book.authors) or "-",
            f"{average:.2f}" if average is not None else "-",
            str(book.pages) if book.pages else "-",
            f"{rec.score:.1f}",
        )

    console.print(table)


@app.command()
def recap(
    year: int = typer.Argument(..., help="Year"),
    month: int = typer.Argument(..., help="Month (1-12)"),
) -> None:
    """Show a monthly reading recap."""
    analytics = ActivityAnalytics(get_db())
    try:
        summary = analytics.compute_monthly_recap(year, month)
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    console.print(Panel(f"[bold]📚 {summary.month} {summary.year} Recap[/bold]", style="magenta"))

    if summary.books_finished == 0:
        print_info(f"No books finished in {summary.month} {summary.year}.")
        return

    overview = Table(show_header=False)
    overview.add_column("Metric", style="cyan")
    overview.add_column("Value", style="green", justify="right")

    overview.add_row("Books Finished", str(summary.books_finished))
    overview.add_row("Pages Read", f"{summary.pages_read:,}")
    overview.add_row("Reading Days", str(summary.total_reading_days))
    overview.add_row("Top Genre", summary.top_genre or "-")
    overview.add_row("Favorite Author", summary.favorite_author or "-")
    console.print(overview)

    if summary.top_rated_book:
        top = summary.top_rated_book
        console.print(
            f"\n[bold]⭐ Top Rated:[/bold] {top.title} by {top.authors} {stars(top.rating)}"
        )
    if summary.fastest_book:
        fastest = summary.fastest_book
        console.print(f"[bold]⚡ Fastest Read:[/bold] {fastest.title} ({fastest.days} days)")


@app.command()
def completion() -> None:
    """Show how much of your library you have read."""
    analytics = ActivityAnalytics(get_db())
    try:
        result = analytics.compute_library_completion()
    except ShelflogError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if result.total_books == 0:
        print_info("Your library is empty.")
        return

    console.print(
        f"Read [bold green]{result.books_read}[/bold green] of "
        f"[bold]{result.total_books}[/bold] books ({result.percentage}%)"
    )
    if result.estimated_completion_months is not None:
        console.print(
            f"At your current pace you will finish the library in "
            f"[bold]{result.estimated_completion_months}[/bold] months"
        )


@app.command()
def history(
    months: int = typer.Option(12, "--months", "-m", help="Months to look back"),
) -> None:
    """Show books and pages finished per day."""
    analytics = ActivityAnalytics(get_db())
    try:
        points = analytics.compute_reading_history(months=months)
    except (ShelflogError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not points:
        print_info(f"No books finished in the last {months} months.")
        return

    table = Table(title="Reading History", show_header=True, header_style="bold magenta")
    table.add_column("Date", style="cyan")
    table.add_column("Books", justify="right")
    table.add_column("Pages", justify="right")

    for point in points:
        table.add_row(point.date.isoformat(), str(point.books_read), f"{point.pages_read:,}")

    console.print(table)
    console.print(
        f"\n[bold]{sum(p.books_read for p in points)}[/bold] books, "
        f"[bold]{sum(p.pages_read for p in points):,}[/bold] pages"
    )


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"shelflog version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


if __name__ == "__main__":
    app()
