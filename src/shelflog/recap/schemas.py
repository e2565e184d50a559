"""Pydantic schemas for monthly reading recaps."""

from typing import Optional

from pydantic import BaseModel, Field


class TopRatedBook(BaseModel):
    """Highest rated book finished in the month."""

    title: str
    rating: int = Field(..., ge=1, le=5)
    authors: str


class FastestBook(BaseModel):
    """Book finished in the fewest reading days."""

    title: str
    days: int = Field(..., gt=0)


class MonthlyRecap(BaseModel):
    """Summary of the books finished in one calendar month."""

    month: str
    year: int
    books_finished: int = 0
    pages_read: int = 0
    top_genre: Optional[str] = None
    top_rated_book: Optional[TopRatedBook] = None
    fastest_book: Optional[FastestBook] = None
    total_reading_days: int = 0
    favorite_author: Optional[str] = None
