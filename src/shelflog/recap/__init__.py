"""Monthly reading recaps."""

from .generator import (
    build_monthly_recap,
    fastest_book,
    favorite_author,
    month_name,
    top_genre,
    top_rated_book,
)
from .schemas import FastestBook, MonthlyRecap, TopRatedBook

__all__ = [
    "build_monthly_recap",
    "fastest_book",
    "favorite_author",
    "month_name",
    "top_genre",
    "top_rated_book",
    "FastestBook",
    "MonthlyRecap",
    "TopRatedBook",
]
