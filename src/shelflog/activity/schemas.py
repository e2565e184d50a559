"""Pydantic schemas for daily reading activity."""

from datetime import date

from pydantic import BaseModel, Field


class DailyActivity(BaseModel):
    """Reading activity on one calendar date."""

    date: date
    pages_read: int = Field(0, ge=0)
    minutes_read: int = Field(0, ge=0)
    session_count: int = Field(0, ge=0)
