"""Pydantic schemas for reading streaks."""

from pydantic import BaseModel, Field


class StreakSummary(BaseModel):
    """Current and best reading streaks."""

    current_streak: int = Field(0, ge=0)
    best_streak: int = Field(0, ge=0)
    total_active_days: int = Field(0, ge=0)
