"""Configuration management for shelflog.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path
    db_timeout: float  # seconds

    # Analytics
    activity_window_days: int
    recommendation_limit: int

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "SHELFLOG_DB_PATH",
            str(Path.home() / ".shelflog" / "shelflog.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            db_timeout=float(os.environ.get("SHELFLOG_DB_TIMEOUT", "5.0")),
            activity_window_days=int(
                os.environ.get("SHELFLOG_ACTIVITY_WINDOW_DAYS", "365")
            ),
            recommendation_limit=int(
                os.environ.get("SHELFLOG_RECOMMENDATION_LIMIT", "10")
            ),
            log_level=os.environ.get("SHELFLOG_LOG_LEVEL", "warning").lower(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.activity_window_days < 0:
            errors.append(
                f"Activity window must not be negative: {self.activity_window_days}"
            )
        if self.recommendation_limit < 1:
            errors.append(
                f"Recommendation limit must be positive: {self.recommendation_limit}"
            )
        if self.db_timeout <= 0:
            errors.append(f"Database timeout must be positive: {self.db_timeout}")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")

        # Check database directory is writable
        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
