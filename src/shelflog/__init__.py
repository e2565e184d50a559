"""shelflog - a personal reading tracker with activity analytics."""

from .engine import ActivityAnalytics

__version__ = "0.1.0"

__all__ = ["ActivityAnalytics", "__version__"]
