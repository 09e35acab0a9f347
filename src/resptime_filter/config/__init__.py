"""Configuration package — re-exports for convenience."""

from resptime_filter.config.loader import ConfigLoader
from resptime_filter.config.settings import Settings

__all__ = ["ConfigLoader", "Settings"]
