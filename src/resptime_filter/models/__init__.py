"""Pipeline data types."""

from resptime_filter.models.event import Event

__all__ = ["Event"]
