"""Filter plugin contract — extensible per-event processing."""

from __future__ import annotations

from abc import ABC, abstractmethod

from resptime_filter.models.event import Event


class FilterPlugin(ABC):
    """Processes one pipeline event at a time.

    Implementations may enrich the event; they must hand it back even
    when processing fails so the pipeline never drops it.
    """

    @abstractmethod
    async def handle(self, event: Event) -> Event:
        """Process a single event.

        Args:
            event: The inbound event.

        Returns:
            The (possibly enriched) event.
        """

    async def handle_batch(self, events: list[Event]) -> list[Event]:
        """Process events one after another, preserving order."""
        return [await self.handle(event) for event in events]
