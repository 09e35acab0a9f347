"""Filter resource — protocol-agnostic event filtering."""

from __future__ import annotations

from typing import Any

from resptime_filter.models.event import Event
from resptime_filter.plugins.contracts.filter import FilterPlugin


class FilterResource:
    """Runs raw event objects through the configured filter plugin.

    Built once at startup with the plugin pre-wired.
    """

    def __init__(self, *, filter_plugin: FilterPlugin) -> None:
        self._plugin = filter_plugin

    async def filter_event(self, data: dict[str, Any]) -> dict[str, Any]:
        """Filter one event and return its resulting fields."""
        event = await self._plugin.handle(Event(data))
        return event.to_dict()

    async def filter_events(
        self, data: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Filter a batch of events in order."""
        events = await self._plugin.handle_batch([Event(item) for item in data])
        return [event.to_dict() for event in events]
