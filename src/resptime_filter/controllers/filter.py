"""Filter controller — thin HTTP adapter over FilterResource."""

from __future__ import annotations

from typing import Any

from litestar import Controller, post

from resptime_filter.resources.filter import FilterResource


class FilterController(Controller):
    """HTTP adapter for event filtering."""

    path = "/api/filter"

    @post("/", status_code=200)
    async def filter_event(
        self, data: dict[str, Any], filter_resource: FilterResource,
    ) -> dict[str, Any]:
        """Filter a single event."""
        return await filter_resource.filter_event(data)

    @post("/batch", status_code=200)
    async def filter_batch(
        self, data: list[dict[str, Any]], filter_resource: FilterResource,
    ) -> list[dict[str, Any]]:
        """Filter a list of events, preserving order."""
        return await filter_resource.filter_events(data)
