"""Response-time filter — look up matching records, attach best/worst latency."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from resptime_filter.clients.elasticsearch_client import (
    ElasticsearchClient,
    SearchError,
)
from resptime_filter.models.event import Event
from resptime_filter.plugins.contracts.filter import FilterPlugin
from resptime_filter.services.aggregator import ResponseTimeAggregator
from resptime_filter.utils.field_path import FieldPath, MissingFieldError

logger = logging.getLogger("resptime_filter.plugins.response_time")


class TruncatedResultError(SearchError):
    """Raised when fewer hits came back than the search declared."""


@dataclass
class FilterOptions:
    """Per-instance filter configuration. Immutable after startup."""

    query: str
    sort: str | None = "@timestamp:desc"
    source_filter: str | None = None
    percentage_limit: float = 5
    best_response_time_field_name: str = "best_response_time"
    worst_response_time_field_name: str = "worst_response_time"
    latency_field: str = "latency.response_transmitted"
    result_size: int = 10000
    tags: list[str] = field(default_factory=list)
    add_tag: list[str] = field(default_factory=list)
    add_field: dict[str, str] = field(default_factory=dict)
    remove_field: list[str] = field(default_factory=list)
    remove_tag: list[str] = field(default_factory=list)


class ResponseTimeFilter(FilterPlugin):
    """Attach best and worst response times computed from a search.

    Any fault, retrieval or otherwise, is logged and the event is returned
    without summary fields.
    """

    def __init__(
        self, client: ElasticsearchClient, options: FilterOptions,
    ) -> None:
        self._client = client
        self._options = options
        self._latency = FieldPath(options.latency_field)
        ResponseTimeFilter._check_references(options)
        # Fail at startup rather than on the first event.
        ResponseTimeAggregator.split_index(1, options.percentage_limit)

    @property
    def options(self) -> FilterOptions:
        return self._options

    @property
    def search_hosts(self) -> list[str]:
        return self._client.hosts

    def should_filter(self, event: Event) -> bool:
        """True if the event carries every configured condition tag."""
        tags = event.tags
        return all(tag in tags for tag in self._options.tags)

    def _latencies(self, hits: list[dict[str, object]]) -> list[float]:
        return [self._latency.get_number(hit) for hit in hits]

    @staticmethod
    def _check_references(options: FilterOptions) -> None:
        """Reject output field references that can never be written.

        References containing ``%{}`` are only checked once rendered.

        Raises:
            ValueError: If a reference is empty or malformed.
        """
        references = [
            options.worst_response_time_field_name,
            options.best_response_time_field_name,
            *options.add_field,
            *options.remove_field,
        ]
        for reference in references:
            if "%{" not in reference:
                Event.reference_parts(reference)

    def _filter_matched(self, event: Event) -> None:
        options = self._options
        for name, value in options.add_field.items():
            event.set(event.sprintf(name), event.sprintf(value))
        for tag in options.add_tag:
            event.add_tag(event.sprintf(tag))
        for name in options.remove_field:
            event.remove(event.sprintf(name))
        for tag in options.remove_tag:
            event.remove_tag(event.sprintf(tag))

    async def handle(self, event: Event) -> Event:
        """Query, aggregate, and return the decorated event.

        All writes go to a copy, so a fault at any step hands back the
        original event with no summary fields at all.
        """
        if not self.should_filter(event):
            return event

        options = self._options
        query = event.sprintf(options.query)
        source_filter = (
            event.sprintf(options.source_filter) if options.source_filter else None
        )
        try:
            result = await self._client.search(
                query,
                sort=options.sort,
                source_filter=source_filter,
                size=options.result_size,
            )
            if not result.exact:
                raise TruncatedResultError(
                    f"Search reported only a lower bound of {result.total} hits"
                )
            if len(result.hits) < result.total:
                raise TruncatedResultError(
                    f"Got {len(result.hits)} of {result.total} hits; "
                    f"raise result_size above {options.result_size}"
                )
            latencies = self._latencies(result.hits[: result.total])
            summary = ResponseTimeAggregator.aggregate(
                latencies, options.percentage_limit,
            )
            enriched = event.copy()
            enriched.set(options.worst_response_time_field_name, summary.worst)
            enriched.set(options.best_response_time_field_name, summary.best)
            self._filter_matched(enriched)
        except (SearchError, MissingFieldError, ValueError) as error:
            logger.warning(
                "Failed to query elasticsearch for response times: query=%r error=%s",
                query, error,
            )
            return event
        except Exception:
            logger.exception(
                "Unexpected error computing response times: query=%r", query,
            )
            return event

        logger.debug(
            "Aggregated %d hits for query=%r: worst=%s best=%s",
            result.total, query, summary.worst, summary.best,
        )
        return enriched
