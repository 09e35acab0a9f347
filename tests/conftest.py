"""Shared fixtures for resptime_filter tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest

from resptime_filter.app import create_app
from resptime_filter.clients.elasticsearch_client import (
    ElasticsearchClient,
    SearchResult,
)
from resptime_filter.config import Settings


class StubSearchClient(ElasticsearchClient):
    """Search client that returns a canned result and records its calls."""

    def __init__(
        self,
        result: SearchResult | None = None,
        error: Exception | None = None,
    ) -> None:
        super().__init__(hosts=["http://stub:9200"])
        self.result = result or SearchResult(total=0, hits=[])
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def search(
        self,
        query: str,
        *,
        sort: str | None = None,
        source_filter: str | None = None,
        size: int = 10000,
    ) -> SearchResult:
        self.calls.append({
            "query": query,
            "sort": sort,
            "source_filter": source_filter,
            "size": size,
        })
        if self.error is not None:
            raise self.error
        return self.result


def make_hits(*latencies: float) -> list[dict[str, Any]]:
    """Build hit sources carrying latency.response_transmitted."""
    return [{"latency": {"response_transmitted": value}} for value in latencies]


def make_result(*latencies: float) -> SearchResult:
    """Build a complete SearchResult from latency values."""
    return SearchResult(total=len(latencies), hits=make_hits(*latencies))


@pytest.fixture()
def settings() -> Settings:
    """Test settings pointing at a stub cluster."""
    return Settings(
        hosts=["http://stub:9200"],
        query="operation:%{[opid]}",
        percentage_limit=10,
    )


@pytest.fixture()
def stub_backend() -> StubSearchClient:
    """A stub search backend with ten results, one slow outlier first."""
    return StubSearchClient(make_result(100, 10, 10, 10, 10, 10, 10, 10, 10, 10))


@pytest.fixture()
async def client(
    settings: Settings, stub_backend: StubSearchClient,
) -> AsyncIterator[httpx.AsyncClient]:
    """Async HTTP client wired to the test app with the stub backend."""
    app = create_app(settings, search_client=stub_backend)
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
