"""Tests for the event filter endpoints."""

from __future__ import annotations

import httpx
import pytest

from resptime_filter.clients.elasticsearch_client import SearchError
from tests.conftest import StubSearchClient


@pytest.mark.asyncio
async def test_filter_single_event(
    client: httpx.AsyncClient, stub_backend: StubSearchClient,
) -> None:
    """POST /api/filter returns the event with both summary fields."""
    resp = await client.post("/api/filter", json={"opid": "abc", "type": "end"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["opid"] == "abc"
    assert data["worst_response_time"] == 100.0
    assert data["best_response_time"] == 10.0
    assert stub_backend.calls[0]["query"] == "operation:abc"
    assert stub_backend.calls[0]["sort"] == "@timestamp:desc"


@pytest.mark.asyncio
async def test_filter_batch(
    client: httpx.AsyncClient, stub_backend: StubSearchClient,
) -> None:
    """POST /api/filter/batch filters each event in order."""
    resp = await client.post(
        "/api/filter/batch", json=[{"opid": "1"}, {"opid": "2"}],
    )
    assert resp.status_code == 200
    data = resp.json()
    assert [item["opid"] for item in data] == ["1", "2"]
    assert all("best_response_time" in item for item in data)
    assert [call["query"] for call in stub_backend.calls] == [
        "operation:1", "operation:2",
    ]


@pytest.mark.asyncio
async def test_filter_backend_failure_passes_through(
    client: httpx.AsyncClient, stub_backend: StubSearchClient,
) -> None:
    """A backend failure still answers 200 with the event unchanged."""
    stub_backend.error = SearchError("cluster red")
    resp = await client.post("/api/filter", json={"opid": "abc"})
    assert resp.status_code == 200
    assert resp.json() == {"opid": "abc"}


@pytest.mark.asyncio
async def test_filter_rejects_non_object(client: httpx.AsyncClient) -> None:
    """A body that is not a JSON object is a 400."""
    resp = await client.post("/api/filter", json=["not", "an", "event"])
    assert resp.status_code == 400
