"""Elasticsearch search client — constructed once at startup with all config."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger("resptime_filter.clients.elasticsearch")


class SearchError(Exception):
    """Raised when a search cannot be completed or its response is unusable."""


@dataclass
class SearchResult:
    """Declared hit total plus the ``_source`` of each returned hit, in order."""

    total: int
    hits: list[dict[str, Any]] = field(default_factory=list)
    # False when the backend only reports a lower bound for the total.
    exact: bool = True


class ElasticsearchClient:
    """URI-search client. Built once at startup, reused for every event.

    Hosts are tried in order; a transport failure on one host moves on to
    the next. An HTTP error response is final.
    """

    def __init__(
        self,
        *,
        hosts: list[str],
        index: str | None = None,
        user: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
    ) -> None:
        if not hosts:
            raise ValueError("At least one Elasticsearch host is required")
        self._hosts = [ElasticsearchClient._normalize_host(h) for h in hosts]
        self._index = index
        self._auth = (user, password or "") if user else None
        self._timeout = timeout

    @staticmethod
    def _normalize_host(host: str) -> str:
        """Add a default scheme and drop any trailing slash.

        Raises:
            ValueError: If the host does not form a valid URL.
        """
        host = host.strip().rstrip("/")
        if "://" not in host:
            host = f"http://{host}"
        try:
            url = httpx.URL(host)
        except httpx.InvalidURL as error:
            raise ValueError(f"Invalid Elasticsearch host {host!r}: {error}") from error
        if not url.host:
            raise ValueError(f"Invalid Elasticsearch host {host!r}: no hostname")
        return host

    @property
    def hosts(self) -> list[str]:
        return list(self._hosts)

    def search_url(self, host: str) -> str:
        """Build the _search endpoint URL for one host."""
        if self._index:
            return f"{host}/{self._index}/_search"
        return f"{host}/_search"

    @staticmethod
    def _parse(body: Any) -> SearchResult:
        """Extract total and hit sources from a search response body.

        Raises:
            SearchError: If the body does not look like a search response.
        """
        if not isinstance(body, dict) or not isinstance(body.get("hits"), dict):
            raise SearchError("Malformed search response: no hits object")
        hits = body["hits"]
        total = hits.get("total")
        exact = True
        # 7.x and later wrap the count as {"value": n, "relation": "eq"}.
        if isinstance(total, dict):
            exact = total.get("relation", "eq") == "eq"
            total = total.get("value")
        if isinstance(total, bool) or not isinstance(total, int):
            raise SearchError(f"Malformed search response: total={total!r}")
        raw_hits = hits.get("hits", [])
        if not isinstance(raw_hits, list):
            raise SearchError("Malformed search response: hits is not a list")
        sources = [
            hit.get("_source", {}) if isinstance(hit, dict) else {}
            for hit in raw_hits
        ]
        return SearchResult(total=total, hits=sources, exact=exact)

    async def search(
        self,
        query: str,
        *,
        sort: str | None = None,
        source_filter: str | None = None,
        size: int = 10000,
    ) -> SearchResult:
        """Run a query-string search.

        Raises:
            SearchError: On an error response, a failed request, an unparseable
                body, or when every host is unreachable.
        """
        params: dict[str, str | int] = {"q": query, "size": size}
        if sort:
            params["sort"] = sort
        if source_filter:
            params["_source"] = source_filter

        last_error: Exception | None = None
        async with httpx.AsyncClient(
            timeout=self._timeout, auth=self._auth,
        ) as http_client:
            for host in self._hosts:
                url = self.search_url(host)
                try:
                    response = await http_client.get(url, params=params)
                except httpx.TransportError as error:
                    logger.warning("Elasticsearch host %s unreachable: %s", host, error)
                    last_error = error
                    continue
                except (httpx.HTTPError, httpx.InvalidURL) as error:
                    raise SearchError(f"Search request to {host} failed: {error}") from error
                if response.status_code != 200:
                    raise SearchError(
                        f"Elasticsearch search failed ({response.status_code}): "
                        f"{response.text}"
                    )
                try:
                    body = response.json()
                except ValueError as error:
                    raise SearchError(f"Invalid JSON from {host}: {error}") from error
                return ElasticsearchClient._parse(body)

        raise SearchError(f"All Elasticsearch hosts failed: {last_error}")
