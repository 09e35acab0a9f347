"""Health resource — protocol-agnostic health check logic."""

from __future__ import annotations


class HealthResource:
    """Reports liveness and which search hosts the filter was built with."""

    def __init__(self, *, hosts: list[str]) -> None:
        self._hosts = list(hosts)

    def check(self) -> dict[str, object]:
        """Return service status. Does not contact the search hosts."""
        return {"status": "ok", "search_hosts": self._hosts}
