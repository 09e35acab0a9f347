"""Best/worst response-time aggregation over an ordered result set."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class AggregateResult:
    """Worst-slice and best-slice mean of one result set."""

    worst: float
    best: float


class ResponseTimeAggregator:
    """Split an ordered latency sequence at a percentile and average each side.

    The first ``split_index + 1`` values form the worst slice, the rest form
    the best slice. Ordering is whatever the search backend returned; the
    aggregator never re-sorts.
    """

    @staticmethod
    def split_index(count: int, percentage: float) -> int:
        """Return the last index of the worst slice for ``count`` values.

        Raises:
            ValueError: If percentage is not in (0, 100].
        """
        if not 0 < percentage <= 100:
            raise ValueError(
                f"percentage must be in (0, 100], got {percentage}"
            )
        limit = math.floor(((count * percentage) - 0.1) / 100.0)
        return min(max(limit, 0), max(count - 1, 0))

    @staticmethod
    def _mean(values: Sequence[float]) -> float:
        # An empty slice (best side at percentage=100) averages to 0.0.
        if not values:
            return 0.0
        return float(sum(values)) / len(values)

    @staticmethod
    def aggregate(
        results: Sequence[float], percentage: float,
    ) -> AggregateResult:
        """Compute worst and best response times.

        Args:
            results: Latency values in backend order.
            percentage: Share of the results, in (0, 100], that forms the
                worst slice.

        Returns:
            ``AggregateResult(0.0, 0.0)`` for no results, ``(v, v)`` for a
            single result, otherwise the two slice means.
        """
        count = len(results)
        limit = ResponseTimeAggregator.split_index(count, percentage)
        if count == 0:
            return AggregateResult(worst=0.0, best=0.0)
        if count == 1:
            value = float(results[0])
            return AggregateResult(worst=value, best=value)
        return AggregateResult(
            worst=ResponseTimeAggregator._mean(results[: limit + 1]),
            best=ResponseTimeAggregator._mean(results[limit + 1:]),
        )
