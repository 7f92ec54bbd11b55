"""Testing fakes – FakeMetricsRegistry."""
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Sequence

from mp_grpc_metrics.observability.metrics.ports import Counter, Histogram, Metrics

_LabelKey = frozenset[tuple[str, str]]


def _key(labels: dict[str, str] | None) -> _LabelKey:
    return frozenset((labels or {}).items())


class _FakeCounter(Counter):
    """In-memory counter keyed by label set."""

    def __init__(self, name: str, labelnames: Sequence[str]) -> None:
        self.name = name
        self.labelnames = tuple(labelnames)
        self._lock = threading.Lock()
        self._values: dict[_LabelKey, float] = defaultdict(float)

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        with self._lock:
            self._values[_key(labels)] += value

    def value(self, **labels: str) -> float:
        with self._lock:
            return self._values.get(_key(labels), 0.0)

    @property
    def total(self) -> float:
        with self._lock:
            return sum(self._values.values())


class _FakeHistogram(Histogram):
    """In-memory histogram that keeps every observation per label set."""

    def __init__(self, name: str, labelnames: Sequence[str], boundaries: Sequence[float] | None) -> None:
        self.name = name
        self.labelnames = tuple(labelnames)
        self.boundaries = tuple(boundaries) if boundaries else ()
        self._lock = threading.Lock()
        self._observations: dict[_LabelKey, list[float]] = defaultdict(list)

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        with self._lock:
            self._observations[_key(labels)].append(value)

    def values(self, **labels: str) -> list[float]:
        with self._lock:
            return list(self._observations.get(_key(labels), []))

    def count(self, **labels: str) -> int:
        return len(self.values(**labels))


class FakeMetricsRegistry(Metrics):
    """In-memory :class:`Metrics` double that records every labeled update.

    Usage::

        registry = FakeMetricsRegistry()
        metrics = ClientMetrics(registry)
        ...
        registry.assert_counter_value(
            "grpc_client_started_total", 1,
            grpc_type="unary", grpc_service="pkg.Svc", grpc_method="Ping",
        )
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counters: dict[str, _FakeCounter] = {}
        self._histograms: dict[str, _FakeHistogram] = {}

    # ------------------------------------------------------------------
    # Metrics protocol
    # ------------------------------------------------------------------

    def counter(
        self,
        name: str,
        description: str = "",
        unit: str = "",
        labelnames: Sequence[str] = (),
    ) -> _FakeCounter:
        with self._lock:
            if name not in self._counters:
                self._counters[name] = _FakeCounter(name, labelnames)
            return self._counters[name]

    def histogram(
        self,
        name: str,
        description: str = "",
        unit: str = "s",
        labelnames: Sequence[str] = (),
        boundaries: Sequence[float] | None = None,
    ) -> _FakeHistogram:
        with self._lock:
            if name not in self._histograms:
                self._histograms[name] = _FakeHistogram(name, labelnames, boundaries)
            return self._histograms[name]

    # ------------------------------------------------------------------
    # Inspection / assertion helpers
    # ------------------------------------------------------------------

    def has_histogram(self, name: str) -> bool:
        return name in self._histograms

    def counter_value(self, name: str, **labels: str) -> float:
        counter = self._counters.get(name)
        return counter.value(**labels) if counter is not None else 0.0

    def histogram_count(self, name: str, **labels: str) -> int:
        histogram = self._histograms.get(name)
        return histogram.count(**labels) if histogram is not None else 0

    def histogram_values(self, name: str, **labels: str) -> list[float]:
        histogram = self._histograms.get(name)
        return histogram.values(**labels) if histogram is not None else []

    def assert_counter_value(self, name: str, expected: float, **labels: str) -> None:
        """Assert the counter *name* holds *expected* for exactly *labels*."""
        assert name in self._counters, f"Counter '{name}' was never created"
        actual = self.counter_value(name, **labels)
        assert actual == expected, (
            f"Counter '{name}'{labels} is {actual}, expected {expected}"
        )

    def reset(self) -> None:
        """Zero every recorded value, keeping the instruments themselves."""
        with self._lock:
            for counter in self._counters.values():
                with counter._lock:
                    counter._values.clear()
            for histogram in self._histograms.values():
                with histogram._lock:
                    histogram._observations.clear()


__all__ = ["FakeMetricsRegistry"]
