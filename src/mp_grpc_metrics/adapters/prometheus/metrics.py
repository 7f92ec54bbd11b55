"""Prometheus adapter – PrometheusMetrics."""
from __future__ import annotations

import threading
from typing import Any, Sequence

import prometheus_client
from prometheus_client import CollectorRegistry

from mp_grpc_metrics.kernel.errors import MetricRegistrationError
from mp_grpc_metrics.observability.logging import get_logger
from mp_grpc_metrics.observability.metrics import Counter, Histogram, Metrics

logger = get_logger(__name__)


class _PrometheusCounter(Counter):
    def __init__(self, counter: prometheus_client.Counter) -> None:
        self._c = counter

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        if labels:
            self._c.labels(**labels).inc(value)
        else:
            self._c.inc(value)


class _PrometheusHistogram(Histogram):
    def __init__(self, hist: prometheus_client.Histogram) -> None:
        self._h = hist

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        if labels:
            self._h.labels(**labels).observe(value)
        else:
            self._h.observe(value)


class PrometheusMetrics(Metrics):
    """Publish into a :class:`prometheus_client.CollectorRegistry`.

    Asking twice for the same name returns the instrument created the first
    time; a name already taken in *registry* by someone else raises
    :class:`MetricRegistrationError`.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry if registry is not None else prometheus_client.REGISTRY
        self._lock = threading.Lock()
        self._instruments: dict[str, Any] = {}

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    def counter(
        self,
        name: str,
        description: str = "",
        unit: str = "",
        labelnames: Sequence[str] = (),
    ) -> Counter:
        with self._lock:
            existing = self._instruments.get(name)
            if existing is None:
                collector = self._register(
                    name,
                    lambda: prometheus_client.Counter(
                        name, description or name, labelnames=tuple(labelnames), registry=self._registry,
                    ),
                )
                existing = self._instruments[name] = _PrometheusCounter(collector)
            return existing

    def histogram(
        self,
        name: str,
        description: str = "",
        unit: str = "s",
        labelnames: Sequence[str] = (),
        boundaries: Sequence[float] | None = None,
    ) -> Histogram:
        with self._lock:
            existing = self._instruments.get(name)
            if existing is None:
                buckets = tuple(boundaries) if boundaries else prometheus_client.Histogram.DEFAULT_BUCKETS
                collector = self._register(
                    name,
                    lambda: prometheus_client.Histogram(
                        name,
                        description or name,
                        labelnames=tuple(labelnames),
                        buckets=buckets,
                        registry=self._registry,
                    ),
                )
                existing = self._instruments[name] = _PrometheusHistogram(collector)
            return existing

    def _register(self, name: str, factory: Any) -> Any:
        try:
            collector = factory()
        except ValueError as exc:
            raise MetricRegistrationError(name, f"Prometheus rejected metric '{name}': {exc}", cause=exc) from exc
        logger.debug("prometheus.metric_registered", metric=name)
        return collector


__all__ = ["PrometheusMetrics"]
