"""OpenTelemetry adapter – OtelMetrics."""
from __future__ import annotations

import threading
from typing import Any, Sequence

from mp_grpc_metrics.observability.metrics import Counter, Histogram, Metrics


def _require_otel() -> None:
    try:
        import opentelemetry.metrics  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'mp-grpc-metrics[otel]' to use the OpenTelemetry adapter") from exc


class _OtelCounter(Counter):
    def __init__(self, counter: Any) -> None:
        self._c = counter

    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None:
        self._c.add(value, attributes=labels)


class _OtelHistogram(Histogram):
    def __init__(self, hist: Any) -> None:
        self._h = hist

    def record(self, value: float, labels: dict[str, str] | None = None) -> None:
        self._h.record(value, attributes=labels)


class OtelMetrics(Metrics):
    """OpenTelemetry metrics adapter.

    Pass *meter_provider* to publish somewhere other than the global provider.
    Histogram boundaries are forwarded as the bucket advisory.
    """

    def __init__(self, meter_name: str = "mp_grpc_metrics", meter_provider: Any | None = None) -> None:
        _require_otel()
        from opentelemetry import metrics

        self._meter = metrics.get_meter(meter_name, meter_provider=meter_provider)
        self._lock = threading.Lock()
        self._instruments: dict[str, Any] = {}

    def counter(
        self,
        name: str,
        description: str = "",
        unit: str = "",
        labelnames: Sequence[str] = (),
    ) -> Counter:
        with self._lock:
            if name not in self._instruments:
                self._instruments[name] = _OtelCounter(
                    self._meter.create_counter(name, unit=unit, description=description)
                )
            return self._instruments[name]

    def histogram(
        self,
        name: str,
        description: str = "",
        unit: str = "s",
        labelnames: Sequence[str] = (),
        boundaries: Sequence[float] | None = None,
    ) -> Histogram:
        with self._lock:
            if name not in self._instruments:
                kwargs: dict[str, Any] = {"unit": unit, "description": description}
                if boundaries:
                    kwargs["explicit_bucket_boundaries_advisory"] = list(boundaries)
                self._instruments[name] = _OtelHistogram(self._meter.create_histogram(name, **kwargs))
            return self._instruments[name]


__all__ = ["OtelMetrics"]
