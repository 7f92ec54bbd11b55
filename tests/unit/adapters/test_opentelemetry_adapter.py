"""Unit tests for the OpenTelemetry metrics adapter (in-memory SDK reader)."""

from __future__ import annotations

from typing import Any

import grpc
import pytest

pytest.importorskip("opentelemetry.sdk.metrics")

from opentelemetry.sdk.metrics import MeterProvider  # noqa: E402
from opentelemetry.sdk.metrics.export import InMemoryMetricReader  # noqa: E402

from mp_grpc_metrics.adapters.opentelemetry import OtelMetrics  # noqa: E402
from mp_grpc_metrics.client import ClientMetrics  # noqa: E402


def _metrics_by_name(reader: InMemoryMetricReader) -> dict[str, Any]:
    data = reader.get_metrics_data()
    found: dict[str, Any] = {}
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                found[metric.name] = metric
    return found


@pytest.fixture
def reader() -> InMemoryMetricReader:
    return InMemoryMetricReader()


@pytest.fixture
def provider(reader: InMemoryMetricReader) -> MeterProvider:
    return MeterProvider(metric_readers=[reader])


class TestOtelMetrics:
    def test_counter_records_attributes(self, reader: InMemoryMetricReader, provider: MeterProvider) -> None:
        counter = OtelMetrics(meter_provider=provider).counter("jobs_total", "Jobs.")
        counter.add(1, {"kind": "a"})
        counter.add(2, {"kind": "a"})
        points = list(_metrics_by_name(reader)["jobs_total"].data.data_points)
        assert len(points) == 1
        assert points[0].value == 3
        assert dict(points[0].attributes) == {"kind": "a"}

    def test_histogram_records(self, reader: InMemoryMetricReader, provider: MeterProvider) -> None:
        hist = OtelMetrics(meter_provider=provider).histogram("latency_seconds", boundaries=(0.1, 1.0))
        hist.record(0.05, {"op": "x"})
        hist.record(0.5, {"op": "x"})
        points = list(_metrics_by_name(reader)["latency_seconds"].data.data_points)
        assert points[0].count == 2

    def test_same_name_returns_same_instrument(self, provider: MeterProvider) -> None:
        metrics = OtelMetrics(meter_provider=provider)
        assert metrics.counter("dup_total") is metrics.counter("dup_total")
        assert metrics.histogram("dup_seconds") is metrics.histogram("dup_seconds")

    def test_client_metrics_on_otel(self, reader: InMemoryMetricReader, provider: MeterProvider) -> None:
        metrics = ClientMetrics(OtelMetrics(meter_provider=provider))
        metrics.enable_handling_time_histogram()
        reporter = metrics.reporter("/mwitkow.testproto.TestService/PingEmpty", False, False)
        reporter.start()
        reporter.finish(grpc.StatusCode.OK)
        found = _metrics_by_name(reader)
        handled = list(found["grpc_client_handled_total"].data.data_points)
        assert dict(handled[0].attributes) == {
            "grpc_type": "unary",
            "grpc_service": "mwitkow.testproto.TestService",
            "grpc_method": "PingEmpty",
            "grpc_code": "OK",
        }
        assert list(found["grpc_client_handling_seconds"].data.data_points)[0].count == 1
