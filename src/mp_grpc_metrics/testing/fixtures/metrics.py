"""Testing fixtures – fake_metrics, manual_clock, client_metrics."""
from __future__ import annotations

import pytest

from mp_grpc_metrics.client import ClientMetrics
from mp_grpc_metrics.kernel.time import ManualClock
from mp_grpc_metrics.testing.fakes.metrics import FakeMetricsRegistry


@pytest.fixture
def fake_metrics() -> FakeMetricsRegistry:
    """Pytest fixture: an empty in-memory metrics backend."""
    return FakeMetricsRegistry()


@pytest.fixture
def manual_clock() -> ManualClock:
    """Pytest fixture: a monotonic clock that only moves on ``advance()``."""
    return ManualClock(start=100.0)


@pytest.fixture
def client_metrics(fake_metrics: FakeMetricsRegistry, manual_clock: ManualClock) -> ClientMetrics:
    """Pytest fixture: ``ClientMetrics`` on the fake backend with the latency histogram on."""
    metrics = ClientMetrics(fake_metrics, clock=manual_clock)
    metrics.enable_handling_time_histogram()
    return metrics
