"""Testing fakes – in-memory doubles for the metrics port."""
from mp_grpc_metrics.kernel.time import ManualClock
from mp_grpc_metrics.testing.fakes.metrics import FakeMetricsRegistry

__all__ = ["FakeMetricsRegistry", "ManualClock"]
