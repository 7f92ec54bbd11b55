"""Testing fixtures – pytest fixtures for metrics doubles."""
from mp_grpc_metrics.testing.fixtures.metrics import client_metrics, fake_metrics, manual_clock

__all__ = ["client_metrics", "fake_metrics", "manual_clock"]
