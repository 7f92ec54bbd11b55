"""Observability – metrics ports."""
from mp_grpc_metrics.observability.metrics.ports import Counter, Histogram, Metrics
from mp_grpc_metrics.observability.metrics.noop import NoopMetrics

__all__ = ["Counter", "Histogram", "Metrics", "NoopMetrics"]
