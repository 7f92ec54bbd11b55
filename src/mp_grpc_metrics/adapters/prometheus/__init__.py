"""Prometheus adapter – ``Metrics`` port backed by ``prometheus_client``."""
from mp_grpc_metrics.adapters.prometheus.metrics import PrometheusMetrics

__all__ = ["PrometheusMetrics"]
