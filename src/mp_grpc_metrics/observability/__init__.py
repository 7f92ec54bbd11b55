"""Observability – structured logging and metrics ports."""

from mp_grpc_metrics.observability.logging import JsonLoggerFactory, Logger, get_logger
from mp_grpc_metrics.observability.metrics import Counter, Histogram, Metrics, NoopMetrics

__all__ = [
    "Counter",
    "Histogram",
    "JsonLoggerFactory",
    "Logger",
    "Metrics",
    "NoopMetrics",
    "get_logger",
]
