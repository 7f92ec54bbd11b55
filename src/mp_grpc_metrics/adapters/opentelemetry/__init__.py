"""OpenTelemetry adapter – ``Metrics`` port backed by an OTel meter."""
from mp_grpc_metrics.adapters.opentelemetry.metrics import OtelMetrics

__all__ = ["OtelMetrics"]
