"""
mp_grpc_metrics – Prometheus/OpenTelemetry metrics for gRPC clients.

Import path convention::

    from mp_grpc_metrics import ClientMetrics
    from mp_grpc_metrics.client import CallType, classify
    from mp_grpc_metrics.adapters.opentelemetry import OtelMetrics
"""

from mp_grpc_metrics.client import ClientMetrics

__version__ = "0.1.0"
__all__ = ["ClientMetrics", "__version__"]
