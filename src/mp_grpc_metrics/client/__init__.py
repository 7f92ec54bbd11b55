"""Client – metrics interceptors for outgoing gRPC calls."""
from mp_grpc_metrics.client.labels import (
    CallLabels,
    CallType,
    call_type,
    classify,
    code_name,
    split_method_name,
    status_code_of,
)
from mp_grpc_metrics.client.reporter import CallReporter, report_unary
from mp_grpc_metrics.client.metrics import ClientMetrics
from mp_grpc_metrics.client.interceptors import StreamClientInterceptor, UnaryClientInterceptor
from mp_grpc_metrics.client.stream import MonitoredRequestIterator, MonitoredResponseIterator

__all__ = [
    "CallLabels",
    "CallReporter",
    "CallType",
    "ClientMetrics",
    "MonitoredRequestIterator",
    "MonitoredResponseIterator",
    "StreamClientInterceptor",
    "UnaryClientInterceptor",
    "call_type",
    "classify",
    "code_name",
    "report_unary",
    "split_method_name",
    "status_code_of",
]
