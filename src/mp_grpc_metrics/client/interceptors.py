"""Client – interceptors for blocking ``grpc.Channel`` objects.

Usage::

    metrics = ClientMetrics()
    channel = grpc.intercept_channel(
        grpc.insecure_channel(target),
        metrics.unary_interceptor(),
        metrics.stream_interceptor(),
    )
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator

import grpc

from mp_grpc_metrics.client.labels import status_code_of
from mp_grpc_metrics.client.reporter import report_unary
from mp_grpc_metrics.client.stream import MonitoredRequestIterator, MonitoredResponseIterator

if TYPE_CHECKING:
    from mp_grpc_metrics.client.metrics import ClientMetrics


class UnaryClientInterceptor(grpc.UnaryUnaryClientInterceptor):
    """Records started/handled counters and latency for unary calls."""

    def __init__(self, metrics: "ClientMetrics") -> None:
        self._metrics = metrics

    def intercept_unary_unary(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Any], Any],
        client_call_details: grpc.ClientCallDetails,
        request: Any,
    ) -> Any:
        reporter = self._metrics.reporter(client_call_details.method, False, False)
        return report_unary(reporter, lambda: continuation(client_call_details, request))


class StreamClientInterceptor(
    grpc.UnaryStreamClientInterceptor,
    grpc.StreamUnaryClientInterceptor,
    grpc.StreamStreamClientInterceptor,
):
    """Records call and message metrics for the three streaming call shapes."""

    def __init__(self, metrics: "ClientMetrics") -> None:
        self._metrics = metrics

    def intercept_unary_stream(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Any], Any],
        client_call_details: grpc.ClientCallDetails,
        request: Any,
    ) -> MonitoredResponseIterator:
        reporter = self._metrics.reporter(client_call_details.method, False, True)
        reporter.start()
        try:
            call = continuation(client_call_details, request)
        except Exception as exc:
            reporter.finish(status_code_of(exc))
            raise
        reporter.sent()
        return MonitoredResponseIterator(call, reporter)

    def intercept_stream_unary(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Iterator[Any]], Any],
        client_call_details: grpc.ClientCallDetails,
        request_iterator: Iterator[Any],
    ) -> Any:
        reporter = self._metrics.reporter(client_call_details.method, True, False)
        requests = MonitoredRequestIterator(request_iterator, reporter)
        return report_unary(
            reporter,
            lambda: continuation(client_call_details, requests),
            count_response=True,
        )

    def intercept_stream_stream(
        self,
        continuation: Callable[[grpc.ClientCallDetails, Iterator[Any]], Any],
        client_call_details: grpc.ClientCallDetails,
        request_iterator: Iterator[Any],
    ) -> MonitoredResponseIterator:
        reporter = self._metrics.reporter(client_call_details.method, True, True)
        reporter.start()
        try:
            call = continuation(client_call_details, MonitoredRequestIterator(request_iterator, reporter))
        except Exception as exc:
            reporter.finish(status_code_of(exc))
            raise
        return MonitoredResponseIterator(call, reporter)


__all__ = ["StreamClientInterceptor", "UnaryClientInterceptor"]
