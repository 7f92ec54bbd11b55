"""Client – stream wrappers for blocking (``grpc.Channel``) calls.

Request side: :class:`MonitoredRequestIterator` sits between the caller's
request iterator and gRPC's request-consumer thread.

Response side: :class:`MonitoredResponseIterator` replaces the call object
handed back to the caller.  It is a ``grpc.Call``, a ``grpc.Future`` and an
iterator, like the object it wraps, and it never buffers or reorders.
"""
from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator

import grpc

from mp_grpc_metrics.client.labels import status_code_of
from mp_grpc_metrics.client.reporter import CallReporter


class MonitoredRequestIterator:
    """Count every request handed to the transport.

    A request counts as sent when gRPC takes it.  The send time of a request
    is the gap until gRPC comes back for the next one, which is when the
    previous write has gone through.  A request iterator that raises ends
    the call with ``UNKNOWN``, the status gRPC itself gives such calls.
    """

    def __init__(self, requests: Iterable[Any], reporter: CallReporter) -> None:
        self._requests: Iterator[Any] = iter(requests)
        self._reporter = reporter
        self._handed_at: float | None = None

    def __iter__(self) -> "MonitoredRequestIterator":
        return self

    def __next__(self) -> Any:
        if self._handed_at is not None:
            self._reporter.send_took(self._reporter.now() - self._handed_at)
            self._handed_at = None
        try:
            request = next(self._requests)
        except StopIteration:
            raise
        except Exception:
            self._reporter.finish(grpc.StatusCode.UNKNOWN)
            raise
        self._reporter.sent()
        self._handed_at = self._reporter.now()
        return request


class MonitoredResponseIterator(grpc.Call, grpc.Future):
    """Response-side wrapper for server-streaming and bidi calls."""

    def __init__(self, call: Any, reporter: CallReporter) -> None:
        self._call = call
        self._reporter = reporter

    def __iter__(self) -> "MonitoredResponseIterator":
        return self

    def __next__(self) -> Any:
        began = self._reporter.now()
        try:
            response = next(self._call)
        except StopIteration:
            self._reporter.finish(grpc.StatusCode.OK)
            raise
        except grpc.RpcError as exc:
            self._reporter.finish(status_code_of(exc))
            raise
        self._reporter.received(self._reporter.now() - began)
        return response

    def next(self) -> Any:
        return self.__next__()

    # grpc.RpcContext / grpc.Future ------------------------------------

    def cancel(self) -> bool:
        cancelled = self._call.cancel()
        if cancelled:
            self._reporter.finish(grpc.StatusCode.CANCELLED)
        return cancelled

    def cancelled(self) -> bool:
        return self._call.cancelled()

    def running(self) -> bool:
        return self._call.running()

    def done(self) -> bool:
        return self._call.done()

    def result(self, timeout: float | None = None) -> Any:
        return self._call.result(timeout=timeout)

    def exception(self, timeout: float | None = None) -> Any:
        return self._call.exception(timeout=timeout)

    def traceback(self, timeout: float | None = None) -> Any:
        return self._call.traceback(timeout=timeout)

    def add_done_callback(self, fn: Callable[[Any], None]) -> None:
        self._call.add_done_callback(fn)

    def is_active(self) -> bool:
        return self._call.is_active()

    def time_remaining(self) -> float | None:
        return self._call.time_remaining()

    def add_callback(self, callback: Callable[[], None]) -> bool:
        return self._call.add_callback(callback)

    # grpc.Call ----------------------------------------------------------

    def initial_metadata(self) -> Any:
        return self._call.initial_metadata()

    def trailing_metadata(self) -> Any:
        return self._call.trailing_metadata()

    def code(self) -> grpc.StatusCode:
        return self._call.code()

    def details(self) -> str | None:
        return self._call.details()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._call, name)


__all__ = ["MonitoredRequestIterator", "MonitoredResponseIterator"]
