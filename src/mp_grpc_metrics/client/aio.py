"""Client – interceptors and stream wrappers for ``grpc.aio`` channels.

``grpc.aio`` files each interceptor object under the first interceptor kind
it implements, so there is one class per call shape::

    channel = grpc.aio.insecure_channel(target, interceptors=metrics.aio_interceptors())

Streaming responses are handed back as async iterators; read them with
``async for``.  ``call.read()`` on an intercepted streaming call bypasses
interceptor iterators altogether and is therefore not counted.
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, AsyncIterable, AsyncIterator, Awaitable, Callable, Generator, Iterable

import grpc
import grpc.aio

from mp_grpc_metrics.client.labels import status_code_of
from mp_grpc_metrics.client.reporter import CallReporter

if TYPE_CHECKING:
    from mp_grpc_metrics.client.metrics import ClientMetrics

Continuation = Callable[[grpc.aio.ClientCallDetails, Any], Awaitable[Any]]


async def _as_async_iterator(requests: Iterable[Any] | AsyncIterable[Any]) -> AsyncIterator[Any]:
    if hasattr(requests, "__aiter__"):
        async for request in requests:  # type: ignore[union-attr]
            yield request
    else:
        for request in requests:  # type: ignore[union-attr]
            yield request


async def monitor_requests(
    requests: Iterable[Any] | AsyncIterable[Any],
    reporter: CallReporter,
) -> AsyncIterator[Any]:
    """Async counterpart of :class:`~mp_grpc_metrics.client.stream.MonitoredRequestIterator`."""
    source = _as_async_iterator(requests)
    while True:
        try:
            request = await source.__anext__()
        except StopAsyncIteration:
            return
        except asyncio.CancelledError:
            raise
        except Exception:
            reporter.finish(grpc.StatusCode.UNKNOWN)
            raise
        reporter.sent()
        handed_at = reporter.now()
        yield request
        reporter.send_took(reporter.now() - handed_at)


async def monitor_responses(call: Any, reporter: CallReporter) -> AsyncIterator[Any]:
    """Yield the responses of *call*, recording each receive and the end of the stream."""
    responses = call.__aiter__()
    while True:
        began = reporter.now()
        try:
            response = await responses.__anext__()
        except StopAsyncIteration:
            reporter.finish(grpc.StatusCode.OK)
            return
        except asyncio.CancelledError:
            reporter.finish(grpc.StatusCode.CANCELLED)
            raise
        except grpc.RpcError as exc:
            reporter.finish(status_code_of(exc))
            raise
        reporter.received(reporter.now() - began)
        yield response


def _finish_on_cancel(call: Any, reporter: CallReporter) -> None:
    """Record ``Canceled`` when *call* is cancelled, even if nobody reads it again."""

    def _on_done(done_call: Any) -> None:
        if done_call.cancelled():
            reporter.finish(grpc.StatusCode.CANCELLED)

    call.add_done_callback(_on_done)


class MonitoredStreamUnaryCall(grpc.aio.StreamUnaryCall):
    """Client-streaming call whose completion is recorded when it is awaited.

    Completion cannot be awaited inside the interceptor: ``call.write()``
    waits for the interceptor chain to return before it lets any request
    through.
    """

    def __init__(self, call: Any, reporter: CallReporter) -> None:
        self._call = call
        self._reporter = reporter

    def _settle(self, code: grpc.StatusCode) -> None:
        if code is grpc.StatusCode.OK:
            self._reporter.received()
        self._reporter.finish(code)

    def __await__(self) -> Generator[Any, None, Any]:
        try:
            response = yield from self._call.__await__()
        except asyncio.CancelledError:
            self._reporter.finish(grpc.StatusCode.CANCELLED)
            raise
        except grpc.RpcError as exc:
            self._reporter.finish(status_code_of(exc))
            raise
        self._settle(grpc.StatusCode.OK)
        return response

    def cancel(self) -> bool:
        cancelled = self._call.cancel()
        if cancelled:
            self._reporter.finish(grpc.StatusCode.CANCELLED)
        return cancelled

    def cancelled(self) -> bool:
        return self._call.cancelled()

    def done(self) -> bool:
        return self._call.done()

    def time_remaining(self) -> float | None:
        return self._call.time_remaining()

    def add_done_callback(self, callback: Callable[[Any], None]) -> None:
        self._call.add_done_callback(callback)

    async def initial_metadata(self) -> Any:
        return await self._call.initial_metadata()

    async def trailing_metadata(self) -> Any:
        metadata = await self._call.trailing_metadata()
        await self.code()
        return metadata

    async def code(self) -> grpc.StatusCode:
        code = await self._call.code()
        self._settle(code)
        return code

    async def details(self) -> str:
        details = await self._call.details()
        await self.code()
        return details

    async def wait_for_connection(self) -> None:
        await self._call.wait_for_connection()

    async def write(self, request: Any) -> None:
        await self._call.write(request)

    async def done_writing(self) -> None:
        await self._call.done_writing()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._call, name)


class _AioInterceptorBase:
    def __init__(self, metrics: "ClientMetrics") -> None:
        self._metrics = metrics

    @staticmethod
    async def _open(reporter: CallReporter, continuation: Continuation, details: Any, request: Any) -> Any:
        reporter.start()
        try:
            call = await continuation(details, request)
        except asyncio.CancelledError:
            reporter.finish(grpc.StatusCode.CANCELLED)
            raise
        except Exception as exc:
            reporter.finish(status_code_of(exc))
            raise
        _finish_on_cancel(call, reporter)
        return call


class AioUnaryUnaryInterceptor(_AioInterceptorBase, grpc.aio.UnaryUnaryClientInterceptor):
    """Unary calls: waits for the status before handing the call back."""

    async def intercept_unary_unary(self, continuation: Continuation, client_call_details: Any, request: Any) -> Any:
        reporter = self._metrics.reporter(client_call_details.method, False, False)
        call = await self._open(reporter, continuation, client_call_details, request)
        try:
            code = await call.code()
        except asyncio.CancelledError:
            call.cancel()
            reporter.finish(grpc.StatusCode.CANCELLED)
            raise
        reporter.finish(code)
        return call


class AioUnaryStreamInterceptor(_AioInterceptorBase, grpc.aio.UnaryStreamClientInterceptor):
    async def intercept_unary_stream(
        self, continuation: Continuation, client_call_details: Any, request: Any
    ) -> AsyncIterator[Any]:
        reporter = self._metrics.reporter(client_call_details.method, False, True)
        call = await self._open(reporter, continuation, client_call_details, request)
        reporter.sent()
        return monitor_responses(call, reporter)


class AioStreamUnaryInterceptor(_AioInterceptorBase, grpc.aio.StreamUnaryClientInterceptor):
    async def intercept_stream_unary(
        self, continuation: Continuation, client_call_details: Any, request_iterator: Any
    ) -> MonitoredStreamUnaryCall:
        reporter = self._metrics.reporter(client_call_details.method, True, False)
        requests = monitor_requests(request_iterator, reporter)
        call = await self._open(reporter, continuation, client_call_details, requests)
        return MonitoredStreamUnaryCall(call, reporter)


class AioStreamStreamInterceptor(_AioInterceptorBase, grpc.aio.StreamStreamClientInterceptor):
    async def intercept_stream_stream(
        self, continuation: Continuation, client_call_details: Any, request_iterator: Any
    ) -> AsyncIterator[Any]:
        reporter = self._metrics.reporter(client_call_details.method, True, True)
        requests = monitor_requests(request_iterator, reporter)
        call = await self._open(reporter, continuation, client_call_details, requests)
        return monitor_responses(call, reporter)


__all__ = [
    "AioStreamStreamInterceptor",
    "AioStreamUnaryInterceptor",
    "AioUnaryStreamInterceptor",
    "AioUnaryUnaryInterceptor",
    "MonitoredStreamUnaryCall",
    "monitor_requests",
    "monitor_responses",
]
