"""Client – per-call record and the unary call reporter.

A :class:`CallReporter` lives exactly as long as one RPC.  Completion
metrics go through :meth:`CallReporter.finish`, which only the first
caller gets to run: a stream may see its terminal status from a failing
request iterator, from a response read and from ``cancel()``, and all
of them race to the same record.
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Callable, TypeVar

import grpc

from mp_grpc_metrics.client.labels import CallLabels, status_code_of

if TYPE_CHECKING:
    from mp_grpc_metrics.client.metrics import ClientMetrics

T = TypeVar("T")


class CallReporter:
    """Call record: labels, start time and a single-use completion flag."""

    __slots__ = ("_metrics", "labels", "_started_at", "_completed")

    def __init__(self, metrics: "ClientMetrics", labels: CallLabels) -> None:
        self._metrics = metrics
        self.labels = labels
        self._started_at = 0.0
        # Acquired once, never released.
        self._completed = threading.Lock()

    @property
    def finished(self) -> bool:
        return self._completed.locked()

    def start(self) -> None:
        self._metrics.inc_started(self.labels)
        self._started_at = self._metrics.clock.monotonic()

    def now(self) -> float:
        return self._metrics.clock.monotonic()

    def sent(self) -> None:
        if not self.finished:
            self._metrics.inc_msg_sent(self.labels)

    def send_took(self, seconds: float) -> None:
        if not self.finished:
            self._metrics.observe_msg_send_duration(self.labels, seconds)

    def received(self, seconds: float | None = None) -> None:
        if self.finished:
            return
        self._metrics.inc_msg_received(self.labels)
        if seconds is not None:
            self._metrics.observe_msg_receive_duration(self.labels, seconds)

    def finish(self, code: grpc.StatusCode) -> bool:
        """Publish completion metrics; returns ``False`` if already finished."""
        if not self._completed.acquire(blocking=False):
            return False
        elapsed = self._metrics.clock.monotonic() - self._started_at
        self._metrics.inc_handled(self.labels, code)
        self._metrics.observe_handled_duration(self.labels, elapsed)
        return True


def report_unary(
    reporter: CallReporter,
    invoke: Callable[[], T],
    *,
    count_response: bool = False,
) -> T:
    """Run *invoke* (the rest of the interceptor chain) under *reporter*.

    *invoke* returns a ``grpc.Call``/``grpc.Future`` outcome; completion is
    recorded from its done-callback, which fires inline for blocking calls
    and from gRPC's thread for ``future()`` calls.  The outcome is returned
    untouched.  With *count_response* an ``OK`` completion also counts the
    single response as a received message (client-streaming calls).
    """
    reporter.start()
    try:
        outcome = invoke()
    except Exception as exc:
        reporter.finish(status_code_of(exc))
        raise

    def _on_done(call: Any) -> None:
        code = status_code_of(call)
        if count_response and code is grpc.StatusCode.OK:
            reporter.received()
        reporter.finish(code)

    add_done_callback = getattr(outcome, "add_done_callback", None)
    if callable(add_done_callback):
        add_done_callback(_on_done)
    else:
        _on_done(outcome)
    return outcome


__all__ = ["CallReporter", "report_unary"]
