"""Client – ClientMetrics, the process-wide owner of the gRPC client instruments.

Create one instance at startup and hand it to every channel::

    metrics = ClientMetrics(prometheus_client.REGISTRY)
    metrics.enable_handling_time_histogram()
    channel = metrics.instrument(grpc.insecure_channel("localhost:50051"))

Published metrics (``namespace``/``subsystem`` are prepended when set):

* ``grpc_client_started_total``
* ``grpc_client_handled_total`` (adds ``grpc_code``)
* ``grpc_client_msg_received_total``
* ``grpc_client_msg_sent_total``
* ``grpc_client_handling_seconds`` (opt-in)
* ``grpc_client_msg_recv_handling_seconds`` (opt-in)
* ``grpc_client_msg_send_handling_seconds`` (opt-in)
"""
from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, Mapping, Sequence

import grpc
from prometheus_client import CollectorRegistry

from mp_grpc_metrics.adapters.prometheus import PrometheusMetrics
from mp_grpc_metrics.client.labels import CODE_LABEL, LABEL_NAMES, CallLabels, classify, code_name
from mp_grpc_metrics.client.reporter import CallReporter
from mp_grpc_metrics.config.settings.client_metrics import (
    DEFAULT_BUCKETS,
    ClientMetricsSettings,
    validate_buckets,
)
from mp_grpc_metrics.config.validation import ConfigError
from mp_grpc_metrics.kernel.time import Clock, SystemClock
from mp_grpc_metrics.observability.logging import get_logger
from mp_grpc_metrics.observability.metrics import Histogram, Metrics

if TYPE_CHECKING:
    from mp_grpc_metrics.client.aio import (
        AioStreamStreamInterceptor,
        AioStreamUnaryInterceptor,
        AioUnaryStreamInterceptor,
        AioUnaryUnaryInterceptor,
    )
    from mp_grpc_metrics.client.interceptors import StreamClientInterceptor, UnaryClientInterceptor

logger = get_logger(__name__)


def _full_name(namespace: str, subsystem: str, name: str) -> str:
    return "_".join(part for part in (namespace, subsystem, name) if part)


class ClientMetrics:
    """Labeled counters and histograms for outgoing gRPC calls.

    Parameters
    ----------
    backend:
        A :class:`~mp_grpc_metrics.observability.metrics.Metrics` backend, or a
        :class:`prometheus_client.CollectorRegistry` to publish into.  ``None``
        publishes into the default Prometheus registry.
    namespace, subsystem:
        Optional metric name prefixes.
    const_labels:
        Extra labels with fixed values attached to every metric.
    clock:
        Monotonic clock used for call durations.
    """

    def __init__(
        self,
        backend: Metrics | CollectorRegistry | None = None,
        *,
        namespace: str = "",
        subsystem: str = "",
        const_labels: Mapping[str, str] | None = None,
        clock: Clock | None = None,
    ) -> None:
        if backend is None or isinstance(backend, CollectorRegistry):
            backend = PrometheusMetrics(backend)
        self._backend = backend
        self._namespace = namespace
        self._subsystem = subsystem
        self._const_labels = dict(const_labels or {})
        clash = set(self._const_labels) & set(LABEL_NAMES + (CODE_LABEL,))
        if clash:
            raise ConfigError(f"const_labels may not redefine {sorted(clash)}")
        self.clock: Clock = clock or SystemClock()
        self._lock = threading.Lock()

        self._labelnames = LABEL_NAMES + tuple(self._const_labels)
        self._started = backend.counter(
            self._name("grpc_client_started_total"),
            "Total number of RPCs started on the client.",
            labelnames=self._labelnames,
        )
        self._handled = backend.counter(
            self._name("grpc_client_handled_total"),
            "Total number of RPCs completed by the client, regardless of success or failure.",
            labelnames=self._labelnames + (CODE_LABEL,),
        )
        self._msg_received = backend.counter(
            self._name("grpc_client_msg_received_total"),
            "Total number of RPC stream messages received by the client.",
            labelnames=self._labelnames,
        )
        self._msg_sent = backend.counter(
            self._name("grpc_client_msg_sent_total"),
            "Total number of gRPC stream messages sent by the client.",
            labelnames=self._labelnames,
        )
        self._handled_histogram: Histogram | None = None
        self._recv_histogram: Histogram | None = None
        self._send_histogram: Histogram | None = None
        self._buckets: dict[str, tuple[float, ...]] = {}

    @classmethod
    def from_settings(
        cls,
        settings: ClientMetricsSettings,
        backend: Metrics | CollectorRegistry | None = None,
        **kwargs: Any,
    ) -> "ClientMetrics":
        """Build an instance and enable the histograms *settings* asks for."""
        metrics = cls(backend, namespace=settings.namespace, subsystem=settings.subsystem, **kwargs)
        if settings.handling_time_histogram:
            metrics.enable_handling_time_histogram(settings.histogram_buckets)
        if settings.stream_receive_time_histogram:
            metrics.enable_stream_receive_time_histogram(settings.histogram_buckets)
        if settings.stream_send_time_histogram:
            metrics.enable_stream_send_time_histogram(settings.histogram_buckets)
        return metrics

    # ------------------------------------------------------------------
    # Histogram enablement
    # ------------------------------------------------------------------

    @property
    def histogram_enabled(self) -> bool:
        return self._handled_histogram is not None

    def enable_handling_time_histogram(self, buckets: Sequence[float] | None = None) -> None:
        """Start recording ``grpc_client_handling_seconds``.

        Idempotent: the first call fixes the buckets, later calls are no-ops.
        """
        with self._lock:
            if self._handled_histogram is None:
                self._handled_histogram = self._create_histogram(
                    "grpc_client_handling_seconds",
                    "Histogram of response latency (seconds) of the gRPC until it is finished by the application.",
                    buckets,
                )
            else:
                self._warn_if_rebucketed("grpc_client_handling_seconds", buckets)

    def enable_stream_receive_time_histogram(self, buckets: Sequence[float] | None = None) -> None:
        """Start recording ``grpc_client_msg_recv_handling_seconds`` for streams."""
        with self._lock:
            if self._recv_histogram is None:
                self._recv_histogram = self._create_histogram(
                    "grpc_client_msg_recv_handling_seconds",
                    "Histogram of response latency (seconds) of the gRPC single message receive.",
                    buckets,
                )
            else:
                self._warn_if_rebucketed("grpc_client_msg_recv_handling_seconds", buckets)

    def enable_stream_send_time_histogram(self, buckets: Sequence[float] | None = None) -> None:
        """Start recording ``grpc_client_msg_send_handling_seconds`` for streams."""
        with self._lock:
            if self._send_histogram is None:
                self._send_histogram = self._create_histogram(
                    "grpc_client_msg_send_handling_seconds",
                    "Histogram of response latency (seconds) of the gRPC single message send.",
                    buckets,
                )
            else:
                self._warn_if_rebucketed("grpc_client_msg_send_handling_seconds", buckets)

    def _create_histogram(self, name: str, description: str, buckets: Sequence[float] | None) -> Histogram:
        ladder = tuple(float(b) for b in buckets) if buckets is not None else DEFAULT_BUCKETS
        validate_buckets(name, ladder)
        histogram = self._backend.histogram(
            self._name(name), description, unit="s", labelnames=self._labelnames, boundaries=ladder,
        )
        self._buckets[name] = ladder
        logger.info("grpc_client_metrics.histogram_enabled", metric=self._name(name), buckets=list(ladder))
        return histogram

    def _warn_if_rebucketed(self, name: str, buckets: Sequence[float] | None) -> None:
        if buckets is not None and tuple(float(b) for b in buckets) != self._buckets[name]:
            logger.warning(
                "grpc_client_metrics.histogram_already_enabled",
                metric=self._name(name),
                buckets=list(self._buckets[name]),
                ignored_buckets=list(buckets),
            )

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def inc_started(self, labels: CallLabels) -> None:
        self._started.add(1, self._values(labels))

    def inc_handled(self, labels: CallLabels, code: grpc.StatusCode | str) -> None:
        values = self._values(labels)
        values[CODE_LABEL] = code if isinstance(code, str) else code_name(code)
        self._handled.add(1, values)

    def observe_handled_duration(self, labels: CallLabels, seconds: float) -> None:
        histogram = self._handled_histogram
        if histogram is not None:
            histogram.record(seconds, self._values(labels))

    def inc_msg_sent(self, labels: CallLabels) -> None:
        self._msg_sent.add(1, self._values(labels))

    def inc_msg_received(self, labels: CallLabels) -> None:
        self._msg_received.add(1, self._values(labels))

    def observe_msg_send_duration(self, labels: CallLabels, seconds: float) -> None:
        histogram = self._send_histogram
        if histogram is not None:
            histogram.record(seconds, self._values(labels))

    def observe_msg_receive_duration(self, labels: CallLabels, seconds: float) -> None:
        histogram = self._recv_histogram
        if histogram is not None:
            histogram.record(seconds, self._values(labels))

    # ------------------------------------------------------------------
    # Per-call records and interceptors
    # ------------------------------------------------------------------

    def reporter(
        self,
        full_method: str | bytes,
        client_streaming: bool,
        server_streaming: bool,
    ) -> CallReporter:
        """Classify one outgoing call and open its call record."""
        labels = classify(full_method, client_streaming, server_streaming)
        if not labels.service:
            logger.debug("grpc_client_metrics.unparsable_method", method=full_method)
        return CallReporter(self, labels)

    def unary_interceptor(self) -> "UnaryClientInterceptor":
        from mp_grpc_metrics.client.interceptors import UnaryClientInterceptor

        return UnaryClientInterceptor(self)

    def stream_interceptor(self) -> "StreamClientInterceptor":
        from mp_grpc_metrics.client.interceptors import StreamClientInterceptor

        return StreamClientInterceptor(self)

    def interceptors(self) -> list[grpc.UnaryUnaryClientInterceptor | grpc.UnaryStreamClientInterceptor]:
        """Interceptors for :func:`grpc.intercept_channel`."""
        return [self.unary_interceptor(), self.stream_interceptor()]

    def aio_interceptors(
        self,
    ) -> list[
        "AioUnaryUnaryInterceptor | AioUnaryStreamInterceptor | AioStreamUnaryInterceptor | AioStreamStreamInterceptor"
    ]:
        """Interceptors for ``grpc.aio.insecure_channel(..., interceptors=...)``."""
        from mp_grpc_metrics.client.aio import (
            AioStreamStreamInterceptor,
            AioStreamUnaryInterceptor,
            AioUnaryStreamInterceptor,
            AioUnaryUnaryInterceptor,
        )

        return [
            AioUnaryUnaryInterceptor(self),
            AioUnaryStreamInterceptor(self),
            AioStreamUnaryInterceptor(self),
            AioStreamStreamInterceptor(self),
        ]

    def instrument(self, channel: grpc.Channel) -> grpc.Channel:
        """Return *channel* wrapped with this instance's interceptors."""
        return grpc.intercept_channel(channel, *self.interceptors())

    def _name(self, name: str) -> str:
        return _full_name(self._namespace, self._subsystem, name)

    def _values(self, labels: CallLabels) -> dict[str, str]:
        values = labels.to_dict()
        if self._const_labels:
            values.update(self._const_labels)
        return values


__all__ = ["ClientMetrics"]
