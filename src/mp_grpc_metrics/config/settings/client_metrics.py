"""Config settings – ClientMetricsSettings."""
from __future__ import annotations

import dataclasses

from mp_grpc_metrics.config.settings.base import Settings
from mp_grpc_metrics.config.validation import InvalidSettingValueError

DEFAULT_BUCKETS: tuple[float, ...] = (
    0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0,
)


def validate_buckets(name: str, buckets: tuple[float, ...]) -> None:
    """Raise :class:`InvalidSettingValueError` unless *buckets* is a usable ladder."""
    if not buckets:
        raise InvalidSettingValueError(name, buckets, "at least one bucket is required")
    if any(b <= 0 for b in buckets):
        raise InvalidSettingValueError(name, buckets, "bucket boundaries must be positive")
    if any(later <= earlier for earlier, later in zip(buckets, buckets[1:])):
        raise InvalidSettingValueError(name, buckets, "bucket boundaries must be strictly increasing")


@dataclasses.dataclass
class ClientMetricsSettings(Settings):
    """Environment-driven configuration for :class:`~mp_grpc_metrics.client.ClientMetrics`.

    Every field maps to ``GRPC_CLIENT_METRICS_<FIELD>``, e.g.
    ``GRPC_CLIENT_METRICS_HANDLING_TIME_HISTOGRAM=true``.
    """

    _prefix = "GRPC_CLIENT_METRICS"

    namespace: str = ""
    subsystem: str = ""
    handling_time_histogram: bool = False
    histogram_buckets: tuple[float, ...] = DEFAULT_BUCKETS
    stream_receive_time_histogram: bool = False
    stream_send_time_histogram: bool = False

    def _validate(self) -> None:
        self.histogram_buckets = tuple(float(b) for b in self.histogram_buckets)
        validate_buckets("histogram_buckets", self.histogram_buckets)


__all__ = ["DEFAULT_BUCKETS", "ClientMetricsSettings", "validate_buckets"]
