"""Observability – Counter, Histogram, Metrics ports.

Backends are created once and handed labeled values on every call; label
*names* are fixed when the instrument is created so that backends needing
them up front (Prometheus) can register the metric family eagerly.
"""
from __future__ import annotations

import abc
from typing import Sequence


class Counter(abc.ABC):
    """Monotonically increasing counter."""

    @abc.abstractmethod
    def add(self, value: float = 1.0, labels: dict[str, str] | None = None) -> None: ...


class Histogram(abc.ABC):
    """Distribution / latency histogram."""

    @abc.abstractmethod
    def record(self, value: float, labels: dict[str, str] | None = None) -> None: ...


class Metrics(abc.ABC):
    """Port: factory for metric instruments.

    Implementations must make ``add``/``record`` safe to call from any
    number of threads at once.
    """

    @abc.abstractmethod
    def counter(
        self,
        name: str,
        description: str = "",
        unit: str = "",
        labelnames: Sequence[str] = (),
    ) -> Counter: ...

    @abc.abstractmethod
    def histogram(
        self,
        name: str,
        description: str = "",
        unit: str = "s",
        labelnames: Sequence[str] = (),
        boundaries: Sequence[float] | None = None,
    ) -> Histogram: ...


__all__ = ["Counter", "Histogram", "Metrics"]
