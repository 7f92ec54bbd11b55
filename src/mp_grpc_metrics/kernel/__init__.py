"""Kernel – framework-agnostic building blocks (errors, clocks)."""

from mp_grpc_metrics.kernel.errors import (
    ApplicationError,
    BaseError,
    InfrastructureError,
    MetricRegistrationError,
)
from mp_grpc_metrics.kernel.time import Clock, ManualClock, SystemClock

__all__ = [
    "ApplicationError",
    "BaseError",
    "Clock",
    "InfrastructureError",
    "ManualClock",
    "MetricRegistrationError",
    "SystemClock",
]
