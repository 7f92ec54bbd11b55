"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError          (application.py)
    │   └── ConfigError           (mp_grpc_metrics.config.validation)
    │       ├── MissingRequiredSettingError
    │       └── InvalidSettingValueError
    └── InfrastructureError       (infrastructure.py)
        └── MetricRegistrationError

None of these are raised while an RPC is in flight: they surface at
construction or configuration time only.
"""

from mp_grpc_metrics.kernel.errors.application import ApplicationError
from mp_grpc_metrics.kernel.errors.base import BaseError
from mp_grpc_metrics.kernel.errors.infrastructure import (
    InfrastructureError,
    MetricRegistrationError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "InfrastructureError",
    "MetricRegistrationError",
]
