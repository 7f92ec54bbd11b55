"""Infrastructure errors: metrics backend failures."""

from __future__ import annotations

from typing import Any

from mp_grpc_metrics.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Backend / I/O failure that is not a caller mistake."""

    default_code = "infrastructure_error"


class MetricRegistrationError(InfrastructureError):
    """The backend refused to register a metric (usually a name clash)."""

    default_code = "metric_registration_error"

    def __init__(
        self,
        metric_name: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not register metric '{metric_name}'", **kwargs)
        self.metric_name = metric_name

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["metric_name"] = self.metric_name
        return base


__all__ = ["InfrastructureError", "MetricRegistrationError"]
