"""Application-layer errors: misuse of the library's public surface."""

from __future__ import annotations

from mp_grpc_metrics.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


__all__ = ["ApplicationError"]
