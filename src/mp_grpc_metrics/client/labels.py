"""Client – call classification and status code naming.

Everything here is pure: the same method name and streaming shape always
yield the same :class:`CallLabels`, and nothing is cached.
"""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

import grpc

LABEL_NAMES: tuple[str, ...] = ("grpc_type", "grpc_service", "grpc_method")
CODE_LABEL = "grpc_code"


class CallType(str, Enum):
    UNARY = "unary"
    CLIENT_STREAM = "client_stream"
    SERVER_STREAM = "server_stream"
    BIDI_STREAM = "bidi_stream"


@dataclasses.dataclass(frozen=True)
class CallLabels:
    """Label tuple shared by every metric of one call."""
    type: CallType
    service: str
    method: str

    def to_dict(self) -> dict[str, str]:
        return {
            "grpc_type": self.type.value,
            "grpc_service": self.service,
            "grpc_method": self.method,
        }


# Canonical gRPC code strings, as every other gRPC implementation prints them.
_CODE_NAMES: dict[grpc.StatusCode, str] = {
    grpc.StatusCode.OK: "OK",
    grpc.StatusCode.CANCELLED: "Canceled",
    grpc.StatusCode.UNKNOWN: "Unknown",
    grpc.StatusCode.INVALID_ARGUMENT: "InvalidArgument",
    grpc.StatusCode.DEADLINE_EXCEEDED: "DeadlineExceeded",
    grpc.StatusCode.NOT_FOUND: "NotFound",
    grpc.StatusCode.ALREADY_EXISTS: "AlreadyExists",
    grpc.StatusCode.PERMISSION_DENIED: "PermissionDenied",
    grpc.StatusCode.RESOURCE_EXHAUSTED: "ResourceExhausted",
    grpc.StatusCode.FAILED_PRECONDITION: "FailedPrecondition",
    grpc.StatusCode.ABORTED: "Aborted",
    grpc.StatusCode.OUT_OF_RANGE: "OutOfRange",
    grpc.StatusCode.UNIMPLEMENTED: "Unimplemented",
    grpc.StatusCode.INTERNAL: "Internal",
    grpc.StatusCode.UNAVAILABLE: "Unavailable",
    grpc.StatusCode.DATA_LOSS: "DataLoss",
    grpc.StatusCode.UNAUTHENTICATED: "Unauthenticated",
}


def split_method_name(full_method: str | bytes) -> tuple[str, str]:
    """Split ``"/pkg.Service/Method"`` into ``("pkg.Service", "Method")``.

    Identifiers without a service/method delimiter, or with either part
    empty, yield ``("", "")``.
    """
    if isinstance(full_method, bytes):
        full_method = full_method.decode("utf-8", errors="replace")
    name = full_method[1:] if full_method.startswith("/") else full_method
    service, sep, method = name.partition("/")
    if not sep or not service or not method:
        return "", ""
    return service, method


def call_type(client_streaming: bool, server_streaming: bool) -> CallType:
    if client_streaming and server_streaming:
        return CallType.BIDI_STREAM
    if client_streaming:
        return CallType.CLIENT_STREAM
    if server_streaming:
        return CallType.SERVER_STREAM
    return CallType.UNARY


def classify(full_method: str | bytes, client_streaming: bool, server_streaming: bool) -> CallLabels:
    """Derive the :class:`CallLabels` for one call."""
    service, method = split_method_name(full_method)
    return CallLabels(call_type(client_streaming, server_streaming), service, method)


def code_name(code: grpc.StatusCode | None) -> str:
    """Return the canonical string for *code* (``Unknown`` for ``None``)."""
    if code is None:
        return "Unknown"
    return _CODE_NAMES.get(code, "Unknown")


def status_code_of(obj: Any) -> grpc.StatusCode:
    """Extract the terminal status code from a finished call or an exception.

    Objects that carry no usable code (plain exceptions, calls whose
    ``code()`` itself blows up) count as ``UNKNOWN``.
    """
    code_fn = getattr(obj, "code", None)
    if not callable(code_fn):
        return grpc.StatusCode.UNKNOWN
    try:
        code = code_fn()
    except Exception:  # noqa: BLE001
        return grpc.StatusCode.UNKNOWN
    return code if isinstance(code, grpc.StatusCode) else grpc.StatusCode.UNKNOWN


__all__ = [
    "CODE_LABEL",
    "LABEL_NAMES",
    "CallLabels",
    "CallType",
    "call_type",
    "classify",
    "code_name",
    "split_method_name",
    "status_code_of",
]
