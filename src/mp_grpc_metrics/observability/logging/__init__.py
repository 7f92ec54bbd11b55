"""Observability – structured logging helpers."""
from mp_grpc_metrics.observability.logging.factory import JsonLoggerFactory
from mp_grpc_metrics.observability.logging.processors import Logger, get_logger

__all__ = ["JsonLoggerFactory", "Logger", "get_logger"]
