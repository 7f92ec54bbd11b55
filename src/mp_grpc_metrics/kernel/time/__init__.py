"""Kernel time – monotonic Clock port + implementations."""
from mp_grpc_metrics.kernel.time.clock import Clock, ManualClock, SystemClock

__all__ = ["Clock", "ManualClock", "SystemClock"]
