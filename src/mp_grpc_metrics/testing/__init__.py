"""Testing support – fakes and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["mp_grpc_metrics.testing.fixtures"]
"""

from mp_grpc_metrics.testing.fakes import FakeMetricsRegistry, ManualClock

__all__ = ["FakeMetricsRegistry", "ManualClock"]
