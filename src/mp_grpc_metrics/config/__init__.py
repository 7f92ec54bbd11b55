"""Config – 12-factor settings and validation errors."""

from mp_grpc_metrics.config.settings import (
    ClientMetricsSettings,
    EnvSettingsLoader,
    Settings,
    SettingsLoader,
)
from mp_grpc_metrics.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ClientMetricsSettings",
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
