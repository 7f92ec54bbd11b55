"""Config settings – 12-factor env-based configuration."""
from mp_grpc_metrics.config.settings.base import Settings
from mp_grpc_metrics.config.settings.client_metrics import ClientMetricsSettings
from mp_grpc_metrics.config.settings.loaders import EnvSettingsLoader, SettingsLoader

__all__ = ["ClientMetricsSettings", "EnvSettingsLoader", "Settings", "SettingsLoader"]
