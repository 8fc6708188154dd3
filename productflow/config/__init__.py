"""Configuration handling for productflow."""

from .models import (
    ProductFlowConfig,
    BackendSettings,
    WizardSettings,
    LoggingSettings,
    FlowName,
    LogLevel,
)
from .loader import ConfigLoader, ConfigError, DEFAULT_CONFIG_FILE

__all__ = [
    "ProductFlowConfig",
    "BackendSettings",
    "WizardSettings",
    "LoggingSettings",
    "FlowName",
    "LogLevel",
    "ConfigLoader",
    "ConfigError",
    "DEFAULT_CONFIG_FILE",
]
