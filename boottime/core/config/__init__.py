"""Configuration management module."""

from boottime.core.config.settings import (
    BootTimeConfig,
    ConfigManager,
    LoggingConfig,
    SourcesConfig,
    StorageConfig,
    load_config_from_env,
)

__all__ = [
    "BootTimeConfig",
    "ConfigManager",
    "LoggingConfig",
    "SourcesConfig",
    "StorageConfig",
    "load_config_from_env",
]
