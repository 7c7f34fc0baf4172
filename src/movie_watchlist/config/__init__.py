"""Configuration management module."""

from .config_manager import ConfigManager
from .models import AppConfig, Config, LoggingConfig, OMDbConfig, StorageConfig, TMDbConfig

__all__ = [
    "ConfigManager",
    "Config",
    "AppConfig",
    "LoggingConfig",
    "OMDbConfig",
    "TMDbConfig",
    "StorageConfig",
]
