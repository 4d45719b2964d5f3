"""Configuration management"""

from .adapter_config import AdapterConfig, AppConfig, HtmlConversionConfig, StorageConfig
from .config_loader import ConfigError, ConfigLoader

__all__ = [
    "AdapterConfig",
    "AppConfig",
    "ConfigError",
    "ConfigLoader",
    "HtmlConversionConfig",
    "StorageConfig",
]
