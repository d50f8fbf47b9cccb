"""Process config persistence."""

from .loader import ConfigError, ProcessConfigStore, default_config_path

__all__ = [
    "ConfigError",
    "ProcessConfigStore",
    "default_config_path",
]
