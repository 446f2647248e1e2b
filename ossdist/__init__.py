"""
ossdist - upload build output to an object storage bucket.

This package contains:
- config: option validation and environment settings
- plugin: the build hook adapter
- services: versioned uploads, retention and the uploader
- utils: date pattern formatting
"""

from .config import PluginConfig, Settings, build_config, get_settings
from .exceptions import ConfigError, InvalidConfig, InvalidFormat, MissingCredentials
from .logging_config import setup_logging
from .plugin import Compiler, OSSPlugin

__all__ = [
    "OSSPlugin",
    "Compiler",
    "PluginConfig",
    "Settings",
    "build_config",
    "get_settings",
    "ConfigError",
    "InvalidConfig",
    "InvalidFormat",
    "MissingCredentials",
    "setup_logging",
]

__version__ = "0.1.0"
