"""Configuration management package for x-bookmarks"""

from .models import AuthConfig, MissingCredentialsError, MonitorConfig
from .loader import ConfigLoader, load_auth_config, load_monitor_config

__all__ = [
    "AuthConfig",
    "MonitorConfig",
    "MissingCredentialsError",
    "ConfigLoader",
    "load_auth_config",
    "load_monitor_config",
]
