"""
Configuration for Veilleur.
"""

from veilleur.config.settings import (
    HttpConfig,
    LoggingConfig,
    Settings,
    TimeoutsConfig,
    default_search_paths,
    load_config,
    parse_address,
)

__all__ = [
    "HttpConfig",
    "LoggingConfig",
    "Settings",
    "TimeoutsConfig",
    "default_search_paths",
    "load_config",
    "parse_address",
]
