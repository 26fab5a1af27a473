"""
Domain exceptions for Veilleur.
"""

from veilleur.domain.exceptions.base import VeilleurError
from veilleur.domain.exceptions.lifecycle_exceptions import (
    ServerStartupError,
    ServerStateError,
    ShutdownError,
)
from veilleur.domain.exceptions.startup_exceptions import (
    ConfigurationError,
    LoggingConfigurationError,
)

__all__ = [
    "VeilleurError",
    "ConfigurationError",
    "LoggingConfigurationError",
    "ServerStartupError",
    "ServerStateError",
    "ShutdownError",
]
