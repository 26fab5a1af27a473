"""
Startup exceptions.

All of these abort the process before the server accepts requests.
"""

from veilleur.domain.exceptions.base import VeilleurError


class ConfigurationError(VeilleurError):
    """Raised when config file is missing, unparseable or invalid."""

    pass


class LoggingConfigurationError(VeilleurError):
    """Raised when logging level cannot be parsed."""

    def __init__(self, level: str):
        """
        Initialize LoggingConfigurationError.

        Args:
            level: Rejected level value
        """
        super().__init__(f"Error setting up logging level: not a valid level: {level!r}")
        self.level = level
