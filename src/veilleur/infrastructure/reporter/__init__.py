"""
System reporter (logging) for Veilleur.
"""

from veilleur.infrastructure.reporter.formatters import JsonFormatter, TextFormatter
from veilleur.infrastructure.reporter.system_reporter import LOG_LEVELS, SystemReporter

__all__ = ["JsonFormatter", "LOG_LEVELS", "SystemReporter", "TextFormatter"]
