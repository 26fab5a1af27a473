"""
System Reporter - Centralized logging for Veilleur.

Configured once at startup from LoggingConfig:
- format: json or text (unknown values fall back to json)
- level: minimum severity (unknown values are fatal)
- output: stdout or file (unknown values and file errors fall back to stdout)

uvicorn's loggers are routed through the same handler so server and
application lines share format and destination.
"""

import logging
import os
import sys
from typing import IO, List, Optional, Tuple

from veilleur.config.settings import LoggingConfig
from veilleur.domain.exceptions import LoggingConfigurationError
from veilleur.infrastructure.reporter.formatters import (
    ContextFilter,
    JsonFormatter,
    TextFormatter,
)

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

LOG_DIR_MODE = 0o744

SERVER_LOGGERS = ("uvicorn",)


class SystemReporter:
    """
    Process logger built from LoggingConfig.

    Attributes:
        name: Logger name
        level: Effective Python logging level
        format: Effective format ("json" or "text")
        output: Effective output ("stdout" or "file")
        logger: Underlying logging.Logger
    """

    def __init__(
        self,
        config: LoggingConfig,
        name: str = "veilleur",
        stream: Optional[IO[str]] = None,
    ) -> None:
        """
        Initialize SystemReporter.

        Args:
            config: Logging configuration
            name: Logger name
            stream: Stream used for stdout output (defaults to sys.stdout)

        Raises:
            LoggingConfigurationError: If config.level is not a valid level
        """
        self.name = name
        self.config = config
        self._stream = stream if stream is not None else sys.stdout

        # Messages produced before the handler exists
        self._pending: List[Tuple[int, str]] = []

        self.format, formatter = self._init_format(config.format)
        self.level = self._init_level(config.level)
        self.output, self.handler = self._init_output(config.output)

        self.handler.setFormatter(formatter)
        self.handler.addFilter(ContextFilter())

        self.logger = logging.getLogger(name)
        self._attach(self.logger)
        for server_logger in SERVER_LOGGERS:
            self._attach(logging.getLogger(server_logger))

        for level, msg in self._pending:
            self._log(level, msg, "Logging")
        self._pending.clear()

    def _init_format(self, value: str) -> Tuple[str, logging.Formatter]:
        """Resolve formatter, falling back to JSON."""
        fmt = value.lower()
        if fmt == "json":
            return "json", JsonFormatter()
        if fmt == "text":
            return "text", TextFormatter()

        self._pending.append(
            (logging.WARNING, f"Unknown log format {value}. Setting up log as JSON")
        )
        return "json", JsonFormatter()

    def _init_level(self, value: str) -> int:
        """Resolve logging level."""
        level = LOG_LEVELS.get(value.lower())
        if level is None:
            raise LoggingConfigurationError(value)
        return level

    def _init_output(self, value: str) -> Tuple[str, logging.Handler]:
        """Resolve output handler, falling back to stdout."""
        output = value.lower()
        if output == "file":
            handler = self._open_log_file(self.config.file)
            if handler is not None:
                return "file", handler
        elif output != "stdout":
            self._pending.append(
                (
                    logging.WARNING,
                    f"Unknown log output {value}. Setting up output as stdout",
                )
            )

        return "stdout", logging.StreamHandler(self._stream)

    def _open_log_file(self, filename: str) -> Optional[logging.Handler]:
        """
        Open log file in append mode, creating its directory if needed.

        Returns:
            FileHandler, or None if directory or file cannot be created
        """
        directory = os.path.dirname(filename) or "."

        if not os.path.isdir(directory):
            try:
                os.makedirs(directory, mode=LOG_DIR_MODE, exist_ok=True)
            except OSError as e:
                self._pending.append(
                    (
                        logging.ERROR,
                        f"Error creating log file directory {filename}: {e}. "
                        f"Falling back to stdout",
                    )
                )
                return None

        try:
            return logging.FileHandler(filename, mode="a", encoding="utf-8")
        except OSError as e:
            self._pending.append(
                (
                    logging.ERROR,
                    f"Error opening log file {filename}: {e}. Falling back to stdout",
                )
            )
            return None

    def _attach(self, logger: logging.Logger) -> None:
        """Make handler the only destination of logger."""
        logger.setLevel(self.level)
        logger.handlers.clear()
        logger.addHandler(self.handler)
        logger.propagate = False

    def _log(self, level: int, msg: str, context: str, exc_info=None) -> None:
        self.logger.log(level, msg, extra={"context": context}, exc_info=exc_info)

    def debug(self, msg: str, context: str = "Veilleur") -> None:
        """Log debug message."""
        self._log(logging.DEBUG, msg, context)

    def info(self, msg: str, context: str = "Veilleur") -> None:
        """Log info message."""
        self._log(logging.INFO, msg, context)

    def warning(self, msg: str, context: str = "Veilleur") -> None:
        """Log warning message."""
        self._log(logging.WARNING, msg, context)

    def error(self, msg: str, context: str = "Veilleur", exc_info=None) -> None:
        """Log error message."""
        self._log(logging.ERROR, msg, context, exc_info=exc_info)

    def critical(self, msg: str, context: str = "Veilleur", exc_info=None) -> None:
        """Log critical (fatal) message."""
        self._log(logging.CRITICAL, msg, context, exc_info=exc_info)

    def close(self) -> None:
        """
        Flush and detach handler.

        Closes the log file when output is file; stdout is left open.
        """
        self.handler.flush()
        for logger in [self.logger] + [logging.getLogger(n) for n in SERVER_LOGGERS]:
            if self.handler in logger.handlers:
                logger.removeHandler(self.handler)
        if self.output == "file":
            self.handler.close()
