"""
Unit tests for SystemReporter.

Tests format, level and output selection, including fallbacks.
"""

import json
import logging

import pytest

from veilleur.config.settings import LoggingConfig
from veilleur.domain.exceptions import LoggingConfigurationError
from veilleur.infrastructure.reporter import SystemReporter


def json_lines(text: str):
    return [json.loads(line) for line in text.splitlines() if line.strip()]


@pytest.fixture
def make_reporter(log_stream):
    reporters = []

    def _make(**config) -> SystemReporter:
        reporter = SystemReporter(
            LoggingConfig(**config), name="veilleur-reporter-test", stream=log_stream
        )
        reporters.append(reporter)
        return reporter

    yield _make

    for reporter in reporters:
        reporter.close()


class TestFormat:
    """Log format selection."""

    def test_json_format(self, make_reporter, log_stream):
        reporter = make_reporter(format="json")

        reporter.info("hello", context="Test")

        [entry] = json_lines(log_stream.getvalue())
        assert entry["level"] == "info"
        assert entry["msg"] == "hello"
        assert entry["context"] == "Test"
        assert "time" in entry
        assert reporter.format == "json"

    def test_text_format(self, make_reporter, log_stream):
        reporter = make_reporter(format="TEXT")

        reporter.warning("careful", context="Test")

        line = log_stream.getvalue().strip()
        assert " | WARNING  | [Test] careful" in line
        assert reporter.format == "text"

    def test_unknown_format_falls_back_to_json(self, make_reporter, log_stream):
        """Test unknown format uses JSON and logs a warning."""
        reporter = make_reporter(format="xml")

        reporter.info("after")

        entries = json_lines(log_stream.getvalue())
        assert reporter.format == "json"
        assert entries[0]["level"] == "warning"
        assert "Unknown log format xml" in entries[0]["msg"]
        assert entries[1]["msg"] == "after"

    def test_exception_included_in_json(self, make_reporter, log_stream):
        reporter = make_reporter()

        try:
            raise RuntimeError("boom")
        except RuntimeError:
            reporter.error("failed", exc_info=True)

        [entry] = json_lines(log_stream.getvalue())
        assert "RuntimeError: boom" in entry["error"]


class TestLevel:
    """Log level parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("debug", logging.DEBUG),
            ("INFO", logging.INFO),
            ("warn", logging.WARNING),
            ("warning", logging.WARNING),
            ("error", logging.ERROR),
            ("fatal", logging.CRITICAL),
            ("critical", logging.CRITICAL),
        ],
    )
    def test_valid_levels(self, make_reporter, value, expected):
        reporter = make_reporter(level=value)

        assert reporter.level == expected
        assert reporter.logger.level == expected

    def test_invalid_level_is_fatal(self, log_stream):
        with pytest.raises(LoggingConfigurationError) as exc_info:
            SystemReporter(LoggingConfig(level="verbose"), stream=log_stream)

        assert exc_info.value.level == "verbose"

    def test_messages_below_level_dropped(self, make_reporter, log_stream):
        reporter = make_reporter(level="warning")

        reporter.info("quiet")
        reporter.error("loud")

        entries = json_lines(log_stream.getvalue())
        assert [e["msg"] for e in entries] == ["loud"]


class TestOutput:
    """Log output selection."""

    def test_stdout_output(self, capsys):
        reporter = SystemReporter(LoggingConfig(output="stdout"))
        try:
            reporter.info("to stdout")
        finally:
            reporter.close()

        assert "to stdout" in capsys.readouterr().out
        assert reporter.output == "stdout"

    def test_unknown_output_falls_back_to_stdout(self, make_reporter, log_stream):
        """Test unknown output uses stdout and logs a warning."""
        reporter = make_reporter(output="syslog")

        reporter.info("after")

        entries = json_lines(log_stream.getvalue())
        assert reporter.output == "stdout"
        assert entries[0]["level"] == "warning"
        assert "Unknown log output syslog" in entries[0]["msg"]
        assert entries[1]["msg"] == "after"

    def test_file_output_creates_directory(self, make_reporter, log_stream, tmp_path):
        """Test missing log directory is created and lines land in file."""
        log_file = tmp_path / "nested" / "log" / "application.log"

        reporter = make_reporter(output="file", file=str(log_file))
        reporter.info("in file")
        reporter.close()

        assert reporter.output == "file"
        assert log_file.parent.is_dir()
        [entry] = json_lines(log_file.read_text())
        assert entry["msg"] == "in file"
        assert log_stream.getvalue() == ""

    def test_file_output_appends(self, make_reporter, tmp_path):
        log_file = tmp_path / "application.log"
        log_file.write_text('{"msg": "existing"}\n')

        reporter = make_reporter(output="file", file=str(log_file))
        reporter.info("appended")
        reporter.close()

        assert [e["msg"] for e in json_lines(log_file.read_text())] == [
            "existing",
            "appended",
        ]

    def test_directory_creation_failure_falls_back(
        self, make_reporter, log_stream, tmp_path
    ):
        """Test failed directory creation logs an error and uses stdout."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        log_file = blocker / "log" / "application.log"

        reporter = make_reporter(output="file", file=str(log_file))
        reporter.info("fallback")

        entries = json_lines(log_stream.getvalue())
        assert reporter.output == "stdout"
        assert entries[0]["level"] == "error"
        assert "Error creating log file directory" in entries[0]["msg"]
        assert entries[1]["msg"] == "fallback"

    def test_file_open_failure_falls_back(self, make_reporter, log_stream, tmp_path):
        """Test unopenable log file logs an error and uses stdout."""
        log_file = tmp_path / "is-a-directory"
        log_file.mkdir()

        reporter = make_reporter(output="file", file=str(log_file))
        reporter.info("fallback")

        entries = json_lines(log_stream.getvalue())
        assert reporter.output == "stdout"
        assert "Error opening log file" in entries[0]["msg"]
        assert entries[1]["msg"] == "fallback"


class TestServerLoggers:
    """uvicorn log routing."""

    def test_uvicorn_records_use_reporter_handler(self, make_reporter, log_stream):
        make_reporter()

        logging.getLogger("uvicorn.error").info("Application startup complete.")

        [entry] = json_lines(log_stream.getvalue())
        assert entry["msg"] == "Application startup complete."
        assert entry["context"] == "uvicorn.error"
