"""
Test fixtures and configuration.
"""

import io
import socket
from pathlib import Path

import pytest
import yaml

from veilleur.config.settings import LoggingConfig, Settings
from veilleur.infrastructure.reporter import SystemReporter


@pytest.fixture
def free_port() -> int:
    """Reserve and release a loopback port for a test server."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture
def log_stream() -> io.StringIO:
    """In-memory stream receiving stdout log output."""
    return io.StringIO()


@pytest.fixture
def reporter(log_stream: io.StringIO):
    """Text-format reporter writing to log_stream."""
    reporter = SystemReporter(
        LoggingConfig(format="text", level="debug"),
        name="veilleur-test",
        stream=log_stream,
    )
    yield reporter
    reporter.close()


@pytest.fixture
def write_config(tmp_path: Path):
    """Factory writing a YAML config file under tmp_path."""

    def _write(data, name: str = "configuration.yaml") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(data, str):
            path.write_text(data)
        else:
            path.write_text(yaml.safe_dump(data))
        return path

    return _write


@pytest.fixture
def make_settings(free_port: int):
    """Factory building Settings bound to a free loopback port."""

    def _make(grace: int = 1, **logging_overrides) -> Settings:
        return Settings(
            logging={"format": "text", "level": "debug", **logging_overrides},
            http={
                "address": f"127.0.0.1:{free_port}",
                "timeouts": {"read": 5, "write": 5, "idle": 5, "grace": grace},
            },
        )

    return _make
