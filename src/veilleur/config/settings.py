"""
Configuration management for Veilleur.

Hybrid configuration system using a YAML file and environment variables.
Priority: Environment variables > YAML config > Pydantic defaults

The YAML file is the first one found in the search path:
    - ./config/configuration.yaml
    - $HOME/.bertzzie.com/configuration.yaml
    - /etc/bertzzie.com/configuration.yaml
"""

import os
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from veilleur.domain.exceptions import ConfigurationError

CONFIG_FILE_NAME = "configuration.yaml"


def default_search_paths() -> List[Path]:
    """
    Get config file search path, in lookup order.

    Resolved on every call so that $HOME changes are honored.

    Returns:
        Candidate config file paths
    """
    return [
        Path("./config") / CONFIG_FILE_NAME,
        Path(os.path.expandvars("$HOME/.bertzzie.com")) / CONFIG_FILE_NAME,
        Path("/etc/bertzzie.com") / CONFIG_FILE_NAME,
    ]


def parse_address(address: str) -> Tuple[str, int]:
    """
    Split a "host:port" bind address.

    An empty host (":8080") binds all interfaces. IPv6 hosts may be
    bracketed ("[::1]:8080").

    Args:
        address: Bind address

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If address is not host:port or port is out of range
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        raise ValueError(f"Invalid address {address!r}: expected host:port")

    if not port.isdigit() or not 0 <= int(port) <= 65535:
        raise ValueError(f"Invalid port in address {address!r}")

    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


class LoggingConfig(BaseModel):
    """
    Logging configuration.

    Values are validated by SystemReporter, not here: unknown format and
    output degrade to defaults, an unknown level is fatal at startup.
    """

    model_config = ConfigDict(frozen=True)

    file: str = Field(default="./log/application.log")
    format: str = Field(default="json")
    level: str = Field(default="info")
    output: str = Field(default="stdout")


class TimeoutsConfig(BaseModel):
    """HTTP timeouts in seconds. Zero disables read/write timeouts."""

    model_config = ConfigDict(frozen=True)

    write: int = Field(default=15, ge=0)
    read: int = Field(default=15, ge=0)
    idle: int = Field(default=60, ge=0)
    grace: int = Field(
        default=0,
        ge=0,
        description="Seconds to wait for in-flight requests on shutdown",
    )


class HttpConfig(BaseModel):
    """HTTP server configuration."""

    model_config = ConfigDict(frozen=True)

    address: str = Field(default="0.0.0.0:8080")
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Validate bind address."""
        parse_address(v)
        return v

    @property
    def host(self) -> str:
        """Host part of bind address."""
        return parse_address(self.address)[0]

    @property
    def port(self) -> int:
        """Port part of bind address."""
        return parse_address(self.address)[1]


class Settings(BaseSettings):
    """
    Veilleur configuration schema.

    Immutable once built. Constructed once at startup by load_config()
    and passed to every component that needs it.

    Environment variables use the VEILLEUR_ prefix and "__" for nesting,
    e.g. VEILLEUR_HTTP__TIMEOUTS__GRACE=10.
    """

    model_config = SettingsConfigDict(
        env_prefix="VEILLEUR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    # Path of the YAML file the settings were loaded from
    config_file: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        """Let environment variables override YAML values."""
        return env_settings, init_settings

    def get(self, key: str) -> Any:
        """
        Read a value by dotted key.

        Args:
            key: Dotted key, e.g. "http.timeouts.read"

        Returns:
            Configured value

        Raises:
            KeyError: If key does not exist
        """
        value: Any = self
        for part in key.split("."):
            if not isinstance(value, BaseModel) or part not in type(value).model_fields:
                raise KeyError(key)
            value = getattr(value, part)
        return value


def find_config_file(search_paths: Iterable[Union[str, Path]]) -> Path:
    """
    Find first existing config file.

    Args:
        search_paths: Candidate paths, in lookup order

    Returns:
        Path of first existing file

    Raises:
        ConfigurationError: If no candidate exists
    """
    candidates = [Path(p) for p in search_paths]
    for path in candidates:
        if path.is_file():
            return path

    searched = ", ".join(str(p) for p in candidates)
    raise ConfigurationError(f"Config file not found (searched: {searched})")


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read YAML config file.

    Args:
        path: Config file path

    Returns:
        Parsed mapping (empty for an empty file)

    Raises:
        ConfigurationError: If file cannot be read or is not a YAML mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Error reading config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing config file {path}: {e}") from e

    if loaded is None:
        return {}

    if not isinstance(loaded, dict):
        raise ConfigurationError(
            f"Config file {path} must contain a mapping, "
            f"got {type(loaded).__name__}"
        )

    return loaded


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    search_paths: Optional[Iterable[Union[str, Path]]] = None,
) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority: ENV vars > YAML file > defaults

    Args:
        config_file: Explicit config file (replaces the search path)
        search_paths: Optional search path override

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If no config file is found, it cannot be
            parsed, or values fail validation
    """
    if config_file is not None:
        candidates = [Path(config_file)]
    elif search_paths is not None:
        candidates = [Path(p) for p in search_paths]
    else:
        candidates = default_search_paths()

    path = find_config_file(candidates)
    loaded = read_config_file(path)
    loaded.pop("config_file", None)

    try:
        return Settings(**loaded, config_file=str(path))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}: {e}") from e
