"""
Configuration Management.

Builds the effective configuration for one command invocation from a cascade
of sources. Highest priority first:

    1. Command line flags (--debug, --host, --timeout, --workers)
    2. Environment variables (SYNSE_DEBUG, SYNSE_HOST, SYNSE_TIMEOUT, SYNSE_WORKERS)
    3. Configuration file, first found of:
         ./.synse.yaml, ./.synse.yml, ~/.synse.yaml, ~/.synse.yml
    4. Built-in defaults

A missing configuration file is not an error. A file that exists but cannot
be parsed, or does not match the schema in config_schema.py, is.

The configuration is a plain value. It is resolved once by the CLI entry
point and passed down to commands; nothing here is cached at module level.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from synse_cli.core.config_schema import (
    DEFAULT_TIMEOUT,
    DEFAULT_WORKERS,
    ConfigFileSchema,
)
from synse_cli.core.exceptions import ConfigError
from synse_cli.core.logging import get_logger

logger = get_logger(__name__)

CONFIG_FILENAMES = (".synse.yaml", ".synse.yml")
LOCAL_HOST_NAME = "local"
LOCAL_HOST_ADDRESS = "localhost:5000"


@dataclass(frozen=True)
class HostConfig:
    """A named Synse Server endpoint."""

    name: str
    address: str


@dataclass(frozen=True)
class EffectiveConfig:
    """
    Resolved configuration for a single command invocation.

    active_host is always set and always one of hosts.
    """

    debug: bool
    active_host: HostConfig
    hosts: tuple[HostConfig, ...]
    timeout: float = DEFAULT_TIMEOUT
    workers: int = DEFAULT_WORKERS
    config_file: Path | None = None

    def get_host(self, name: str) -> HostConfig | None:
        """Look up a configured host by name."""
        for host in self.hosts:
            if host.name == name:
                return host
        return None


@dataclass(frozen=True)
class CliOverrides:
    """Values given on the command line. None means the flag was not set."""

    debug: bool | None = None
    host: str | None = None
    timeout: float | None = None
    workers: int | None = None


class EnvSettings(BaseSettings):
    """Overrides read from SYNSE_* environment variables."""

    debug: bool | None = None
    host: str | None = None
    timeout: float | None = Field(default=None, gt=0)
    workers: int | None = Field(default=None, gt=0)

    model_config = SettingsConfigDict(
        env_prefix="SYNSE_",
        case_sensitive=False,
        extra="ignore",
    )


def default_search_paths() -> list[Path]:
    """Directories searched for a config file: working directory, then home."""
    return [Path.cwd(), Path.home()]


def find_config_file(search_paths: Sequence[Path] | None = None) -> Path | None:
    """
    Find the first configuration file on the search path.

    Args:
        search_paths: Directories to search in order. Defaults to cwd then home.

    Returns:
        Path to the file, or None if no directory holds one.
    """
    directories = default_search_paths() if search_paths is None else search_paths
    for directory in directories:
        for filename in CONFIG_FILENAMES:
            candidate = Path(directory) / filename
            if candidate.is_file():
                return candidate
    return None


def load_config_file(path: Path) -> ConfigFileSchema:
    """
    Load and validate a configuration file.

    An empty file yields an empty configuration.

    Raises:
        ConfigError: If the file cannot be read, is not YAML, or fails the schema.
    """
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file: {e.strerror}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Configuration file is not valid YAML: {e}", path=str(path)) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Configuration file must contain a mapping, got {type(raw).__name__}",
            path=str(path),
        )

    try:
        return ConfigFileSchema(**raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration:\n{e}", path=str(path)) from e


def load_env_settings() -> EnvSettings:
    """
    Read SYNSE_* environment overrides.

    Raises:
        ConfigError: If a variable holds a value of the wrong type.
    """
    try:
        return EnvSettings()
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid SYNSE_* environment variable:\n{e}") from e


def _first(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def resolve_config(
    overrides: CliOverrides | None = None,
    search_paths: Sequence[Path] | None = None,
) -> EffectiveConfig:
    """
    Merge CLI flags, environment and configuration file into one config.

    The built-in "local" host (localhost:5000) is always added to the host
    list and becomes the active host when no other source selects one.

    Args:
        overrides: Values from command line flags.
        search_paths: Directories to search for a config file.

    Returns:
        The effective configuration.

    Raises:
        ConfigError: If the config file is invalid, an environment variable has
            the wrong type, or the selected active host is not configured.
    """
    overrides = overrides or CliOverrides()

    config_file = find_config_file(search_paths)
    if config_file is None:
        logger.debug("No config file found, using defaults")
        file_config = ConfigFileSchema()
    else:
        file_config = load_config_file(config_file)
        logger.debug(
            "Loading config",
            file=str(config_file),
            settings=file_config.model_dump(exclude_none=True),
        )

    env = load_env_settings()

    hosts = [HostConfig(name=h.name, address=h.address) for h in file_config.hosts or []]
    if not any(host.name == LOCAL_HOST_NAME for host in hosts):
        hosts.append(HostConfig(name=LOCAL_HOST_NAME, address=LOCAL_HOST_ADDRESS))

    active_name = _first(overrides.host, env.host or None, file_config.active_host)
    if active_name is None:
        active_name = LOCAL_HOST_NAME

    active_host = next((host for host in hosts if host.name == active_name), None)
    if active_host is None:
        raise ConfigError(
            f"Active host {active_name!r} is not configured "
            f"(known hosts: {', '.join(host.name for host in hosts)})",
            path=str(config_file) if config_file else None,
        )

    config = EffectiveConfig(
        debug=_first(overrides.debug, env.debug, file_config.debug, False),
        active_host=active_host,
        hosts=tuple(hosts),
        timeout=_first(overrides.timeout, env.timeout, file_config.timeout, DEFAULT_TIMEOUT),
        workers=_first(overrides.workers, env.workers, file_config.workers, DEFAULT_WORKERS),
        config_file=config_file,
    )

    logger.debug("final config", config=repr(config))
    return config
