"""Configuration for the release-age gate.

The minimum release age is read from an ``.npmrc``-style key/value file: a
line ``minimum-release-age=<days>`` sets the threshold. Reading the threshold
never fails; a missing file, missing key or unusable value falls back to the
default of 7 days and logs a warning.

Everything else (registry URL, request timeout, fan-out width) comes from
environment overrides. The resulting ``Config`` is built once per process and
passed explicitly to the components that need it.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

import structlog

from .parsers.version import parse_leading_int

logger = structlog.get_logger(__name__)

DEFAULT_MINIMUM_AGE_DAYS = 7
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_WORKERS = 8

CONFIG_FILE_NAME = ".npmrc"
MINIMUM_AGE_KEY = "minimum-release-age"

NPMRC_PATH_ENV_VAR = "NPM_AGE_GATE_NPMRC"
REGISTRY_URL_ENV_VAR = "NPM_AGE_GATE_REGISTRY_URL"
TIMEOUT_ENV_VAR = "NPM_AGE_GATE_TIMEOUT"
MAX_WORKERS_ENV_VAR = "NPM_AGE_GATE_MAX_WORKERS"


class ConfigError(RuntimeError):
    """Raised when an environment override cannot be used."""


class ConfigSource(Protocol):
    """Anything that can supply the minimum release age, in days."""

    def get_minimum_age_days(self) -> int: ...


@dataclass(slots=True, frozen=True)
class Config:
    """Immutable process configuration."""

    minimum_age_days: int = DEFAULT_MINIMUM_AGE_DAYS
    registry_url: str = DEFAULT_REGISTRY_URL
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        if self.minimum_age_days < 0:
            raise ConfigError("minimum_age_days must be non-negative")
        if not self.registry_url:
            raise ConfigError("registry_url must be provided")
        if self.fetch_timeout <= 0:
            raise ConfigError("fetch_timeout must be positive")
        if self.max_workers < 1:
            raise ConfigError("max_workers must be at least 1")

    def get_minimum_age_days(self) -> int:
        return self.minimum_age_days


class NpmrcConfigSource:
    """Read the threshold from an ``.npmrc`` file on first use."""

    def __init__(self, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else Path.cwd() / CONFIG_FILE_NAME
        self._value: int | None = None

    def get_minimum_age_days(self) -> int:
        if self._value is None:
            self._value = self._read()
        return self._value

    def _read(self) -> int:
        if not self.path.exists():
            logger.warning(
                "config_file_not_found",
                path=str(self.path),
                default=DEFAULT_MINIMUM_AGE_DAYS,
            )
            return DEFAULT_MINIMUM_AGE_DAYS

        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error(
                "config_file_unreadable",
                path=str(self.path),
                error=str(exc),
                default=DEFAULT_MINIMUM_AGE_DAYS,
            )
            return DEFAULT_MINIMUM_AGE_DAYS

        for line in content.splitlines():
            key, sep, raw = line.strip().partition("=")
            if not sep or key.strip() != MINIMUM_AGE_KEY:
                continue
            value = parse_leading_int(raw)
            if value is None:
                logger.warning(
                    "config_value_invalid",
                    path=str(self.path),
                    key=MINIMUM_AGE_KEY,
                    value=raw.strip(),
                    default=DEFAULT_MINIMUM_AGE_DAYS,
                )
                return DEFAULT_MINIMUM_AGE_DAYS
            # Ages are never negative; a negative threshold admits everything.
            value = max(value, 0)
            logger.info("config_minimum_age", path=str(self.path), days=value)
            return value

        logger.warning(
            "config_key_missing",
            path=str(self.path),
            key=MINIMUM_AGE_KEY,
            default=DEFAULT_MINIMUM_AGE_DAYS,
        )
        return DEFAULT_MINIMUM_AGE_DAYS


def _resolve_npmrc_path(cwd: Path | None, environ: Mapping[str, str]) -> Path:
    """Resolve the config file path.

    Priority:
    1. NPM_AGE_GATE_NPMRC environment variable
    2. .npmrc in the given working directory (default: process cwd)
    """
    env_path = environ.get(NPMRC_PATH_ENV_VAR)
    if env_path:
        return Path(env_path)
    return (cwd or Path.cwd()) / CONFIG_FILE_NAME


def _env_number(environ: Mapping[str, str], name: str, cast: type, default: float) -> float:
    raw = environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid value for {name}: {raw!r}") from exc


def load_config(
    cwd: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Build the process configuration.

    Raises:
        ConfigError: If an environment override is present but unusable.
    """
    environ = os.environ if environ is None else environ
    source = NpmrcConfigSource(_resolve_npmrc_path(Path(cwd) if cwd else None, environ))

    registry_url = environ.get(REGISTRY_URL_ENV_VAR, "").strip() or DEFAULT_REGISTRY_URL
    return Config(
        minimum_age_days=source.get_minimum_age_days(),
        registry_url=registry_url.rstrip("/"),
        fetch_timeout=_env_number(environ, TIMEOUT_ENV_VAR, float, DEFAULT_FETCH_TIMEOUT),
        max_workers=int(_env_number(environ, MAX_WORKERS_ENV_VAR, int, DEFAULT_MAX_WORKERS)),
    )
