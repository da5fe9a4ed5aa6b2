"""
Configuration management for immuadmin.

Settings are resolved once per process, right before the first command
runs, from environment variables, a ``.env`` file, an optional TOML
config file and built-in defaults (in that order of precedence).
"""

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from immuadmin.errors import ConfigError
from immuadmin.log import LOG_LEVELS, configure_logging, get_logger

logger = get_logger("config")


class AdminSettings(BaseSettings):
    """Client settings shared by every admin command."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server connection
    address: str = "127.0.0.1"
    port: int = Field(default=3322, ge=1, le=65535)

    # Mutual TLS
    mtls: bool = False
    servername: str = "localhost"
    pkey: str = ""
    certificate: str = ""
    clientcas: str = ""

    # Session
    tokenfile: str = "token_admin"

    # Logging
    log_level: str = "WARNING"
    log_format: Literal["console", "json"] = "console"

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file values arrive as init kwargs and rank below the environment
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def default_config_paths(app_name: str) -> list[Path]:
    """Config file locations searched when none is given explicitly."""
    return [
        Path("configs") / f"{app_name}.toml",
        Path.home() / f".{app_name}.toml",
    ]


def read_config_file(path: Path) -> dict[str, Any]:
    """Load a TOML config file.

    Args:
        path: Config file path

    Returns:
        Top-level table of the file
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid config file: {e}", source=str(path)) from e
    except OSError as e:
        raise ConfigError(f"cannot read config file: {e.strerror}", source=str(path)) from e


class Options:
    """Process-wide settings holder.

    Created empty at start-up and populated by :meth:`init_config` when the
    first command is about to run. Commands read settings through
    :meth:`get`, which reports a configuration that could not be loaded.
    """

    def __init__(self, config_file: Path | None = None):
        self.config_file = config_file
        self.config_source: Path | None = None
        self.settings: AdminSettings | None = None
        self.error: ConfigError | None = None

    @property
    def loaded(self) -> bool:
        return self.settings is not None

    def get(self) -> AdminSettings:
        """Return the resolved settings.

        Raises:
            ConfigError: If loading failed or has not happened yet
        """
        if self.error is not None:
            raise self.error
        if self.settings is None:
            raise ConfigError("configuration has not been initialized")
        return self.settings

    def resolve_config_file(self, app_name: str) -> Path | None:
        """Pick the config file to read, if any."""
        if self.config_file is not None:
            if not self.config_file.is_file():
                raise ConfigError("config file not found", source=str(self.config_file))
            return self.config_file

        for path in default_config_paths(app_name):
            if path.is_file():
                return path
        return None

    def load(self, app_name: str) -> AdminSettings:
        """Resolve, read and validate the settings for ``app_name``.

        Raises:
            ConfigError: If the config file is missing or malformed, or a
                value is invalid
        """
        path = self.resolve_config_file(app_name)
        values = read_config_file(path) if path else {}

        try:
            settings = AdminSettings(_env_prefix=f"{app_name.upper()}_", **values)
        except ValidationError as e:
            source = str(path) if path else None
            raise ConfigError(f"invalid configuration: {e}", source=source) from e

        self.config_source = path
        return settings

    def init_config(self, app_name: str) -> AdminSettings | None:
        """Populate the settings for ``app_name``.

        Environment variables are prefixed with the upper-cased application
        name (``IMMUADMIN_PORT``). A configuration that cannot be loaded is
        kept in :attr:`error` and raised by :meth:`get`, so commands that do
        not need settings still run. Calling this again is a no-op.
        """
        if self.settings is not None or self.error is not None:
            return self.settings

        try:
            settings = self.load(app_name)
        except ConfigError as e:
            self.error = e
            logger.debug("configuration not loaded", app=app_name, error=str(e))
            return None

        self.settings = settings
        configure_logging(level=settings.log_level, format=settings.log_format)
        logger.debug(
            "configuration loaded",
            app=app_name,
            source=str(self.config_source) if self.config_source else "defaults",
        )
        return settings
