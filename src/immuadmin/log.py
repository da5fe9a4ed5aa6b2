"""
Logging configuration for immuadmin.

Loggers are structlog bound loggers writing to standard error, so command
output on standard output stays clean.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")

# Global configuration
_GLOBAL_CONFIG: dict[str, Any] = {
    "level": "WARNING",
    "format": "console",
}


def _stderr_logger(*args: Any) -> structlog.PrintLogger:
    # Resolved per call so a replaced sys.stderr is always honoured
    return structlog.PrintLogger(sys.stderr)


def _processors(format: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    return processors


def configure_logging(level: str | None = None, format: str | None = None) -> None:
    """
    Configure structlog for the process.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (console, json)
    """
    if level is not None:
        level = level.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        _GLOBAL_CONFIG["level"] = level
    if format is not None:
        format = format.lower()
        if format not in LOG_FORMATS:
            raise ValueError(f"Unknown log format: {format}")
        _GLOBAL_CONFIG["format"] = format

    structlog.configure(
        processors=_processors(_GLOBAL_CONFIG["format"]),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(_GLOBAL_CONFIG["level"])
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(scope: str) -> Any:
    """Get a logger bound to a component scope (e.g. "dispatcher", "plugins")."""
    return structlog.get_logger(component=scope)


def get_config() -> dict[str, Any]:
    """Get current logging configuration."""
    return _GLOBAL_CONFIG.copy()


def reset_config() -> None:
    """Reset logging to defaults."""
    _GLOBAL_CONFIG.update(level="WARNING", format="console")
    configure_logging()


configure_logging()
