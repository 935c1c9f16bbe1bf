"""
Structlog-based logging configuration for ChestTracker.

The memory core runs inside a game client, so logging is routed through the
standard library root logger (which the host usually owns) and rendered either
as key/value pairs or as JSON lines.
"""

# pylint: disable=too-few-public-methods  # Reason: Logging state container with focused responsibility

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

logger = structlog.get_logger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class _LoggingState:
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    level: str | None = None


_logging_state = _LoggingState()


def _build_processors(json_output: bool) -> list[Any]:
    """Assemble the structlog processor chain, renderer last."""
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.processors.KeyValueRenderer(sort_keys=False)
    )
    return [
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_structlog(log_level: str = "INFO", json_output: bool = False, *, force: bool = False) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render events as JSON lines instead of key=value pairs
        force: Reconfigure even if logging was already initialized
    """
    level = log_level.upper()
    if level not in VALID_LOG_LEVELS:
        raise ValueError(f"Invalid log level: {log_level}. Must be one of {', '.join(VALID_LOG_LEVELS)}")

    if _logging_state.initialized and not force:
        logger.debug("configure_structlog skipped; logging already initialized", level=_logging_state.level)
        return

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level))

    structlog.configure(
        processors=_build_processors(json_output),
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )

    _logging_state.initialized = True
    _logging_state.level = level
    get_logger("chesttracker.structured_logging").info(
        "Logging system initialized", log_level=level, json_output=json_output
    )


def setup_logging(config: Any) -> None:
    """
    Configure logging from an application config object.

    Args:
        config: AppConfig (or anything exposing a ``logging`` section with
            ``level`` and ``json_output``)
    """
    configure_structlog(config.logging.level, config.logging.json_output)


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    This is the public API for obtaining loggers. All application code
    should use this function rather than calling structlog.get_logger()
    directly.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)
