"""
Structured Logging - JSON logging with structlog

Every event carries the service name so conversion logs can be filtered
when mdindex runs inside a larger process. ``settings.debug`` forces
DEBUG level, which surfaces per-stage events such as ``thinning.complete``.
"""

import structlog
import logging
import sys

from ..core.config import settings
from ..core.exceptions import ConfigurationError


def _add_service_name(logger, method_name, event_dict):
    """Tag each event with the configured service and environment."""
    event_dict.setdefault("service", settings.service_name)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def resolve_log_level(level: str = None) -> int:
    """
    Map a level name to a logging constant.

    Args:
        level: Explicit level name. Falls back to DEBUG when
            ``settings.debug`` is on, otherwise to ``settings.log_level``.

    Raises:
        ConfigurationError: If the name is not a standard logging level.
    """
    if level is None:
        level = "DEBUG" if settings.debug else settings.log_level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ConfigurationError(f"Unknown log level: {level}")
    return value


def setup_logging(level: str = None):
    """
    Configure structured logging.

    Uses JSON format in production, colored output in development.
    Logs go to stderr so CLI JSON output on stdout stays clean.
    """
    log_level = resolve_log_level(level)

    shared_processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.environment == "production":
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)
    logging.getLogger().setLevel(log_level)
    return log_level


def get_logger(name: str = None):
    """Get a structlog logger"""
    return structlog.get_logger(name or __name__)
