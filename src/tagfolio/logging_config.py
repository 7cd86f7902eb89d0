"""
Centralized logging configuration for tagfolio application.

Structured logging is set up once with structlog. Development runs get a
console renderer, every other environment gets one JSON object per line.
"""

import inspect
import logging
import os
import sys
from typing import Any

import structlog

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_configured = False


def get_log_level() -> int:
    """
    Get log level from the LOG_LEVEL environment variable.

    Returns:
        int: Log level constant from logging module, INFO when unset or unknown
    """
    return _LEVELS.get(os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)


DEVELOPMENT_ENVIRONMENTS = ["development", "dev", "local", "test", "testing"]


def is_development_environment() -> bool:
    """Check if running in development environment."""
    return os.getenv("ENVIRONMENT", "development").lower().strip() in DEVELOPMENT_ENVIRONMENTS


def configure_structured_logging(force: bool = False) -> None:
    """
    Configure structured logging for the entire application.

    Streamlit re-executes the main script on every interaction, so repeated
    calls are no-ops unless ``force`` is set.
    """
    global _configured
    if _configured and not force:
        return

    log_level = get_log_level()
    is_dev = is_development_environment()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(log_level)
    _configured = True

    structlog.get_logger("tagfolio.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
    )


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (optional, defaults to calling module)

    Returns:
        structlog.BoundLogger: Configured logger instance
    """
    if name is None:
        frame = inspect.currentframe()
        if frame and frame.f_back:
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name)


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """Log how long an operation took, in seconds."""
    get_logger("tagfolio.performance").info(
        "performance_metric", operation=operation, duration_seconds=duration, **context
    )


def log_user_action(user_id: str, action: str, **context: Any) -> None:
    """
    Log owner actions for the audit trail.

    Args:
        user_id: User identifier
        action: Action performed
        **context: Additional context information
    """
    get_logger("tagfolio.user_actions").info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log errors with structured context.

    Args:
        error: Exception that occurred
        context: Additional context information
    """
    error_context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if context:
        error_context.update(context)

    get_logger("tagfolio.errors").error("error_occurred", **error_context, exc_info=error)


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """Log security-related events such as failed logins."""
    get_logger("tagfolio.security").warning("security_event", event_type=event_type, user_id=user_id, **context)
