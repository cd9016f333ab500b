"""Structured logging for the lineup rotation engine."""

import logging
import sys
import time
from functools import wraps
from typing import Callable, Optional

import structlog
from structlog.stdlib import LoggerFactory

from .config import LogFormat, get_settings


def configure_logging(level: Optional[str] = None, log_format: Optional[LogFormat] = None) -> None:
    """Configure structlog over stdlib logging.

    Explicit arguments win over settings so a CLI flag can override the environment.
    """
    settings = get_settings()
    level = (level or settings.LOG_LEVEL).upper()
    log_format = LogFormat(log_format or settings.LOG_FORMAT)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        processors.append(structlog.processors.JSONRenderer())
    elif log_format == LogFormat.STRUCTURED:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stderr keeps CLI stdout clean for --json output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def log_timing(event_name: Optional[str] = None):
    """Decorator that logs duration at DEBUG and failures at ERROR before re-raising."""
    def decorator(func: Callable) -> Callable:
        function_name = event_name or f"{func.__module__}.{func.__name__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.perf_counter()
            logger = get_logger(func.__module__)

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Function {function_name} failed",
                    error=str(e),
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                    function=function_name,
                    exc_info=True,
                )
                raise

            logger.debug(
                f"Function {function_name} completed",
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                function=function_name,
            )
            return result
        return wrapper
    return decorator
