"""Structured logging for the schema compiler.

Compilation events go through structlog on top of the standard library
``docschema`` logger. ``setup_logging`` applies ``CompilerConfig`` the first
time a compiler is created, unless the host application has already
configured structlog itself. The default level is ``WARNING``, so a plain
``compile_schema`` call prints nothing.

Every event logged while a schema is being compiled carries the
``schema_path`` of the object being walked (``<root>`` for the document).
"""

from collections.abc import Mapping
from contextvars import Token
import logging
import sys
import time
from typing import Any

import structlog
from structlog.typing import EventDict

from .config import CompilerConfig
from .config import config as default_config

PACKAGE_LOGGER = "docschema"


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag events with the service name and the emitting compiler module."""
    event_dict["service"] = "docschema"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def configure_logging(
    environment: str = "development", log_level: str = "WARNING", json_logs: bool = False
) -> None:
    """Configure structured logging for compilation events.

    Args:
        environment: Application environment (development/testing/production)
        log_level: Level of the ``docschema`` logger (DEBUG shows every field)
        json_logs: Whether to output JSON format logs
    """
    level = getattr(logging, log_level.upper())

    # Configure stdlib logging to work with structlog
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger(PACKAGE_LOGGER).setLevel(level)

    if json_logs or environment == "production":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging(settings: CompilerConfig | None = None) -> bool:
    """Configure logging from settings unless structlog is already configured.

    Returns:
        True if this call installed the configuration
    """
    if structlog.is_configured():
        return False

    settings = settings or default_config
    configure_logging(
        environment=settings.environment,
        log_level=settings.log_level,
        json_logs=settings.json_logs or settings.is_production,
    )
    return True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        structlog logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Mapping[str, Token[Any]]:
    """Bind context variables for the events that follow.

    Returns:
        Tokens restoring the previous values via ``reset_context``
    """
    return structlog.contextvars.bind_contextvars(**kwargs)


def reset_context(tokens: Mapping[str, Token[Any]]) -> None:
    """Restore context variables bound by ``bind_context``."""
    structlog.contextvars.reset_contextvars(**tokens)


class CompilationLogger:
    """Time a root compilation and log its outcome."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, operation: str):
        self.logger = logger
        self.operation = operation
        self.start_time: float | None = None

    def __enter__(self) -> "CompilationLogger":
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Compilation started",
            operation=self.operation,
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        duration = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(
                "Compilation completed",
                operation=self.operation,
                duration_ms=round(duration * 1000, 2),
            )
        else:
            self.logger.error(
                "Compilation failed",
                operation=self.operation,
                duration_ms=round(duration * 1000, 2),
                error=str(exc_val),
                error_type=exc_type.__name__,
            )

    def log_progress(self, message: str, **kwargs: Any) -> None:
        """Log an intermediate compilation step."""
        self.logger.debug(
            message,
            operation=self.operation,
            **kwargs,
        )
