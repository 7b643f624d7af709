"""Structured logging setup.

Every module obtains its logger via ``get_logger(__name__)`` and logs an
event message with keyword context. ``configure_logging`` is called once by
the application lifespan.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog on top of the stdlib logging module.

    Args:
        level: Root log level name (e.g. 'INFO', 'DEBUG').
        json_logs: Render JSON lines instead of the console renderer.
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        stream=sys.stdout,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to the given module name.

    Args:
        name: Logger name, normally ``__name__``.

    Returns:
        Logger accepting an event message plus keyword context.
    """
    return structlog.get_logger(name)
