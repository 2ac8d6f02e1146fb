"""Logging for ReviewHub.

structlog renders every record, including those from protean and uvicorn
that arrive through stdlib logging, so a request's bound context
(``actor_id``, ``path``) shows up on all of them. Output goes to stdout;
``REVIEWHUB_LOG_FILE`` adds a rotating file next to it.
"""

import logging
import logging.handlers
import os
import sys
from typing import Any

import structlog

_JSON_ENVIRONMENTS = ("production", "staging")

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "test": "WARNING",
}

# Handlers added by configure_logging, replaced on the next call
_installed: list[logging.Handler] = []


def _environment() -> str:
    return (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def _renderer(environment: str):
    if environment in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
    )


def configure_logging(level: str | None = None) -> None:
    """Route stdlib and structlog records through one structlog formatter."""
    environment = _environment()
    log_level = (level or os.getenv("LOG_LEVEL") or _LEVELS.get(environment, "DEBUG")).upper()

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(environment),
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = os.getenv("REVIEWHUB_LOG_FILE")
    if log_file:
        handlers.append(
            logging.handlers.RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    root = logging.getLogger()
    while _installed:
        old = _installed.pop()
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
        _installed.append(handler)
    root.setLevel(log_level)

    # Protean logs every UoW and handler dispatch at INFO
    logging.getLogger("protean").setLevel(max(logging.WARNING, root.level))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def add_context(**kwargs: Any) -> None:
    """Bind values (e.g. the acting user) to every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
