"""Structured logging for terracache.

structlog renders through the stdlib logging module, so uvicorn and FastAPI
records share terracache's format. Records go to stderr to keep CLI stdout
parseable.

Environment Variables:
    TERRACACHE_LOG_FORMAT: "json" or "console" (default)
    TERRACACHE_LOG_LEVEL: DEBUG, INFO (default), WARNING, ERROR
    TERRACACHE_SERVICE_NAME: Service name bound to every record
"""

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.typing import Processor

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "terracache"

ENV_LOG_FORMAT = "TERRACACHE_LOG_FORMAT"
ENV_LOG_LEVEL = "TERRACACHE_LOG_LEVEL"
ENV_SERVICE_NAME = "TERRACACHE_SERVICE_NAME"

REDACTED_PLACEHOLDER = "***REDACTED***"

# Substrings marking backend config entries that hold credentials
_CREDENTIAL_MARKERS = ("password", "token", "secret", "key", "authorization", "auth")

# Backend config keys that contain a marker but name objects, not credentials
_OBJECT_NAME_KEYS = frozenset({"key", "bucket_key"})

_logging_configured = False


def _is_credential(name: str) -> bool:
    lower = name.lower()
    return lower not in _OBJECT_NAME_KEYS and any(m in lower for m in _CREDENTIAL_MARKERS)


def sanitize_for_logging(config: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a backend config with credential values redacted.

    Nested mappings and mappings inside lists are handled recursively.

    Example:
        >>> sanitize_for_logging({"bucket": "b", "key": "a.tfstate", "secret_key": "x"})
        {'bucket': 'b', 'key': 'a.tfstate', 'secret_key': '***REDACTED***'}
    """
    sanitized: dict[str, Any] = {}
    for name, value in (config or {}).items():
        if _is_credential(name):
            sanitized[name] = REDACTED_PLACEHOLDER
        elif isinstance(value, dict):
            sanitized[name] = sanitize_for_logging(value)
        elif isinstance(value, list):
            sanitized[name] = [
                sanitize_for_logging(item) if isinstance(item, dict) else item for item in value
            ]
        else:
            sanitized[name] = value
    return sanitized


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Configure structlog and the root logger.

    Arguments left as None fall back to the TERRACACHE_* environment
    variables, then to the defaults. Unknown levels fall back to INFO.
    Without force, only the first call has any effect.
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = (log_format or os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT)).lower()
    log_level = (log_level or os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)).upper()
    service_name = service_name or os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)

    level = logging.getLevelName(log_level)
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    structlog.contextvars.bind_contextvars(service=service_name)

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, configuring defaults on first use."""
    if not _logging_configured:
        configure_logging()
    return structlog.stdlib.get_logger(name)


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Bind values to every record logged inside the block, then unbind them.

    Keys bound outside the block (such as ``service``) are left untouched.

    Example:
        >>> with log_context(working_dir="live/prod/vpc"):
        ...     get_logger(__name__).info("terracache.state.located")
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield
