"""Observability helpers for terracache (structured logging)."""

from terracache.observability.logging import (
    configure_logging,
    get_logger,
    log_context,
    sanitize_for_logging,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_context",
    "sanitize_for_logging",
]
