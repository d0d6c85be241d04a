"""terracache error taxonomy.

Every error raised by terracache derives from TerraCacheError and carries a
code following the ``terracache:<area>/<kind>`` pattern, a human-readable
message and optional details for structured logging.
"""

from __future__ import annotations

import json
from typing import Any


class TerraCacheError(Exception):
    """Base exception for all terracache errors.

    Attributes:
        code: Error code following the terracache:<area>/<kind> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class StateSyntaxError(TerraCacheError, json.JSONDecodeError):
    """Raised when a state document is not valid JSON.

    Subclasses json.JSONDecodeError so callers can classify it as a JSON
    syntax failure with a plain isinstance check. The constructor keeps the
    JSONDecodeError signature (msg, doc, pos) so the error pickles cleanly.

    Attributes:
        lineno: Line of the offending character (1-based)
        colno: Column of the offending character (1-based)
        pos: Offset of the offending character in the document
    """

    def __init__(
        self, msg: str, doc: str, pos: int, details: dict[str, Any] | None = None
    ) -> None:
        json.JSONDecodeError.__init__(self, msg, doc, pos)
        self.code = "terracache:state/syntax"
        self.message = f"Invalid state JSON: {msg} (line {self.lineno}, column {self.colno})"
        self.details = {"line": self.lineno, "column": self.colno, **(details or {})}

    def __str__(self) -> str:
        return self.message


class StateDecodeError(TerraCacheError):
    """Raised when a state document is valid JSON but does not fit the schema.

    Example: ``{"modules": 3}`` or a top-level array.
    """

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="terracache:state/invalid",
            message=f"Invalid state document: {reason}",
            details=details or {},
        )
        self.reason = reason


class StateFileNotFoundError(TerraCacheError):
    """Raised when a state file path does not exist."""

    def __init__(self, path: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="terracache:state/not_found",
            message=f"State file not found: {path}",
            details={"path": path, **(details or {})},
        )
        self.path = path


class StateFileReadError(TerraCacheError):
    """Raised when a state file exists but cannot be read."""

    def __init__(self, path: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="terracache:state/read_failed",
            message=f"Failed to read state file {path}: {reason}",
            details={"path": path, **(details or {})},
        )
        self.path = path
        self.reason = reason


class ConfigurationError(TerraCacheError):
    """Raised when server configuration (arguments or environment) is invalid.

    Attributes:
        setting: Name of the offending setting
    """

    def __init__(self, setting: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="terracache:config/invalid",
            message=f"Invalid configuration for {setting}: {reason}",
            details={"setting": setting, **(details or {})},
        )
        self.setting = setting
        self.reason = reason


class ProviderError(TerraCacheError):
    """Raised by an endpoint provider that cannot produce its endpoints.

    The discovery controller never raises this itself; it lets whatever a
    provider raises propagate so the server answers with a 5xx.
    """

    def __init__(self, provider: str, reason: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="terracache:discovery/provider_failed",
            message=f"Endpoint provider {provider} failed: {reason}",
            details={"provider": provider, **(details or {})},
        )
        self.provider = provider
        self.reason = reason


def is_json_syntax_error(exc: BaseException | None) -> bool:
    """Return True if exc, or any exception in its cause chain, is a JSON syntax error."""
    seen: set[int] = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, json.JSONDecodeError):
            return True
        seen.add(id(exc))
        exc = exc.__cause__ or exc.__context__
    return False
