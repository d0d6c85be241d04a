"""Decode legacy Terraform state documents.

Parsing is a pure function of the input: no state is shared between calls,
so the functions here are safe to call from any thread. Malformed JSON
raises StateSyntaxError (a json.JSONDecodeError); valid JSON that does not
fit the schema raises StateDecodeError. No partial model is ever returned.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from terracache.errors import (
    StateDecodeError,
    StateFileNotFoundError,
    StateFileReadError,
    StateSyntaxError,
)
from terracache.models.state import TerraformState
from terracache.observability.logging import get_logger, log_context, sanitize_for_logging

logger = get_logger(__name__)

DEFAULT_STATE_FILE = "terraform.tfstate"
"""File name Terraform writes local and cached remote state to."""

DEFAULT_DATA_DIR = ".terraform"
"""Terraform's per-working-directory data dir, where remote state is cached."""

ENV_DATA_DIR = "TF_DATA_DIR"


def _format_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "<document>"
    return f"{location}: {first['msg']}"


def parse_terraform_state(data: bytes | str, source: str | None = None) -> TerraformState:
    """Parse a legacy Terraform state document.

    Unknown keys are ignored and missing keys take their zero values, so
    ``{}`` yields an empty local state.

    Args:
        data: Raw document, as bytes (UTF-8, UTF-16 or UTF-32) or text.
        source: Optional origin (e.g. a file path) recorded in errors and logs.

    Returns:
        The parsed, immutable TerraformState.

    Raises:
        StateSyntaxError: If data is not valid JSON.
        StateDecodeError: If data is valid JSON but not a state document.

    Example:
        >>> state = parse_terraform_state(b'{"version": 1, "serial": 3}')
        >>> state.serial, state.is_remote()
        (3, False)
    """
    details: dict[str, Any] = {"source": source} if source else {}
    try:
        document = json.loads(data)
    except json.JSONDecodeError as exc:
        logger.warning(
            "terracache.state.parse_failed",
            source=source,
            error=exc.msg,
            line=exc.lineno,
            column=exc.colno,
        )
        raise StateSyntaxError(exc.msg, exc.doc, exc.pos, details=details) from exc
    except UnicodeDecodeError as exc:
        logger.warning("terracache.state.parse_failed", source=source, error=exc.reason)
        raise StateSyntaxError(
            f"Invalid {exc.encoding} encoding: {exc.reason}", "", 0, details=details
        ) from exc

    if not isinstance(document, dict):
        raise StateDecodeError(
            f"expected a JSON object, got {type(document).__name__}", details=details
        )

    try:
        state = TerraformState.model_validate(document)
    except ValidationError as exc:
        reason = _format_validation_error(exc)
        logger.warning("terracache.state.parse_failed", source=source, error=reason)
        raise StateDecodeError(reason, details=details) from exc

    logger.debug(
        "terracache.state.parsed",
        source=source,
        version=state.version,
        serial=state.serial,
        backend=state.backend.type if state.backend else None,
        backend_config=sanitize_for_logging(state.backend.config) if state.backend else None,
        module_count=len(state.modules),
    )
    return state


def parse_terraform_state_file(path: str | os.PathLike[str]) -> TerraformState:
    """Read a state file from disk and parse it.

    Raises:
        StateFileNotFoundError: If path does not exist.
        StateFileReadError: If path exists but cannot be read.
        StateSyntaxError: If the file is not valid JSON.
        StateDecodeError: If the file is not a state document.
    """
    state_path = Path(path)
    try:
        data = state_path.read_bytes()
    except FileNotFoundError as exc:
        raise StateFileNotFoundError(str(state_path)) from exc
    except OSError as exc:
        raise StateFileReadError(str(state_path), exc.strerror or str(exc)) from exc

    return parse_terraform_state(data, source=str(state_path))


def _resolve_data_dir(working_dir: Path, data_dir: str | os.PathLike[str] | None) -> Path:
    if data_dir is None:
        data_dir = os.environ.get(ENV_DATA_DIR) or DEFAULT_DATA_DIR
    resolved = Path(data_dir)
    if not resolved.is_absolute():
        resolved = working_dir / resolved
    return resolved


def find_terraform_state_file(
    working_dir: str | os.PathLike[str],
    data_dir: str | os.PathLike[str] | None = None,
) -> Path | None:
    """Locate the state file for a Terraform working directory.

    The cached copy of remote state in the data dir wins over a local
    ``terraform.tfstate`` in the working directory. The data dir defaults
    to ``$TF_DATA_DIR`` or ``.terraform``; relative data dirs are taken
    relative to ``working_dir``.

    Returns:
        Path of the first existing candidate, or None.
    """
    working_path = Path(working_dir)
    candidates = (
        _resolve_data_dir(working_path, data_dir) / DEFAULT_STATE_FILE,
        working_path / DEFAULT_STATE_FILE,
    )
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def parse_terraform_state_from_location(
    working_dir: str | os.PathLike[str],
    data_dir: str | os.PathLike[str] | None = None,
) -> TerraformState | None:
    """Parse the state of a working directory, or return None if it has none.

    A directory that was never initialised has no state file; that is not
    an error.
    """
    with log_context(working_dir=str(working_dir)):
        state_path = find_terraform_state_file(working_dir, data_dir)
        if state_path is None:
            logger.debug("terracache.state.not_found")
            return None
        logger.debug("terracache.state.located", path=str(state_path))
        return parse_terraform_state_file(state_path)
