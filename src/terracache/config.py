"""Cache server configuration.

Settings come from keyword arguments first, then ``TERRACACHE_*``
environment variables, then defaults.

Environment Variables:
    TERRACACHE_HOST: Interface to bind (default 127.0.0.1)
    TERRACACHE_PORT: Port to bind (default 5758)
    TERRACACHE_PROVIDERS_PATH: Path advertised for providers.v1
    TERRACACHE_MODULES_PATH: Path advertised for modules.v1
    TERRACACHE_EXTRA_ENDPOINTS: JSON object of additional discovery entries
"""

from __future__ import annotations

import json
import os
from typing import Any

from pydantic import Field, ValidationError

from terracache.cache.endpoints import DEFAULT_MODULES_PATH, DEFAULT_PROVIDERS_PATH
from terracache.errors import ConfigurationError
from terracache.models.base import TerraCacheBaseModel

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5758

ENV_HOST = "TERRACACHE_HOST"
ENV_PORT = "TERRACACHE_PORT"
ENV_PROVIDERS_PATH = "TERRACACHE_PROVIDERS_PATH"
ENV_MODULES_PATH = "TERRACACHE_MODULES_PATH"
ENV_EXTRA_ENDPOINTS = "TERRACACHE_EXTRA_ENDPOINTS"


class CacheServerConfig(TerraCacheBaseModel):
    """Settings for the registry cache server.

    Attributes:
        host: Interface to bind.
        port: TCP port to bind.
        providers_path: Path advertised for the provider registry protocol.
        modules_path: Path advertised for the module registry protocol.
        extra_endpoints: Additional discovery entries, merged last.
    """

    host: str = Field(default=DEFAULT_HOST, min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    providers_path: str = Field(default=DEFAULT_PROVIDERS_PATH, min_length=1)
    modules_path: str = Field(default=DEFAULT_MODULES_PATH, min_length=1)
    extra_endpoints: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> CacheServerConfig:
        """Build a config from the environment; non-None overrides win.

        Raises:
            ConfigurationError: If a setting is malformed or out of range.
        """
        values: dict[str, Any] = {}

        if host := os.environ.get(ENV_HOST):
            values["host"] = host
        if port := os.environ.get(ENV_PORT):
            try:
                values["port"] = int(port)
            except ValueError as exc:
                raise ConfigurationError(ENV_PORT, f"not an integer: {port!r}") from exc
        if providers_path := os.environ.get(ENV_PROVIDERS_PATH):
            values["providers_path"] = providers_path
        if modules_path := os.environ.get(ENV_MODULES_PATH):
            values["modules_path"] = modules_path
        if extra := os.environ.get(ENV_EXTRA_ENDPOINTS):
            try:
                extra_endpoints = json.loads(extra)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(ENV_EXTRA_ENDPOINTS, f"invalid JSON: {exc.msg}") from exc
            if not isinstance(extra_endpoints, dict):
                raise ConfigurationError(ENV_EXTRA_ENDPOINTS, "must be a JSON object")
            values["extra_endpoints"] = extra_endpoints

        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            first = exc.errors()[0]
            setting = ".".join(str(part) for part in first["loc"]) or "config"
            raise ConfigurationError(setting, first["msg"]) from exc
