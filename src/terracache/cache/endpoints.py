"""Endpointers for the registry protocols served by the cache.

Each advertises one Terraform service identifier (see the remote service
discovery protocol) pointing at the path the cache serves it on.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

PROVIDERS_SERVICE = "providers.v1"
MODULES_SERVICE = "modules.v1"

DEFAULT_PROVIDERS_PATH = "/v1/providers/"
DEFAULT_MODULES_PATH = "/v1/modules/"


class ProviderRegistryEndpoints:
    """Advertises the provider registry protocol."""

    def __init__(self, base_path: str = DEFAULT_PROVIDERS_PATH) -> None:
        self.base_path = base_path

    def endpoints(self) -> dict[str, Any]:
        return {PROVIDERS_SERVICE: self.base_path}


class ModuleRegistryEndpoints:
    """Advertises the module registry protocol."""

    def __init__(self, base_path: str = DEFAULT_MODULES_PATH) -> None:
        self.base_path = base_path

    def endpoints(self) -> dict[str, Any]:
        return {MODULES_SERVICE: self.base_path}


class StaticEndpoints:
    """Advertises a fixed mapping, e.g. extra services from configuration.

    The mapping is deep-copied on construction and on every call, so neither
    the caller nor the discovery controller can mutate what is advertised.
    """

    def __init__(self, entries: Mapping[str, Any]) -> None:
        self._entries = copy.deepcopy(dict(entries))

    def endpoints(self) -> dict[str, Any]:
        return copy.deepcopy(self._entries)
