"""terracache registry cache server.

Public exports:
    Router: Minimal routing surface controllers mount themselves on
    Controller: Protocol for anything that registers routes on a Router
    RequestContext: Per-request handle route handlers answer through
    DiscoveryController: Serves GET /.well-known/terraform.json
    Endpointer: Protocol for subsystems advertising discovery entries
"""

from terracache.cache.discovery import DiscoveryController, Endpointer
from terracache.cache.endpoints import (
    ModuleRegistryEndpoints,
    ProviderRegistryEndpoints,
    StaticEndpoints,
)
from terracache.cache.router import Controller, RequestContext, Router

__all__ = [
    "Controller",
    "DiscoveryController",
    "Endpointer",
    "ModuleRegistryEndpoints",
    "ProviderRegistryEndpoints",
    "RequestContext",
    "Router",
    "StaticEndpoints",
]
