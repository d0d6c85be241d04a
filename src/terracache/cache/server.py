"""FastAPI application for the terracache registry cache.

Routes:
    GET /.well-known/terraform.json: Terraform service discovery document
    GET /health: Liveness probe

Example:
    >>> from terracache.cache.server import create_app
    >>> app = create_app()
    >>> # Run with: terracache serve --port 5758
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI

from terracache import __version__
from terracache.cache.discovery import DiscoveryController, Endpointer
from terracache.cache.endpoints import (
    ModuleRegistryEndpoints,
    ProviderRegistryEndpoints,
    StaticEndpoints,
)
from terracache.cache.router import RequestContext, Router
from terracache.config import CacheServerConfig
from terracache.observability.logging import get_logger

logger = get_logger(__name__)

HEALTH_PATH = "/health"


def default_endpointers(config: CacheServerConfig) -> list[Endpointer]:
    """Return the endpointers a cache server advertises for config.

    Configured extra endpoints come last so they can override the
    built-in registry paths.
    """
    endpointers: list[Endpointer] = [
        ProviderRegistryEndpoints(config.providers_path),
        ModuleRegistryEndpoints(config.modules_path),
    ]
    if config.extra_endpoints:
        endpointers.append(StaticEndpoints(config.extra_endpoints))
    return endpointers


def health(ctx: RequestContext) -> Any:
    """Liveness probe: always OK if the process is running."""
    return ctx.json(200, {"status": "ok"})


def create_app(
    config: CacheServerConfig | None = None,
    endpointers: Sequence[Endpointer] | None = None,
) -> FastAPI:
    """Create the cache server application.

    Args:
        config: Server settings. Defaults to CacheServerConfig.from_env().
        endpointers: Discovery endpointers in registration order. Defaults to
            default_endpointers(config).

    Returns:
        Configured FastAPI application.
    """
    if config is None:
        config = CacheServerConfig.from_env()
    if endpointers is None:
        endpointers = default_endpointers(config)

    app = FastAPI(
        title="terracache",
        description="Local Terraform registry cache",
        version=__version__,
    )
    app.state.config = config

    discovery = DiscoveryController(endpointers)
    router = Router(app)
    router.register(discovery)
    router.get(HEALTH_PATH, health)
    router.include_into(app)
    app.state.discovery = discovery

    logger.info(
        "terracache.server.created",
        endpointers=[type(endpointer).__name__ for endpointer in discovery.endpointers],
    )
    return app
