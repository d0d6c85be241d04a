"""Terraform remote service discovery endpoint.

Serves GET /.well-known/terraform.json, the document Terraform fetches to
learn which registry protocols a host speaks (``providers.v1``,
``modules.v1``, ...). The document is the union of every registered
Endpointer's entries, merged in registration order so that a later
endpointer overrides an earlier one on key collision.

The response is rebuilt on every request: endpointers may report dynamic
state, so nothing is cached.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from terracache.cache.router import RequestContext, Router
from terracache.observability.logging import get_logger

logger = get_logger(__name__)

DISCOVERY_PATH = "/.well-known"
"""Prefix the discovery controller mounts itself under (RFC 8615)."""

TERRAFORM_DISCOVERY_PATH = "/terraform.json"
"""Discovery document path, relative to DISCOVERY_PATH."""


@runtime_checkable
class Endpointer(Protocol):
    """Protocol for subsystems that advertise discovery entries.

    Implementations must return a fresh (or immutable) mapping on every
    call; the discovery controller only reads it. Any internal locking is
    the implementation's own business.
    """

    def endpoints(self) -> dict[str, Any]:
        """Return service identifiers mapped to their descriptors."""
        ...


class DiscoveryController:
    """Aggregates Endpointer entries into the Terraform discovery document.

    The endpointer sequence is frozen at construction, so concurrent
    requests can read it without locking.

    Attributes:
        endpointers: Endpointers consulted in order on each request.
        router: The ``/.well-known`` group, set by register().
    """

    def __init__(self, endpointers: Iterable[Endpointer] = ()) -> None:
        self.endpointers: tuple[Endpointer, ...] = tuple(endpointers)
        self.router: Router | None = None

    def register(self, router: Router) -> None:
        """Mount GET /.well-known/terraform.json on router."""
        self.router = router.group(DISCOVERY_PATH)

        # https://developer.hashicorp.com/terraform/internals/remote-service-discovery#discovery-process
        self.router.get(TERRAFORM_DISCOVERY_PATH, self.terraform_action)

    def merged_endpoints(self) -> dict[str, Any]:
        """Return the union of all endpointers' entries, last writer wins.

        Errors raised by an endpointer propagate unchanged.
        """
        endpoints: dict[str, Any] = {}
        for endpointer in self.endpointers:
            try:
                entries = endpointer.endpoints()
            except Exception:
                logger.exception(
                    "terracache.discovery.provider_failed",
                    provider=type(endpointer).__name__,
                )
                raise
            endpoints.update(entries)
        return endpoints

    def terraform_action(self, ctx: RequestContext) -> Any:
        """Handle GET /.well-known/terraform.json."""
        endpoints = self.merged_endpoints()
        logger.debug(
            "terracache.discovery.served",
            endpoint_count=len(endpoints),
            services=sorted(endpoints),
        )
        return ctx.json(200, endpoints)
