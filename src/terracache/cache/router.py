"""Routing surface for cache server controllers.

Controllers only need three things from the HTTP framework: a way to scope
routes under a path prefix, a way to register a verb, a path and a
handler, and a way to answer with JSON. Router and RequestContext provide
exactly that over a FastAPI app or APIRouter, so controllers never import
FastAPI.

Handlers take a single RequestContext and return whatever its ``json()``
built:

    def status(ctx: RequestContext) -> Any:
        return ctx.json(200, {"status": "ok"})
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, Response

from terracache.observability.logging import log_context

CONTENT_TYPE_JSON = "application/json"

Handler = Callable[["RequestContext"], Any]


@runtime_checkable
class Controller(Protocol):
    """Protocol for components that mount routes on a Router."""

    def register(self, router: Router) -> None:
        """Register this controller's routes on router."""
        ...


class RequestContext:
    """Per-request view handed to route handlers.

    Attributes:
        request: The underlying request, None when a handler is called
            outside the server (e.g. from the CLI).
    """

    def __init__(self, request: Request | None = None) -> None:
        self.request = request

    def json(self, status_code: int, content: Any) -> Response:
        """Build a JSON response. Raises if content is not JSON-serializable."""
        return JSONResponse(content=content, status_code=status_code, media_type=CONTENT_TYPE_JSON)


class Router:
    """Path-prefix scoped view over a FastAPI app or APIRouter.

    Routes are added to the underlying target immediately, so groups can be
    created before or after the app starts being configured.

    Example:
        >>> app = FastAPI()
        >>> router = Router(app)
        >>> wellknown = router.group("/.well-known")
        >>> wellknown.get("/terraform.json", lambda ctx: ctx.json(200, {}))
        >>> wellknown.prefix
        '/.well-known'
    """

    def __init__(self, target: FastAPI | APIRouter, prefix: str = "") -> None:
        self.target = target
        self.prefix = prefix.rstrip("/")

    def group(self, prefix: str) -> Router:
        """Return a Router whose routes live under ``self.prefix + prefix``."""
        if prefix and not prefix.startswith("/"):
            prefix = f"/{prefix}"
        return Router(self.target, self.prefix + prefix)

    def add(self, method: str, path: str, handler: Handler) -> None:
        """Register handler for method on ``self.prefix + path``.

        The endpoint is a plain function, so FastAPI runs it on its worker
        threadpool and handlers may block.
        """

        def endpoint(request: Request) -> Response:
            with log_context(http_method=request.method, http_path=request.url.path):
                return handler(RequestContext(request))

        endpoint.__name__ = getattr(handler, "__name__", "endpoint")
        self.target.add_api_route(
            self.prefix + path,
            endpoint,
            methods=[method.upper()],
            response_class=JSONResponse,
        )

    def get(self, path: str, handler: Handler) -> None:
        """Register a GET handler."""
        self.add("GET", path, handler)

    def register(self, *controllers: Controller) -> None:
        """Let each controller mount its routes on this router, in order."""
        for controller in controllers:
            controller.register(self)

    def include_into(self, app: FastAPI) -> None:
        """Serve this router's routes from app.

        Routes registered directly on app are already served; an APIRouter
        target is included. Include after all routes are registered, since
        FastAPI copies routes at include time.
        """
        if isinstance(self.target, APIRouter):
            app.include_router(self.target)
