"""Handler registry and dispatch.

Mirrors the ``Router`` + ``Route`` split: handlers are registered during
setup, their route patterns compiled into the router at freeze time, and
the controller is immutable at runtime.

Free-threading safety:
    - handlers are registered before ``compile()`` and never mutated
    - ``dispatch`` keeps all per-request state on the ``Request``
"""

import logging
from collections.abc import Iterable

from perch.errors import BadRequest, ConfigurationError
from perch.http.request import Request
from perch.http.response import Response
from perch.rest.handler import RestHandler
from perch.routing.route import Route, RouteMatch
from perch.routing.router import Router

logger = logging.getLogger("perch.server")


def compatible_media_type(version: int) -> str:
    """Content type announcing a response shaped for API *version*."""
    return f"application/vnd.perch+json;compatible-with={version}"


class RestController:
    """The compiled handler table.

    Usage::

        controller = RestController(compatible_version=7)
        controller.register(IndexAction(client))
        controller.compile()
        match = controller.match("PUT", "/books/_doc/1")
        response = await controller.dispatch(match, request)
    """

    __slots__ = ("_compatible_version", "_handlers", "_router")

    def __init__(self, compatible_version: int) -> None:
        self._compatible_version = compatible_version
        self._handlers: dict[str, RestHandler] = {}
        self._router = Router()

    def register(self, handler: RestHandler) -> None:
        """Register *handler* under each of its route patterns.

        Raises ``ConfigurationError`` if the handler name is taken, it
        declares no routes, or one of its patterns collides with an
        already-registered one.
        """
        if handler.name in self._handlers:
            msg = f"A handler named {handler.name!r} is already registered."
            raise ConfigurationError(msg)
        if not handler.routes:
            msg = f"Handler {handler.name!r} declares no routes."
            raise ConfigurationError(msg)

        methods_by_path: dict[str, set[str]] = {}
        for pattern in handler.routes:
            methods_by_path.setdefault(pattern.path, set()).add(pattern.method.upper())
        for path, methods in methods_by_path.items():
            self._router.add(Route(path=path, handler=handler, methods=frozenset(methods)))

        self._handlers[handler.name] = handler
        logger.debug(
            "Registered %s for %s",
            handler.name,
            ", ".join(str(p) for p in handler.routes),
        )

    def register_all(self, handlers: Iterable[RestHandler]) -> None:
        for handler in handlers:
            self.register(handler)

    def compile(self) -> None:
        """Freeze the route table."""
        self._router.compile()

    @property
    def handlers(self) -> tuple[RestHandler, ...]:
        """Registered handlers in registration order."""
        return tuple(self._handlers.values())

    @property
    def routes(self) -> list[Route]:
        return self._router.routes

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve a method and path to a route. See ``Router.match``."""
        return self._router.match(method, path)

    async def dispatch(self, match: RouteMatch, request: Request) -> Response:
        """Run the matched handler against *request*.

        The handler prepares the request first. Any path or query
        parameter it did not read is then rejected with a 400 before
        the response producer runs. Exceptions propagate unchanged.
        """
        handler = match.route.handler
        produce = handler.handle(request)

        unconsumed = request.unconsumed_params()
        if unconsumed:
            noun = "parameter" if len(unconsumed) == 1 else "parameters"
            msg = f"request [{request.path}] contains unrecognized {noun}: [{', '.join(unconsumed)}]"
            raise BadRequest(msg)

        response = await produce()
        if handler.compatibility_required or request.compatibility_mode:
            response = response.with_content_type(compatible_media_type(self._compatible_version))
        return response
