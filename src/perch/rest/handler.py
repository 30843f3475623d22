"""RestHandler protocol and ResponseProducer type alias.

A handler is any object matching::

    class MyHandler:
        name = "my_handler"
        routes = (RoutePattern("GET", "/_hello"),)
        compatibility_required = False

        def handle(self, request: Request) -> ResponseProducer:
            async def produce() -> Response:
                return Response({"hello": "world"})

            return produce

``handle`` runs synchronously while the request is being prepared: it
reads (and so consumes) the parameters it understands and may reject the
request. The returned producer does the actual work once the framework
has validated the request.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from perch.http.request import Request
from perch.http.response import Response
from perch.routing.route import RoutePattern

# Deferred response: called once, after parameter validation
ResponseProducer: TypeAlias = Callable[[], Awaitable[Response]]


class RestHandler(Protocol):
    """Protocol for perch REST handlers."""

    @property
    def name(self) -> str:
        """Stable identifier used in route listings and logs."""
        ...

    @property
    def routes(self) -> tuple[RoutePattern, ...]:
        """Method and path patterns this handler answers to."""
        ...

    @property
    def compatibility_required(self) -> bool:
        """True if responses must follow the previous major version's contract."""
        ...

    def handle(self, request: Request) -> ResponseProducer: ...
