"""RoutePattern, Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from perch.rest.handler import RestHandler


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/_doc``     (is_param=False)
    Param:   ``/{index}``  (is_param=True, param_name="index")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


@dataclass(frozen=True, slots=True)
class RoutePattern:
    """An HTTP method plus a path template, declared by a handler.

    Immutable, defined at registration time::

        RoutePattern("PUT", "/{index}/_doc/{id}")
    """

    method: str
    path: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created from a handler's ``RoutePattern`` list when the app freezes.
    """

    path: str
    handler: "RestHandler"
    methods: frozenset[str]

    @property
    def name(self) -> str:
        """Name of the handler serving this route."""
        return self.handler.name


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
