"""Compiled router with trie-based path matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes.
"""

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/_bulk"                -> [PathSegment("_bulk")]
        "/{index}/_doc/{id}"    -> [PathSegment("{index}", is_param=True, ...),
                                    PathSegment("_doc"),
                                    PathSegment("{id}", is_param=True, ...)]

    Raises ``ConfigurationError`` for malformed parameter segments.
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            name = part[1:-1]
            if not name.isidentifier():
                msg = f"Invalid path parameter {part!r} in route {path!r}: expected {{name}}."
                raise ConfigurationError(msg)
            segments.append(PathSegment(value=part, is_param=True, param_name=name))
        elif "{" in part or "}" in part:
            msg = f"Malformed path segment {part!r} in route {path!r}."
            raise ConfigurationError(msg)
        else:
            segments.append(PathSegment(value=part))
    return segments


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("children", "param_child", "param_name", "routes_by_method")

    def __init__(self) -> None:
        # Static segment children: "_doc" -> node
        self.children: dict[str, _TrieNode] = {}
        # Single parameter child; every route must use the same name here
        self.param_child: _TrieNode | None = None
        self.param_name: str | None = None
        # Routes at this node, keyed by HTTP method
        self.routes_by_method: dict[str, Route] = {}


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/{index}/_doc/{id}", handler, frozenset({"PUT"})))
        router.compile()
        match = router.match("PUT", "/books/_doc/1")

    Static segments are tried before parameters, with backtracking, so
    ``/{index}/_doc/{id}`` and ``/{index}/{type}/{id}`` coexist: the
    literal ``_doc`` wins, anything else falls through to ``{type}``.
    """

    __slots__ = ("_compiled", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile().

        Raises ``ConfigurationError`` if another route already claims one
        of the same methods on the same path shape, or if a parameter
        name disagrees with one registered at the same position.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for seg in parse_path(route.path):
            if seg.is_param:
                if node.param_child is None:
                    node.param_child = _TrieNode()
                    node.param_name = seg.param_name
                elif node.param_name != seg.param_name:
                    msg = (
                        f"Route {route.path!r} names a parameter {{{seg.param_name}}} where "
                        f"another route already uses {{{node.param_name}}}."
                    )
                    raise ConfigurationError(msg)
                node = node.param_child
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in sorted(route.methods):
            existing = node.routes_by_method.get(method)
            if existing is not None:
                msg = (
                    f"Route conflict: {method} {route.path!r} ({route.name}) overlaps "
                    f"{method} {existing.path!r} ({existing.name})."
                )
                raise ConfigurationError(msg)
        for method in route.methods:
            node.routes_by_method[method] = route

    @property
    def routes(self) -> list[Route]:
        """Return all registered routes, depth first, statics before params."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        for route in node.routes_by_method.values():
            if id(route) not in seen:
                seen.add(id(route))
                result.append(route)
        for child in node.children.values():
            self._collect_routes(child, seen, result)
        if node.param_child is not None:
            self._collect_routes(node.param_child, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request path and method against compiled routes.

        Returns a ``RouteMatch`` on success.
        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        allowed: set[str] = set()
        result = self._match_node(self._root, parts, 0, {}, method, allowed)
        if result is not None:
            route, params = result
            return RouteMatch(route=route, path_params=params)
        if allowed:
            raise MethodNotAllowed(frozenset(allowed))
        raise NotFound(f"no handler found for uri [{path}] and method [{method}]")

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
        method: str,
        allowed: set[str],
    ) -> tuple[Route, dict[str, str]] | None:
        """Recursively match path parts, collecting methods seen on full-path hits."""
        if index == len(parts):
            route = node.routes_by_method.get(method)
            if route is not None:
                return route, params
            allowed.update(node.routes_by_method)
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, method, allowed)
            if result is not None:
                return result

        # 2. Parameter child
        if node.param_child is not None and node.param_name is not None:
            new_params = {**params, node.param_name: part}
            return self._match_node(node.param_child, parts, index + 1, new_params, method, allowed)

        return None
