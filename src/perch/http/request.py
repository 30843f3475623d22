"""REST request.

Frozen metadata plus a small mutable state record. The request is honest
about what it is: received data that doesn't change. The two things that
do change while it travels through the handler chain are tracked in
``_RequestState``: which parameters a handler has read, and whether the
request is being served in compatibility mode.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from perch.errors import BadRequest, RouteInvariantError
from perch.http.headers import Headers
from perch.http.query import QueryParams


class _RequestState:
    """Mutable per-request bookkeeping. One request, one task."""

    __slots__ = ("compatibility_mode", "consumed")

    def __init__(self) -> None:
        self.compatibility_mode = False
        self.consumed: set[str] = set()


@dataclass(frozen=True, slots=True)
class Request:
    """A REST request matched against the route table.

    ``path_params`` holds the variables captured by the matched route
    pattern. ``param()`` looks in path params first, then the query
    string, and remembers every name it was asked for so the server
    can reject parameters nobody understood.
    """

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    query: QueryParams = field(default_factory=QueryParams)
    path_params: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    _state: _RequestState = field(default_factory=_RequestState, repr=False, compare=False)

    # -- Parameters --

    def param(self, name: str, default: str | None = None) -> str | None:
        """Return a path or query parameter and mark it as consumed."""
        self._state.consumed.add(name)
        if name in self.path_params:
            return self.path_params[name]
        return self.query.get(name, default)

    def has_param(self, name: str) -> bool:
        """True if *name* is a path or query parameter. Does not consume it."""
        return name in self.path_params or name in self.query

    def path_param(self, name: str) -> str:
        """Return a path variable the matched route declared.

        Raises ``RouteInvariantError`` if it is missing: the route
        pattern guaranteed it, so its absence is a registration bug.
        """
        self._state.consumed.add(name)
        try:
            return self.path_params[name]
        except KeyError:
            msg = f"Path variable {name!r} missing from request to {self.path!r}"
            raise RouteInvariantError(msg) from None

    def param_as_bool(self, name: str, default: bool) -> bool:
        """Parse a boolean parameter. A bare ``?flag`` means true."""
        value = self.param(name)
        if value is None:
            return default
        if value in ("", "true"):
            return True
        if value == "false":
            return False
        msg = f"Failed to parse value [{value}] as only [true] or [false] are allowed."
        raise BadRequest(msg)

    def param_as_int(self, name: str, default: int | None = None) -> int | None:
        """Parse an integer parameter."""
        value = self.param(name)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            msg = f"Failed to parse int parameter [{name}] with value [{value}]"
            raise BadRequest(msg) from None

    def consumed_params(self) -> frozenset[str]:
        """Names read so far through ``param()`` and friends."""
        return frozenset(self._state.consumed)

    def unconsumed_params(self) -> list[str]:
        """Path and query parameters no handler has read, sorted."""
        supplied = set(self.path_params) | set(self.query)
        return sorted(supplied - self._state.consumed)

    # -- Compatibility mode --

    @property
    def compatibility_mode(self) -> bool:
        """True once a compatibility adapter has claimed this request."""
        return self._state.compatibility_mode

    def enter_compatibility_mode(self) -> None:
        """Mark the response as bound to the previous major version's contract."""
        self._state.compatibility_mode = True

    # -- Headers and body --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def opaque_id(self) -> str | None:
        """Caller-supplied ``X-Opaque-Id``, used to attribute deprecations."""
        return self.headers.get("x-opaque-id")

    @property
    def has_content(self) -> bool:
        return len(self.content) > 0

    def json(self) -> dict[str, Any]:
        """Parse the body as a JSON object.

        Raises ``BadRequest`` when the body is empty, malformed, or not
        an object.
        """
        if not self.content:
            msg = "request body is required"
            raise BadRequest(msg)
        try:
            parsed = json_module.loads(self.content)
        except (UnicodeDecodeError, ValueError) as exc:
            msg = f"Failed to parse request body: {exc}"
            raise BadRequest(msg) from exc
        if not isinstance(parsed, dict):
            msg = "request body must be a JSON object"
            raise BadRequest(msg)
        return parsed

    # -- Factory --

    @classmethod
    def from_asgi(
        cls,
        scope: Mapping[str, Any],
        content: bytes = b"",
        path_params: Mapping[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and an already-read body."""
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params=dict(path_params or {}),
            content=content,
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
