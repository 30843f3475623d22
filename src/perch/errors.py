"""Perch exception hierarchy.

Shared across Router, handlers, adapters, and the server pipeline so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when handler registration or app configuration is invalid.

    Typically raised during ``App._freeze()`` at startup: conflicting
    routes, duplicate handler names, or a compatibility layer enabled
    on the wrong major version.
    """


class RouteInvariantError(PerchError):
    """A path variable declared by the matched route was not present.

    This is a programming error in route registration, never a client
    mistake. The server pipeline reports it as a 500.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, the request pipeline, or document handlers.
    The ASGI handler catches these and renders a JSON error body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()
    error_type: str = "exception"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: invalid parameters, unreadable body, or illegal arguments."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail, error_type="illegal_argument_exception")


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail, error_type="no_handler_found_exception")


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods and embeds
    the allowed methods in the detail string.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
            error_type="method_not_allowed_exception",
        )


class IndexNotFound(HTTPError):  # noqa: N818
    """404: the target index (or required alias) does not exist."""

    def __init__(self, detail: str) -> None:
        super().__init__(status=404, detail=detail, error_type="index_not_found_exception")


class VersionConflict(HTTPError):  # noqa: N818
    """409: the document exists, or its version/sequence number moved on."""

    def __init__(self, detail: str) -> None:
        super().__init__(status=409, detail=detail, error_type="version_conflict_engine_exception")


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: request body exceeds ``AppConfig.max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            status=413,
            detail=f"Request body exceeds the limit of [{limit}] bytes",
            error_type="content_too_long_exception",
        )
