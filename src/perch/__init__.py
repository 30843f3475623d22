"""Perch: a REST front end for document indexing with API compatibility.

Serves the typeless document index API and, for clients still written
against the previous major version, its typed routes over the very same
handlers.

Basic usage::

    from perch import App
    from perch.document import InMemoryDocumentClient

    app = App(client=InMemoryDocumentClient())
    app.run()

Legacy requests such as ``PUT /books/book/1`` are answered by the
typeless handler with a ``Warning: 299`` deprecation header.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BadRequest",
    "CompatibilityAdapter",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "NotFound",
    "PerchError",
    "Request",
    "Response",
    "RoutePattern",
    "get_request",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name == "Response":
        from perch.http.response import Response

        return Response

    if name == "RoutePattern":
        from perch.routing.route import RoutePattern

        return RoutePattern

    if name == "CompatibilityAdapter":
        from perch.compat.adapter import CompatibilityAdapter

        return CompatibilityAdapter

    if name == "get_request":
        from perch.context import get_request

        return get_request

    if name in ("BadRequest", "ConfigurationError", "HTTPError", "MethodNotAllowed", "NotFound", "PerchError"):
        import perch.errors

        return getattr(perch.errors, name)

    msg = f"module 'perch' has no attribute {name!r}"
    raise AttributeError(msg)
