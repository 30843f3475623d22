"""Request-scoped context via ContextVar.

Provides:
- ``request_var``: The current ``Request`` for this task/thread.
- ``warnings_var``: ``Warning`` header values collected while the request
  is being handled, sent back with the response.

Both are set by the handler pipeline and reset after each request.
Outside a request, ``get_request()`` raises ``LookupError`` and
``add_response_warning()`` is a no-op.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar

from perch.http.request import Request

# -- Request context --

request_var: ContextVar[Request] = ContextVar("perch_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()


# -- Response warnings --

warnings_var: ContextVar[list[str] | None] = ContextVar("perch_warnings", default=None)
"""Pending ``Warning`` header values. ``None`` outside a request."""


def add_response_warning(value: str) -> bool:
    """Queue a ``Warning`` header value for the current response.

    Identical values are only queued once. Returns ``False`` when there is
    no request in flight to attach the warning to.
    """
    pending = warnings_var.get()
    if pending is None:
        return False
    if value not in pending:
        pending.append(value)
    return True


def response_warnings() -> tuple[str, ...]:
    """Warning header values queued so far for the current response."""
    return tuple(warnings_var.get() or ())
