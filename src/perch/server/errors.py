"""Error handling pipeline for perch requests.

Maps HTTPError exceptions and unexpected failures to JSON error
responses of the form::

    {"error": {"root_cause": [...], "type": "...", "reason": "..."}, "status": 400}
"""

import logging

from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import Response

logger = logging.getLogger("perch.server")


def error_body(status: int, error_type: str, reason: str) -> dict[str, object]:
    cause = {"type": error_type, "reason": reason}
    return {"error": {"root_cause": [cause], **cause}, "status": status}


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    reason = exc.detail or f"Error {exc.status}"
    resp = Response(body=error_body(exc.status, exc.error_type, reason), status=exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors.

    Includes the exception text only in debug mode.
    """
    logger.exception("500 %s %s", request.method, request.path)

    reason = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return Response(body=error_body(500, "internal_server_error", reason), status=500)
