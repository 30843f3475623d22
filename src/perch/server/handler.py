"""ASGI handler: translates ASGI scope/messages to perch types.

The only component that touches raw ASGI directly. Reads the body,
matches the route, builds the typed Request, dispatches through the
RestController, and sends the Response back through ASGI send().
"""

from contextvars import Token

from perch._internal.asgi import Receive, Scope, Send
from perch.context import request_var, response_warnings, warnings_var
from perch.errors import HTTPError, PayloadTooLarge
from perch.http.request import Request
from perch.http.response import Response
from perch.rest.controller import RestController
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.sender import send_response


async def read_body(receive: Receive, limit: int) -> bytes:
    """Drain the ASGI request body, refusing more than *limit* bytes."""
    chunks: list[bytes] = []
    size = 0
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            break
        body = message.get("body", b"")
        if body:
            size += len(body)
            if size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(body)
        if not message.get("more_body", False):
            break
    return b"".join(chunks)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    controller: RestController,
    max_content_length: int,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    # Bare request (no body, no path params) so errors before the match
    # can still be logged against method and path
    request = Request.from_asgi(scope)
    token: Token[Request] = request_var.set(request)
    warnings_token = warnings_var.set([])

    try:
        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > max_content_length:
            raise PayloadTooLarge(max_content_length)

        match = controller.match(request.method, request.path)
        content = await read_body(receive, max_content_length)
        request = Request.from_asgi(scope, content, match.path_params)
        request_var.set(request)

        response = await controller.dispatch(match, request)

    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)
    finally:
        warnings = response_warnings()
        warnings_var.reset(warnings_token)
        request_var.reset(token)

    await send_response(_with_warnings(response, warnings), send, method=request.method)


def _with_warnings(response: Response, warnings: tuple[str, ...]) -> Response:
    for value in warnings:
        response = response.with_header("Warning", value)
    return response
