"""ASGI response sending: one start message, one body message."""

from perch._internal.asgi import Send
from perch.http.response import Response

# Statuses that never carry a message body
_BODYLESS_STATUSES = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers.extend((name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in response.headers)
    headers.append((b"content-length", str(content_length).encode("latin-1")))
    return headers


async def send_response(response: Response, send: Send, *, method: str = "GET") -> None:
    """Send *response* through ASGI ``send``.

    HEAD requests and informational, 204 and 304 statuses get an empty
    body with a matching ``content-length``.
    """
    bodyless = method == "HEAD" or response.status < 200 or response.status in _BODYLESS_STATUSES
    body = b"" if bodyless else response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
