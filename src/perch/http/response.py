"""JSON response with chainable .with_*() transformation API.

Each transformation returns a new Response; handlers and the controller
layer headers and the content type on top of what the producer built.
"""

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True, slots=True)
class Response:
    """A REST response built through immutable transformations.

    Construct with a JSON-serializable body, then chain ``.with_*()``
    calls to add headers or switch the content type.
    """

    body: Mapping[str, Any] = field(default_factory=dict)
    status: int = 200
    content_type: str = JSON_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    # -- Chainable transformations --

    def with_header(self, name: str, value: str) -> "Response":
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_content_type(self, content_type: str) -> "Response":
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    # -- Body helpers --

    def header(self, name: str) -> str | None:
        """First value of header *name* (case-insensitive), if set."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return None

    def header_list(self, name: str) -> list[str]:
        """Every value of header *name* (case-insensitive)."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    @property
    def body_bytes(self) -> bytes:
        """Body serialized as compact UTF-8 JSON."""
        return json_module.dumps(self.body, separators=(",", ":")).encode("utf-8")
