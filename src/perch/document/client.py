"""DocumentClient protocol.

The REST layer's only view of the indexing backend. ``index`` may be a
plain method or a coroutine; blocking implementations are moved to a
worker thread by the caller.

Backends report failures by raising ``perch.errors.HTTPError``
subclasses (``VersionConflict``, ``BadRequest``, ...); anything else is
treated as an internal error.
"""

from collections.abc import Awaitable
from typing import Protocol

from perch.document.model import IndexRequest, IndexResponse


class DocumentClient(Protocol):
    """Protocol for document indexing backends."""

    def index(self, request: IndexRequest) -> IndexResponse | Awaitable[IndexResponse]: ...
