"""Document indexing: the typeless index API and its backend contract.

    IndexAction, CreateHandler, AutoIdHandler -- REST handlers
    DocumentClient -- backend protocol
    InMemoryDocumentClient -- dict-backed backend for tests and demos
"""

from perch.document.client import DocumentClient
from perch.document.handlers import AutoIdHandler, CreateHandler, IndexAction
from perch.document.memory import InMemoryDocumentClient
from perch.document.model import IndexRequest, IndexResponse, OpType, RefreshPolicy, VersionType

__all__ = [
    "AutoIdHandler",
    "CreateHandler",
    "DocumentClient",
    "InMemoryDocumentClient",
    "IndexAction",
    "IndexRequest",
    "IndexResponse",
    "OpType",
    "RefreshPolicy",
    "VersionType",
]
