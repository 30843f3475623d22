"""Dict-backed document client.

Single node, single primary term, no durability. Enough versioning to
behave like a real backend under the handlers: create conflicts,
sequence-number compare-and-set, and external versions.

Thread safety:
    One ``threading.Lock`` around all writes; calls arrive from anyio's
    worker threads.
"""

import secrets
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from perch.document.model import IndexRequest, IndexResponse, OpType, VersionType
from perch.errors import BadRequest, IndexNotFound, VersionConflict

Pipeline: TypeAlias = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class StoredDocument:
    source: dict[str, Any]
    version: int
    seq_no: int
    primary_term: int
    routing: str | None = None


class InMemoryDocumentClient:
    """A ``DocumentClient`` that keeps documents in process memory.

    Args:
        aliases: Alias name to concrete index name.
        pipelines: Ingest pipeline id to a function rewriting the source.
    """

    __slots__ = ("_aliases", "_indices", "_lock", "_pipelines", "_seq_nos", "primary_term")

    def __init__(
        self,
        *,
        aliases: Mapping[str, str] | None = None,
        pipelines: Mapping[str, Pipeline] | None = None,
    ) -> None:
        self._aliases = dict(aliases or {})
        self._pipelines = dict(pipelines or {})
        self._indices: dict[str, dict[str, StoredDocument]] = {}
        self._seq_nos: dict[str, int] = {}
        self._lock = threading.Lock()
        self.primary_term = 1

    def index(self, request: IndexRequest) -> IndexResponse:
        index = self._resolve_index(request)
        source = self._run_pipeline(request)
        doc_id = request.id if request.id is not None else secrets.token_urlsafe(15)

        with self._lock:
            docs = self._indices.setdefault(index, {})
            existing = docs.get(doc_id)
            version = self._next_version(request, doc_id, existing)
            seq_no = self._seq_nos.get(index, -1) + 1
            self._seq_nos[index] = seq_no
            docs[doc_id] = StoredDocument(
                source=source,
                version=version,
                seq_no=seq_no,
                primary_term=self.primary_term,
                routing=request.routing,
            )

        return IndexResponse(
            index=index,
            id=doc_id,
            version=version,
            created=existing is None,
            seq_no=seq_no,
            primary_term=self.primary_term,
        )

    def get(self, index: str, doc_id: str) -> StoredDocument | None:
        """Return the stored document, or ``None``."""
        with self._lock:
            return self._indices.get(index, {}).get(doc_id)

    def count(self, index: str) -> int:
        with self._lock:
            return len(self._indices.get(index, {}))

    # -- Internal --

    def _resolve_index(self, request: IndexRequest) -> str:
        if request.index in self._aliases:
            return self._aliases[request.index]
        if request.require_alias:
            msg = f"[require_alias] request flag is [true] and [{request.index}] is not an alias"
            raise IndexNotFound(msg)
        return request.index

    def _run_pipeline(self, request: IndexRequest) -> dict[str, Any]:
        if request.pipeline is None or request.pipeline == "_none":
            return dict(request.source)
        pipeline = self._pipelines.get(request.pipeline)
        if pipeline is None:
            msg = f"pipeline with id [{request.pipeline}] does not exist"
            raise BadRequest(msg)
        return pipeline(dict(request.source))

    def _next_version(
        self,
        request: IndexRequest,
        doc_id: str,
        existing: StoredDocument | None,
    ) -> int:
        """Version the write will get. Raises ``VersionConflict``. Lock held."""
        if request.op_type is OpType.CREATE and existing is not None:
            msg = f"[{doc_id}]: version conflict, document already exists (current version [{existing.version}])"
            raise VersionConflict(msg)

        if request.if_seq_no is not None:
            if existing is None:
                msg = (
                    f"[{doc_id}]: version conflict, required seqNo [{request.if_seq_no}], "
                    f"primary term [{request.if_primary_term}] but no document was found"
                )
                raise VersionConflict(msg)
            if existing.seq_no != request.if_seq_no or existing.primary_term != request.if_primary_term:
                msg = (
                    f"[{doc_id}]: version conflict, required seqNo [{request.if_seq_no}], "
                    f"primary term [{request.if_primary_term}]. current document has seqNo "
                    f"[{existing.seq_no}] and primary term [{existing.primary_term}]"
                )
                raise VersionConflict(msg)

        if request.version_type is VersionType.INTERNAL:
            return 1 if existing is None else existing.version + 1

        assert request.version is not None  # enforced by IndexRequest.validate()
        if existing is not None:
            if request.version_type is VersionType.EXTERNAL and request.version <= existing.version:
                msg = (
                    f"[{doc_id}]: version conflict, current version [{existing.version}] is "
                    f"higher or equal to the one provided [{request.version}]"
                )
                raise VersionConflict(msg)
            if request.version_type is VersionType.EXTERNAL_GTE and request.version < existing.version:
                msg = (
                    f"[{doc_id}]: version conflict, current version [{existing.version}] is "
                    f"higher than the one provided [{request.version}]"
                )
                raise VersionConflict(msg)
        return request.version
