"""Typeless document index handlers.

Three REST handlers share one request-preparation path:

    IndexAction    PUT|POST /{index}/_doc/{id}      create or overwrite
    CreateHandler  PUT|POST /{index}/_create/{id}   create, 409 if it exists
    AutoIdHandler  POST     /{index}/_doc           create, server picks the id

Each ``handle`` reads every parameter it understands from the request
and returns a producer that validates the ``IndexRequest`` and sends it
to the ``DocumentClient``.
"""

from dataclasses import dataclass
from typing import ClassVar

from perch._internal.invoke import invoke
from perch.cluster import NodesSupplier, Version
from perch.document.client import DocumentClient
from perch.document.model import (
    DEFAULT_TIMEOUT,
    IndexRequest,
    IndexResponse,
    OpType,
    RefreshPolicy,
    VersionType,
    parse_time_value,
)
from perch.errors import BadRequest
from perch.http.request import Request
from perch.http.response import Response
from perch.rest.handler import ResponseProducer
from perch.routing.route import RoutePattern

# Oldest node version that understands create-with-auto-id natively
AUTO_ID_CREATE_MIN_VERSION = Version(7, 5, 0)


def _wait_for_active_shards(request: Request) -> str | None:
    value = request.param("wait_for_active_shards")
    if value is None or value == "all":
        return value
    if not value.isdigit():
        msg = f"Illegal value for [wait_for_active_shards]: [{value}]"
        raise BadRequest(msg)
    return value


def build_index_request(request: Request, *, op_type: str | None = None) -> IndexRequest:
    """Read an ``IndexRequest`` out of *request*, consuming its parameters.

    *op_type* overrides the ``op_type`` query parameter when given.
    """
    index = request.path_param("index")
    doc_id = request.path_param("id") if "id" in request.path_params else None
    source = request.json()

    timeout = request.param("timeout")
    version_type = request.param("version_type")
    requested_op_type = request.param("op_type")

    return IndexRequest(
        index=index,
        id=doc_id,
        source=source,
        op_type=OpType.parse(op_type or requested_op_type or OpType.INDEX.value),
        routing=request.param("routing"),
        pipeline=request.param("pipeline"),
        refresh=RefreshPolicy.parse(request.param("refresh")),
        timeout=parse_time_value(timeout, "timeout") if timeout is not None else DEFAULT_TIMEOUT,
        version=request.param_as_int("version"),
        version_type=VersionType.parse(version_type) if version_type else VersionType.INTERNAL,
        if_seq_no=request.param_as_int("if_seq_no"),
        if_primary_term=request.param_as_int("if_primary_term"),
        require_alias=request.param_as_bool("require_alias", False),
        wait_for_active_shards=_wait_for_active_shards(request),
    )


def render_index_response(result: IndexResponse, routing: str | None) -> Response:
    response = Response(body=result.to_dict(), status=result.status)
    if result.created:
        response = response.with_header("Location", result.location(routing))
    return response


def _producer(client: DocumentClient, index_request: IndexRequest) -> ResponseProducer:
    async def produce() -> Response:
        index_request.validate()
        result: IndexResponse = await invoke(client.index, index_request)
        return render_index_response(result, index_request.routing)

    return produce


@dataclass(frozen=True, slots=True)
class IndexAction:
    """Create or replace the document at a caller-chosen id."""

    client: DocumentClient

    name: ClassVar[str] = "document_index_action"
    routes: ClassVar[tuple[RoutePattern, ...]] = (
        RoutePattern("POST", "/{index}/_doc/{id}"),
        RoutePattern("PUT", "/{index}/_doc/{id}"),
    )
    compatibility_required: ClassVar[bool] = False

    def handle(self, request: Request) -> ResponseProducer:
        return _producer(self.client, build_index_request(request))


@dataclass(frozen=True, slots=True)
class CreateHandler:
    """Create the document at a caller-chosen id; conflict if it exists."""

    client: DocumentClient

    name: ClassVar[str] = "document_create_action"
    routes: ClassVar[tuple[RoutePattern, ...]] = (
        RoutePattern("POST", "/{index}/_create/{id}"),
        RoutePattern("PUT", "/{index}/_create/{id}"),
    )
    compatibility_required: ClassVar[bool] = False

    def handle(self, request: Request) -> ResponseProducer:
        requested = request.param("op_type")
        if requested is not None and requested != OpType.CREATE.value:
            msg = f"opType must be 'create', found: [{requested}]"
            raise BadRequest(msg)
        return _producer(self.client, build_index_request(request, op_type=OpType.CREATE.value))


@dataclass(frozen=True, slots=True)
class AutoIdHandler:
    """Create a document under a server-assigned id.

    When the caller does not pick an ``op_type`` and every node in the
    cluster is new enough, the write is a ``create``; a mixed cluster
    with older nodes falls back to ``index``.
    """

    client: DocumentClient
    nodes_in_cluster: NodesSupplier

    name: ClassVar[str] = "document_create_action_auto_id"
    routes: ClassVar[tuple[RoutePattern, ...]] = (RoutePattern("POST", "/{index}/_doc"),)
    compatibility_required: ClassVar[bool] = False

    def handle(self, request: Request) -> ResponseProducer:
        op_type = None
        if not request.has_param("op_type"):
            min_version = self.nodes_in_cluster().min_node_version
            if min_version is not None and min_version >= AUTO_ID_CREATE_MIN_VERSION:
                op_type = OpType.CREATE.value
        return _producer(self.client, build_index_request(request, op_type=op_type))
