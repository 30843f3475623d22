"""Version 7 typed document index routes.

Version 7 clients address documents as ``/{index}/{type}/{id}``. Types
are gone; the typeless handlers serve these routes through
``CompatibilityAdapter`` after the ``{type}`` segment is discarded.

    POST|PUT /{index}/{type}/{id}          -> IndexAction
    POST|PUT /{index}/{type}/{id}/_create  -> CreateHandler
    POST     /{index}/{type}               -> AutoIdHandler
"""

from perch.cluster import NodesSupplier
from perch.compat.adapter import CompatibilityAdapter
from perch.deprecation import DeprecationLogger
from perch.document.client import DocumentClient
from perch.document.handlers import AutoIdHandler, CreateHandler, IndexAction
from perch.errors import ConfigurationError
from perch.rest.controller import RestController
from perch.rest.handler import RestHandler
from perch.routing.route import RoutePattern

COMPATIBLE_VERSION = 7

TYPES_DEPRECATION_KEY = "index_with_types"
TYPES_DEPRECATION_MESSAGE = (
    "[types removal] Specifying types in document index requests is deprecated, "
    "use the typeless endpoints instead (/{index}/_doc/{id}, /{index}/_doc, "
    "or /{index}/_create/{id})."
)

LEGACY_TYPE_PARAM = "type"


def _typed(
    name: str,
    routes: tuple[RoutePattern, ...],
    delegate: RestHandler,
    deprecation: DeprecationLogger,
) -> CompatibilityAdapter:
    return CompatibilityAdapter(
        name=name,
        routes=routes,
        delegate=delegate,
        deprecation=deprecation,
        deprecation_key=TYPES_DEPRECATION_KEY,
        deprecation_message=TYPES_DEPRECATION_MESSAGE,
        legacy_param=LEGACY_TYPE_PARAM,
    )


def compatible_index_action(client: DocumentClient, deprecation: DeprecationLogger) -> CompatibilityAdapter:
    """Index-or-replace at ``/{index}/{type}/{id}``."""
    return _typed(
        "document_index_action_v7",
        (
            RoutePattern("POST", "/{index}/{type}/{id}"),
            RoutePattern("PUT", "/{index}/{type}/{id}"),
        ),
        IndexAction(client),
        deprecation,
    )


def compatible_create_handler(client: DocumentClient, deprecation: DeprecationLogger) -> CompatibilityAdapter:
    """Create-only at ``/{index}/{type}/{id}/_create``."""
    return _typed(
        "document_create_action_v7",
        (
            RoutePattern("POST", "/{index}/{type}/{id}/_create"),
            RoutePattern("PUT", "/{index}/{type}/{id}/_create"),
        ),
        CreateHandler(client),
        deprecation,
    )


def compatible_auto_id_handler(
    client: DocumentClient,
    nodes_in_cluster: NodesSupplier,
    deprecation: DeprecationLogger,
) -> CompatibilityAdapter:
    """Create with a server-assigned id at ``/{index}/{type}``."""
    return _typed(
        "document_create_action_auto_id_v7",
        (RoutePattern("POST", "/{index}/{type}"),),
        AutoIdHandler(client, nodes_in_cluster),
        deprecation,
    )


def check_major_version(major_version: int) -> None:
    """Fail fast unless the service is exactly one major ahead of version 7."""
    if major_version != COMPATIBLE_VERSION + 1:
        msg = (
            f"REST API compatibility for version {COMPATIBLE_VERSION} is only supported "
            f"on version {COMPATIBLE_VERSION + 1}, not {major_version}."
        )
        raise ConfigurationError(msg)


def v7_handlers(
    client: DocumentClient,
    nodes_in_cluster: NodesSupplier,
    deprecation: DeprecationLogger,
    *,
    major_version: int,
) -> tuple[CompatibilityAdapter, ...]:
    """Build the three typed-route adapters after the version check."""
    check_major_version(major_version)
    return (
        compatible_index_action(client, deprecation),
        compatible_create_handler(client, deprecation),
        compatible_auto_id_handler(client, nodes_in_cluster, deprecation),
    )


def register_v7_handlers(
    controller: RestController,
    client: DocumentClient,
    nodes_in_cluster: NodesSupplier,
    deprecation: DeprecationLogger,
    *,
    major_version: int,
) -> None:
    """Register the typed-route adapters on *controller*.

    Raises ``ConfigurationError`` on a version mismatch before any route
    is registered, or if a legacy route overlaps an existing one.
    """
    controller.register_all(v7_handlers(client, nodes_in_cluster, deprecation, major_version=major_version))
