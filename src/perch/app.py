"""Perch application class.

Mutable during setup (extra handler registration).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.cluster import NodesSupplier, Version, static_nodes
from perch.compat.v7 import register_v7_handlers
from perch.config import AppConfig
from perch.deprecation import DeprecationLogger, HeaderDeprecationLogger
from perch.document.client import DocumentClient
from perch.document.handlers import AutoIdHandler, CreateHandler, IndexAction
from perch.rest.controller import RestController
from perch.rest.handler import RestHandler
from perch.server.handler import handle_request

logger = logging.getLogger("perch.server")


class App:
    """The perch application.

    Serves the typeless document index API for *client* and, when
    ``config.rest_compatibility`` is on, the version 7 typed routes
    over the same handlers.

    Usage::

        app = App(client=InMemoryDocumentClient())
        app.run()

    Thread safety:
        The setup phase is single-threaded. The freeze transition uses a
        Lock + double-check to ensure exactly one thread builds the
        controller, even if several ASGI workers call ``__call__()``
        concurrently on first request.
    """

    __slots__ = (
        "_client",
        "_controller",
        "_deprecation",
        "_extra_handlers",
        "_freeze_lock",
        "_frozen",
        "_nodes_in_cluster",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        client: DocumentClient,
        nodes_in_cluster: NodesSupplier | None = None,
        deprecation: DeprecationLogger | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self._client = client
        self._nodes_in_cluster: NodesSupplier = nodes_in_cluster or static_nodes(
            Version(self.config.major_version)
        )
        self._deprecation: DeprecationLogger = deprecation or HeaderDeprecationLogger(
            self.config.deprecation_cache_size
        )
        self._extra_handlers: list[RestHandler] = []
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._controller: RestController | None = None

    # -- Registration --

    def register(self, handler: RestHandler) -> RestHandler:
        """Register an additional REST handler. Returns it unchanged."""
        self._check_not_frozen()
        self._extra_handlers.append(handler)
        return handler

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a startup hook (sync or async) via decorator."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a shutdown hook (sync or async) via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    @property
    def controller(self) -> RestController:
        """The compiled controller. Freezes the app on first access."""
        self._ensure_frozen()
        assert self._controller is not None
        return self._controller

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Compile the app and serve it with pounce.

        Requires the ``server`` extra (``pip install perch[server]``).
        """
        self._ensure_frozen()

        from pounce.config import ServerConfig
        from pounce.server import Server

        config = ServerConfig(
            host=host or self.config.host,
            port=port or self.config.port,
            workers=1 if self.config.debug else self.config.workers,
            log_level=self.config.log_level,
        )
        Server(config, self).run()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then delegates HTTP scopes to
        the request handler pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            controller=self.controller,
            max_content_length=self.config.max_content_length,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before first HTTP request), so route
        conflicts and version mismatches fail the server start.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    await self._run_hooks(self._startup_hooks)
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                await self._run_hooks(self._shutdown_hooks)
                await send({"type": "lifespan.shutdown.complete"})
                return

    @staticmethod
    async def _run_hooks(hooks: list[Callable[..., Any]]) -> None:
        for hook in hooks:
            result = hook()
            if inspect.isawaitable(result):
                await result

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build and compile the controller.

        MUST only be called while holding _freeze_lock.
        """
        controller = RestController(compatible_version=self.config.major_version - 1)
        controller.register_all(
            (
                IndexAction(self._client),
                CreateHandler(self._client),
                AutoIdHandler(self._client, self._nodes_in_cluster),
            )
        )
        if self.config.rest_compatibility:
            register_v7_handlers(
                controller,
                self._client,
                self._nodes_in_cluster,
                self._deprecation,
                major_version=self.config.major_version,
            )
        controller.register_all(self._extra_handlers)
        controller.compile()

        self._controller = controller
        self._frozen = True
        logger.debug("Compiled %d handlers", len(controller.handlers))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register handlers and hooks before calling app.run()."
            )
            raise RuntimeError(msg)
