"""Compatibility adapter: serve a legacy route shape with a current handler.

A ``CompatibilityAdapter`` wraps any ``RestHandler`` (the *delegate*)
and answers to a different set of route patterns: the ones an older API
version used for the same operation. It owns no business logic. On each
request it:

1. fires the deprecation signal for its key,
2. consumes the legacy path variable the delegate does not understand,
3. switches the request into compatibility mode,
4. returns whatever ``delegate.handle(request)`` returns.

Deduplication of the deprecation signal belongs to the injected
``DeprecationLogger``. The adapter fires on every call and holds no lock.
Errors raised by the delegate pass through untouched.

Free-threading safety:
    Adapters are frozen after construction and keep no per-request
    state; one instance serves every concurrent request.
"""

import logging
from dataclasses import dataclass

from perch.deprecation import DeprecationLogger
from perch.http.request import Request
from perch.rest.handler import ResponseProducer, RestHandler
from perch.routing.route import RoutePattern

logger = logging.getLogger("perch.compat")


@dataclass(frozen=True, slots=True)
class CompatibilityAdapter:
    """A ``RestHandler`` that adapts legacy requests for *delegate*.

    Usage::

        adapter = CompatibilityAdapter(
            name="document_index_action_v7",
            routes=(RoutePattern("PUT", "/{index}/{type}/{id}"),),
            delegate=IndexAction(client),
            deprecation=deprecation_logger,
            deprecation_key="index_with_types",
            deprecation_message=TYPES_DEPRECATION_MESSAGE,
            legacy_param="type",
        )
    """

    name: str
    routes: tuple[RoutePattern, ...]
    delegate: RestHandler
    deprecation: DeprecationLogger
    deprecation_key: str
    deprecation_message: str
    legacy_param: str

    def __post_init__(self) -> None:
        if self.name == self.delegate.name:
            msg = f"Adapter name {self.name!r} must differ from its delegate's."
            raise ValueError(msg)
        placeholder = f"{{{self.legacy_param}}}"
        for pattern in self.routes:
            if placeholder not in pattern.path.split("/"):
                msg = f"Route {pattern} does not declare the legacy parameter {placeholder}."
                raise ValueError(msg)

    @property
    def compatibility_required(self) -> bool:
        return True

    def handle(self, request: Request) -> ResponseProducer:
        self._signal_deprecation()
        request.path_param(self.legacy_param)
        request.enter_compatibility_mode()
        return self.delegate.handle(request)

    def _signal_deprecation(self) -> None:
        try:
            self.deprecation.emit(self.deprecation_key, self.deprecation_message)
        except Exception:
            # Emission failures are logged, never raised.
            logger.warning(
                "Could not emit deprecation %r for %s",
                self.deprecation_key,
                self.name,
                exc_info=True,
            )
