"""Deprecation signals.

A handler that serves a deprecated surface calls ``emit(key, message)``
on an injected ``DeprecationLogger``. Callers fire unconditionally on
every use; deduplication is the logger's job, not the caller's.

``HeaderDeprecationLogger`` is the production implementation:

- every call attaches a ``Warning: 299`` header to the current response,
  so each client sees the warning on each deprecated request;
- the log line on ``perch.deprecation`` is written only the first time a
  key is seen (per ``X-Opaque-Id``), so operators are not flooded.

Seen keys live in a bounded LRU guarded by a lock; concurrent requests
racing on the same key log at most once.
"""

import logging
import threading
from collections import OrderedDict
from typing import Protocol

from perch import __version__
from perch.context import add_response_warning, request_var

logger = logging.getLogger("perch.deprecation")

WARNING_CODE = 299


class DeprecationLogger(Protocol):
    """Sink for deprecation signals.

    Implementations must be safe to call concurrently from many requests
    and own deduplication of repeated keys.
    """

    def emit(self, key: str, message: str) -> None: ...


def format_warning(message: str, agent: str = f"perch-{__version__}") -> str:
    """Render a ``Warning`` header value (RFC 7234 section 5.5)."""
    escaped = message.replace("\\", "\\\\").replace('"', '\\"')
    return f'{WARNING_CODE} {agent} "{escaped}"'


class HeaderDeprecationLogger:
    """Deprecation logger that warns the client every time and the operator once.

    Args:
        max_keys: How many distinct keys to remember before the least
            recently seen one is forgotten (and may be logged again).
    """

    __slots__ = ("_lock", "_max_keys", "_seen")

    def __init__(self, max_keys: int = 128) -> None:
        if max_keys < 1:
            msg = f"max_keys must be positive, got {max_keys}"
            raise ValueError(msg)
        self._max_keys = max_keys
        self._seen: OrderedDict[str, None] = OrderedDict()
        self._lock = threading.Lock()

    def emit(self, key: str, message: str) -> None:
        add_response_warning(format_warning(message))
        if self._first_sighting(self._scoped_key(key)):
            logger.warning(message, extra={"deprecation_key": key})

    def _scoped_key(self, key: str) -> str:
        request = request_var.get(None)
        opaque_id = request.opaque_id if request is not None else None
        return f"{key}:{opaque_id}" if opaque_id else key

    def _first_sighting(self, key: str) -> bool:
        with self._lock:
            if key in self._seen:
                self._seen.move_to_end(key)
                return False
            self._seen[key] = None
            if len(self._seen) > self._max_keys:
                self._seen.popitem(last=False)
            return True
