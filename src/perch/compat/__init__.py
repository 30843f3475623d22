"""REST API compatibility: previous-major-version routes over current handlers.

    CompatibilityAdapter -- wraps a handler under legacy route patterns
    register_v7_handlers -- typed document index routes from version 7
"""

from perch.compat.adapter import CompatibilityAdapter
from perch.compat.v7 import (
    TYPES_DEPRECATION_KEY,
    TYPES_DEPRECATION_MESSAGE,
    register_v7_handlers,
    v7_handlers,
)

__all__ = [
    "TYPES_DEPRECATION_KEY",
    "TYPES_DEPRECATION_MESSAGE",
    "CompatibilityAdapter",
    "register_v7_handlers",
    "v7_handlers",
]
