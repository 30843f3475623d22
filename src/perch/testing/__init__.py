"""Test utilities for perch applications.

Provides an in-process ASGI test client and test doubles for the
deprecation logger::

    from perch.testing import RecordingDeprecationLogger, TestClient
"""

from perch.testing.client import TestClient
from perch.testing.doubles import FailingDeprecationLogger, RecordingDeprecationLogger

__all__ = [
    "FailingDeprecationLogger",
    "RecordingDeprecationLogger",
    "TestClient",
]
