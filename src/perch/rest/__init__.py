"""REST handlers: Protocol-based, no inheritance required.

A REST handler is any object with a ``name``, a tuple of ``RoutePattern``
``routes``, a ``compatibility_required`` flag, and a ``handle(request)``
method returning a zero-argument coroutine function that produces the
response. The framework checks the shape, not the lineage.

    RestHandler -- the handler protocol
    RestController -- handler registry, route table, and dispatch
"""

from perch.rest.controller import RestController
from perch.rest.handler import ResponseProducer, RestHandler

__all__ = ["ResponseProducer", "RestController", "RestHandler"]
