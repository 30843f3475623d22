"""Routing: compiled route table with O(path-depth) matching.

Routes are registered during setup and compiled into an immutable
lookup structure when the app freezes. Several route patterns may point
at one handler; no two handlers may claim the same method and path shape.
"""

from perch.routing.route import Route, RouteMatch, RoutePattern
from perch.routing.router import Router, parse_path

__all__ = ["Route", "RouteMatch", "RoutePattern", "Router", "parse_path"]
