"""``perch routes``: list registered routes.

Prints METHOD, PATH, HANDLER and COMPAT columns; legacy routes served by
a compatibility adapter are marked ``yes``.
"""

import argparse
import sys

from perch.cli._resolve import resolve_app
from perch.errors import ConfigurationError


def format_routes(rows: list[tuple[str, str, str, str]]) -> str:
    header = ("METHOD", "PATH", "HANDLER", "COMPAT")
    widths = [max(len(r[i]) for r in (header, *rows)) for i in range(3)]
    fmt = f"{{:<{widths[0]}}}  {{:<{widths[1]}}}  {{:<{widths[2]}}}  {{}}"
    lines = [fmt.format(*header), "-" * min(sum(widths) + 12, 100)]
    lines.extend(fmt.format(*row) for row in rows)
    return "\n".join(lines)


def run_routes(args: argparse.Namespace) -> None:
    """Resolve ``args.app``, freeze it, and print its route table."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    try:
        routes = app.controller.routes
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    rows = [
        (
            ", ".join(sorted(route.methods)),
            route.path,
            route.name,
            "yes" if route.handler.compatibility_required else "",
        )
        for route in routes
    ]
    print(format_routes(rows))
