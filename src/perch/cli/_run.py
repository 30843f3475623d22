"""``perch run``: start the server for an app import string."""

import argparse
import logging
import sys

from perch.cli._resolve import resolve_app


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and serve it. CLI flags override app config."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not logging.getLogger().handlers:
        logging.basicConfig(level=app.config.log_level.upper())

    app.run(host=args.host, port=args.port)
