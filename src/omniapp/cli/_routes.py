"""``omniapp routes`` — print the route table."""

import argparse
import sys

from omniapp.cli._resolve import resolve_app


def _describe(handler: object) -> str:
    if isinstance(handler, str):
        return handler
    module = getattr(handler, "__module__", None)
    name = getattr(handler, "__qualname__", None) or type(handler).__name__
    return f"{module}:{name}" if module else name


def list_routes(args: argparse.Namespace) -> None:
    """Print one line per route: path, then handler."""
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not app.initialized:
        app.init()

    routes = app.router.routes
    if not routes:
        print("No routes registered.")
        return

    width = max(len(route.path) for route in routes)
    for route in routes:
        print(f"{route.path.ljust(width)}  {_describe(route.handler)}")
