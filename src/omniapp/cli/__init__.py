"""omniapp CLI — run one request in console mode, list routes.

Entry point registered as ``omniapp`` in ``pyproject.toml``::

    [project.scripts]
    omniapp = "omniapp.cli:main"
"""

import argparse
import logging
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``omniapp`` command."""
    parser = argparse.ArgumentParser(
        prog="omniapp",
        description="omniapp — application lifecycle and request dispatch.",
    )
    parser.add_argument(
        "--log-level",
        default="warning",
        choices=["debug", "info", "warning", "error"],
        help="Logging level (default: warning)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- omniapp run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Handle one request in console mode")
    run_parser.add_argument("app", help="Import string (e.g. myapp:app)")
    run_parser.add_argument(
        "segments",
        nargs="*",
        help="Path segments; `omniapp run myapp:app users 42` routes /users/42",
    )

    # -- omniapp routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered routes")
    routes_parser.add_argument("app", help="Import string (e.g. myapp:app)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from omniapp.cli._run import run_request

        sys.exit(run_request(args))
    elif args.command == "routes":
        from omniapp.cli._routes import list_routes

        list_routes(args)
