"""``omniapp run`` — handle one request in console mode."""

import argparse
import sys

from omniapp.cli._resolve import resolve_app
from omniapp.errors import ConfigurationError
from omniapp.mode import Mode
from omniapp.output import ConsoleOutput


def run_request(args: argparse.Namespace) -> int:
    """Resolve ``args.app``, route ``args.segments``, return the exit code.

    The app is initialized with its own config when it has not been yet.
    Exit code is 0 for statuses below 400, 1 otherwise.
    """
    try:
        app = resolve_app(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if app.mode is not Mode.CLI:
        print(f"Error: {args.app!r} is not a console app (mode={app.mode.value})", file=sys.stderr)
        return 1

    if not app.initialized:
        app.init()

    try:
        output = app.run(argv=["omniapp", *args.segments])
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    assert isinstance(output, ConsoleOutput)
    return output.exit_code
