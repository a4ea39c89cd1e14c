"""Execution mode — console or networked.

Detected once per App and immutable afterwards. Path resolution and
output sinks differ by mode; dispatch, middleware, and error handling
do not.
"""

import os
from collections.abc import Mapping
from enum import Enum


class Mode(Enum):
    CLI = "cli"
    HTTP = "http"


# Variables a CGI/WSGI/ASGI host sets for the process it serves from
_SERVER_ENV_KEYS = ("GATEWAY_INTERFACE", "SERVER_SOFTWARE")


def detect_mode(environ: Mapping[str, str] | None = None) -> Mode:
    """Guess the mode from the process environment.

    ``OMNIAPP_MODE`` (``"cli"`` or ``"http"``) wins when set.
    """
    env = os.environ if environ is None else environ
    explicit = env.get("OMNIAPP_MODE", "").strip().lower()
    if explicit:
        return Mode(explicit)
    if any(key in env for key in _SERVER_ENV_KEYS):
        return Mode.HTTP
    return Mode.CLI
