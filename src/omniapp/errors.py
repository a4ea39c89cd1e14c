"""omniapp exception hierarchy.

Shared across Router, App, dispatcher, and middleware so every module
raises and catches the same types.

Two families live here:

- Errors (``OmniError``, ``ConfigurationError``) describe real faults.
- Signals (``Stop``, ``Pass``) are not faults at all. Handlers raise them
  to unwind to the request boundary without returning through every frame.
"""


class OmniError(Exception):
    """Base for all omniapp-specific errors."""


class ConfigurationError(OmniError):
    """Raised when the app is used in a state it was not set up for.

    Running before ``init()``, initializing twice, adding middleware
    before ``init()``. Always fatal: never converted into a response.
    """


class Signal(OmniError):  # noqa: N818
    """Base for control-flow signals.

    Caught by ``App.call()`` (or ``App.run()`` when raised from a
    middleware) and never surfaced to the caller of ``run()``.
    """


class Stop(Signal):
    """Normal early termination. Output captured so far is kept."""


class Pass(Signal):
    """Skip the current route. Output captured so far is discarded.

    Routing falls through to the next route matching the same path.
    """
