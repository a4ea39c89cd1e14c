"""omniapp — application lifecycle and request dispatch for small web/CLI apps.

One App owns config, routes and a middleware chain, and drives each
request through init → run → call → dispatch → stop/pass/not found/error.

Basic usage::

    from omniapp import App

    app = App()
    app.init()

    @app.route("/hello/{name}")
    def hello(name):
        return f"Hello, {name}!"

    app.run()          # console: `python app.py hello world`

Served over ASGI with ``App(mode=Mode.HTTP)`` and any ASGI server.
"""

__version__ = "0.2.0"
__all__ = [
    "App",
    "AppConfig",
    "AppState",
    "ConfigurationError",
    "Controller",
    "EventBus",
    "Middleware",
    "Mode",
    "Next",
    "OmniError",
    "Pass",
    "Request",
    "Router",
    "RunTime",
    "Stop",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import omniapp`` fast while providing a clean top-level API.
    """
    if name in ("App", "AppState"):
        from omniapp import app as _app

        return getattr(_app, name)

    if name == "AppConfig":
        from omniapp.config import AppConfig

        return AppConfig

    if name == "Controller":
        from omniapp.controller import Controller

        return Controller

    if name == "EventBus":
        from omniapp.events import EventBus

        return EventBus

    if name == "Mode":
        from omniapp.mode import Mode

        return Mode

    if name == "Request":
        from omniapp.http.request import Request

        return Request

    if name == "Router":
        from omniapp.routing.router import Router

        return Router

    if name in ("Middleware", "Next", "RunTime"):
        from omniapp import middleware as _mw

        return getattr(_mw, name)

    if name in ("ConfigurationError", "OmniError", "Pass", "Stop"):
        from omniapp import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
