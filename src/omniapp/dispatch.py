"""Dispatcher — turns a resolved handler plus params into an invocation.

Two handler shapes are supported:

- named/class controllers (see ``omniapp.controller``),
- plain callables, called positionally with the params.

Anything else is not dispatchable: ``dispatch()`` returns False and the
caller treats that like a routing miss. Errors raised by the target are
not caught here; they belong to the App's exception boundary.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from omniapp.controller import resolve_controller

if TYPE_CHECKING:
    from omniapp.app import App


class Dispatcher:
    """Invoke handlers on behalf of an App.

    A ``str`` returned by a handler is written to the app's current
    capture scope, so ``return "hello"`` and ``app.echo("hello")`` are
    equivalent.
    """

    __slots__ = ("_app", "_controllers")

    def __init__(self, app: App, controllers: Mapping[str, type] | None = None) -> None:
        self._app = app
        self._controllers: dict[str, type] = dict(controllers or {})

    def register(self, name: str, controller: type) -> None:
        """Register a named controller."""
        self._controllers[name] = controller

    @property
    def controllers(self) -> Mapping[str, type]:
        return self._controllers

    def dispatch(self, handler: Any, params: Sequence[Any] = ()) -> bool:
        """Invoke *handler* with *params*. Returns False when it is not dispatchable."""
        if handler is None:
            return False

        if isinstance(handler, (str, type)):
            controller_cls = resolve_controller(handler, self._controllers)
            if controller_cls is not None:
                self._emit(controller_cls(self._app, tuple(params))())
                return True
            if isinstance(handler, str):
                return False

        if callable(handler):
            self._emit(handler(*params))
            return True

        return False

    def _emit(self, result: Any) -> None:
        if isinstance(result, str) and result:
            self._app.echo(result)
