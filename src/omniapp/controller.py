"""Controllers — named/class handlers.

A route handler is either a plain callable or a controller. Controllers
are classes: constructed per request with the app and the route params,
then driven through ``before()``, ``run(*params)``, ``after()``.

A controller can be referenced three ways:

- the class itself (``Controller`` subclass),
- a name registered with ``App.controller()`` or ``AppConfig.controllers``,
- an import string, ``"package.module:ClassName"``.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from omniapp.app import App

logger = logging.getLogger("omniapp.controller")


class Controller:
    """Base class for class-based handlers.

    Usage::

        class UserController(Controller):
            def run(self, user_id: int) -> None:
                self.app.echo(f"user {user_id}")

        app.map("/users/{id:int}", UserController)
    """

    def __init__(self, app: App, params: tuple[Any, ...] = ()) -> None:
        self.app = app
        self.params = params

    def before(self) -> None:
        """Hook run before ``run()``."""

    def run(self, *params: Any) -> Any:
        raise NotImplementedError

    def after(self) -> None:
        """Hook run after ``run()`` returns normally."""

    def __call__(self) -> Any:
        self.before()
        result = self.run(*self.params)
        self.after()
        return result


def is_controller_class(obj: object) -> bool:
    return isinstance(obj, type) and issubclass(obj, Controller)


def resolve_controller(
    ref: str | type,
    registry: Mapping[str, type] | None = None,
) -> type[Controller] | None:
    """Turn a controller reference into a Controller subclass.

    Returns ``None`` when the reference cannot be resolved; the caller
    treats that exactly like a routing miss.
    """
    if is_controller_class(ref):
        return ref  # type: ignore[return-value]
    if not isinstance(ref, str):
        return None

    if registry and ref in registry:
        found: object = registry[ref]
    elif ":" in ref:
        module_path, _, attr_name = ref.partition(":")
        try:
            module = importlib.import_module(module_path)
        except ModuleNotFoundError as exc:
            # Only a missing controller module is a miss; its own broken imports are not.
            if exc.name is None or not (
                module_path == exc.name or module_path.startswith(exc.name + ".")
            ):
                raise
            logger.debug("controller module %r not found", module_path)
            return None
        found = getattr(module, attr_name, None)
    else:
        return None

    if is_controller_class(found):
        return found  # type: ignore[return-value]
    logger.debug("controller reference %r resolved to %r, not a Controller", ref, found)
    return None
