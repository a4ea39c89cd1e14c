"""Locate the App a CLI command operates on.

``"pkg.module:attr"`` imports ``pkg.module`` and looks up ``attr``; the
attribute may be dotted (``"pkg.module:container.app"``). Without a
``:attr`` part, ``app`` is assumed. An attribute that is not an App but
is callable is treated as a factory and called once with no arguments.
"""

import importlib
from functools import reduce

from omniapp.app import App

DEFAULT_ATTRIBUTE = "app"


def resolve_app(import_string: str) -> App:
    """Import *import_string* and return the App it names.

    Raises:
        ModuleNotFoundError: The module part cannot be imported.
        AttributeError: The attribute path does not exist.
        TypeError: The target is neither an App nor a factory returning one.
    """
    module_path, _, attr_path = import_string.partition(":")
    module = importlib.import_module(module_path)
    target = reduce(getattr, (attr_path or DEFAULT_ATTRIBUTE).split("."), module)

    if isinstance(target, App):
        return target

    if not callable(target):
        msg = f"{import_string!r} is a {type(target).__name__}, not an omniapp.App instance"
        raise TypeError(msg)

    try:
        app = target()
    except Exception as exc:
        msg = f"App factory {import_string!r} failed: {exc}"
        raise TypeError(msg) from exc

    if not isinstance(app, App):
        msg = f"App factory {import_string!r} returned {type(app).__name__}, not an omniapp.App"
        raise TypeError(msg)
    return app
