"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    def my_mw(app: App, next: Next) -> None: ...

No base class required. The framework checks the shape, not the lineage.

``next`` runs the rest of the chain. Call it exactly once to continue,
or not at all to short-circuit. Work placed after ``next()`` runs on the
way back out, in registration order.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias

if TYPE_CHECKING:
    from omniapp.app import App

# The rest of the chain, from the point of view of one unit
Next: TypeAlias = Callable[[], None]


class Middleware(Protocol):
    """Protocol for omniapp middleware.

    Accepts both functions and callable objects::

        # Function middleware
        def banner(app: App, next: Next) -> None:
            app.echo("== ")
            next()

        # Class middleware
        class Maintenance:
            def __call__(self, app: App, next: Next) -> None:
                app.output(503, "Back soon")
    """

    def __call__(self, app: App, next: Next) -> None: ...
