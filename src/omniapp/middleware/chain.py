"""Middleware chain — an explicit ordered sequence with index successors.

Units are stored in registration order; the last one registered is the
head. Unit *i* delegates to unit *i - 1*, and unit 0 delegates to the
terminal step. The successor relation is an index handed out per
invocation, so no unit ever holds a reference to another.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from omniapp.middleware.protocol import Middleware, Next

if TYPE_CHECKING:
    from omniapp.app import App


class MiddlewareChain:
    """Onion-ordered middleware.

    Usage::

        chain = MiddlewareChain(app, terminal=app.call)
        chain.prepend(RunTime())
        chain.prepend(my_middleware)   # now the head
        chain.invoke_head()

    Entry order is reverse registration; post-work order is registration.
    """

    __slots__ = ("_app", "_terminal", "_units")

    def __init__(self, app: App, terminal: Callable[[], object]) -> None:
        self._app = app
        self._terminal = terminal
        self._units: list[Middleware] = []

    def prepend(self, unit: Middleware) -> None:
        """Install *unit* as the new head. It delegates to the previous head."""
        if any(existing is unit for existing in self._units):
            msg = f"Middleware {unit!r} is already in the chain."
            raise ValueError(msg)
        self._units.append(unit)

    @property
    def head(self) -> Middleware | None:
        return self._units[-1] if self._units else None

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[Middleware]:
        """Units from head (outermost) to innermost."""
        return reversed(self._units)

    def invoke_head(self) -> None:
        """Run the whole chain, starting at the head."""
        self._invoke(len(self._units) - 1)

    def _invoke(self, index: int) -> None:
        if index < 0:
            self._terminal()
            return
        self._units[index](self._app, self._next(index - 1))

    def _next(self, index: int) -> Next:
        called = False

        def next_() -> None:
            nonlocal called
            if called:
                msg = "next() called more than once by the same middleware."
                raise RuntimeError(msg)
            called = True
            self._invoke(index)

        return next_
