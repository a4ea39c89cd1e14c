"""Output capture scopes.

A capture scope is a region during which emitted output is buffered
instead of going straight to the output sink. Scopes nest strictly:
the most recently opened scope receives writes, and scopes close in
reverse order of opening. ``capture()`` is a context manager, so a
scope is released on every exit path, signals included.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO


class Capture:
    """One open (or closed) capture scope."""

    __slots__ = ("_io", "closed")

    def __init__(self) -> None:
        self._io = StringIO()
        self.closed = False

    def write(self, text: str) -> None:
        self._io.write(text)

    def clean(self) -> None:
        """Discard everything written so far."""
        self._io.seek(0)
        self._io.truncate(0)

    def getvalue(self) -> str:
        return self._io.getvalue()


class OutputBuffer:
    """Stack of capture scopes.

    Usage::

        buffer = OutputBuffer()
        with buffer.capture() as captured:
            buffer.write("hello")
        assert captured.getvalue() == "hello"
    """

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[Capture] = []

    @property
    def level(self) -> int:
        """Number of open scopes."""
        return len(self._stack)

    @property
    def current(self) -> Capture | None:
        return self._stack[-1] if self._stack else None

    @contextmanager
    def capture(self) -> Iterator[Capture]:
        """Open a nested capture scope for the duration of the block."""
        scope = Capture()
        self._stack.append(scope)
        try:
            yield scope
        finally:
            # Strict nesting: the scope being closed must be the innermost one.
            if not self._stack or self._stack[-1] is not scope:
                msg = "Capture scopes closed out of order."
                raise RuntimeError(msg)
            self._stack.pop()
            scope.closed = True

    def write(self, text: str) -> bool:
        """Write to the innermost scope. Returns False when no scope is open."""
        if not self._stack:
            return False
        self._stack[-1].write(text)
        return True

    def clean(self) -> None:
        """Clear the innermost scope, if any. Leaves the scope open."""
        if self._stack:
            self._stack[-1].clean()

    def reset(self) -> None:
        """Drop every open scope. Only for process-level recovery."""
        self._stack.clear()
