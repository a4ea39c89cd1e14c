"""Lifecycle event bus — synchronous publish/subscribe by event name.

The App fires these names over a request, in this relative order::

    init  run  start  stop | exception  end  shutdown

``init`` and ``shutdown`` are process-bound; the rest fire once per request.

Free-threading safety:
    The subscriber table is guarded by a Lock. ``fire()`` snapshots the
    handler list under the lock and calls handlers outside it, so a
    handler may attach or detach without deadlocking.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger("omniapp.events")

EventHandler = Callable[..., Any]

LIFECYCLE_EVENTS: tuple[str, ...] = (
    "init",
    "run",
    "start",
    "stop",
    "exception",
    "end",
    "shutdown",
)


class EventBus:
    """Named events with ordered handlers.

    Usage::

        bus = EventBus()
        bus.attach("start", lambda: print("request started"))
        bus.fire("start")

    Handler exceptions propagate to the caller of ``fire()``.
    """

    __slots__ = ("_handlers", "_lock")

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}
        self._lock = threading.Lock()

    def attach(self, name: str, handler: EventHandler) -> EventHandler:
        """Subscribe *handler* to *name*. Returns the handler (decorator friendly)."""
        with self._lock:
            self._handlers.setdefault(name, []).append(handler)
        return handler

    def detach(self, name: str, handler: EventHandler | None = None) -> None:
        """Remove one handler, or every handler for *name* when none is given."""
        with self._lock:
            if handler is None:
                self._handlers.pop(name, None)
                return
            handlers = self._handlers.get(name)
            if handlers and handler in handlers:
                handlers.remove(handler)

    def fire(self, name: str, *args: Any) -> int:
        """Call every handler for *name* in attach order. Returns the count called."""
        with self._lock:
            handlers = tuple(self._handlers.get(name, ()))
        logger.debug("event %s (%d handlers)", name, len(handlers))
        for handler in handlers:
            handler(*args)
        return len(handlers)

    def handlers(self, name: str) -> tuple[EventHandler, ...]:
        """Snapshot of the handlers attached to *name*."""
        with self._lock:
            return tuple(self._handlers.get(name, ()))
