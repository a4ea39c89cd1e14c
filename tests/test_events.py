"""Tests for omniapp.events — EventBus."""

import pytest

from omniapp.events import LIFECYCLE_EVENTS, EventBus


class TestEventBus:
    def test_fire_calls_handlers_in_attach_order(self) -> None:
        bus = EventBus()
        calls: list[str] = []
        bus.attach("start", lambda: calls.append("a"))
        bus.attach("start", lambda: calls.append("b"))

        assert bus.fire("start") == 2
        assert calls == ["a", "b"]

    def test_fire_unknown_event_is_noop(self) -> None:
        assert EventBus().fire("nothing") == 0

    def test_fire_passes_arguments(self) -> None:
        bus = EventBus()
        seen: list[object] = []
        bus.attach("custom", seen.append)
        bus.fire("custom", 42)
        assert seen == [42]

    def test_detach_one(self) -> None:
        bus = EventBus()
        calls: list[str] = []

        def a() -> None:
            calls.append("a")

        bus.attach("stop", a)
        bus.attach("stop", lambda: calls.append("b"))
        bus.detach("stop", a)
        bus.fire("stop")
        assert calls == ["b"]

    def test_detach_all(self) -> None:
        bus = EventBus()
        bus.attach("stop", lambda: None)
        bus.detach("stop")
        assert bus.handlers("stop") == ()

    def test_handler_errors_propagate(self) -> None:
        bus = EventBus()

        def broken() -> None:
            raise RuntimeError("handler failed")

        bus.attach("run", broken)
        with pytest.raises(RuntimeError, match="handler failed"):
            bus.fire("run")

    def test_handler_may_attach_during_fire(self) -> None:
        bus = EventBus()
        bus.attach("run", lambda: bus.attach("run", lambda: None))
        assert bus.fire("run") == 1
        assert len(bus.handlers("run")) == 2

    def test_lifecycle_event_names(self) -> None:
        assert LIFECYCLE_EVENTS == (
            "init",
            "run",
            "start",
            "stop",
            "exception",
            "end",
            "shutdown",
        )
