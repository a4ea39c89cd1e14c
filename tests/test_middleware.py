"""Tests for omniapp.middleware — chain ordering and the RunTime unit."""

from typing import Any

import pytest

from omniapp.middleware.builtin import RunTime
from omniapp.middleware.chain import MiddlewareChain
from omniapp.middleware.protocol import Next


class _Recorder:
    """Middleware that logs entry and exit under its label."""

    def __init__(self, label: str, log: list[str]) -> None:
        self.label = label
        self.log = log

    def __call__(self, app: Any, next: Next) -> None:
        self.log.append(f"enter {self.label}")
        next()
        self.log.append(f"exit {self.label}")


def _chain(log: list[str]) -> MiddlewareChain:
    return MiddlewareChain(object(), terminal=lambda: log.append("terminal"))


class TestOrdering:
    def test_empty_chain_runs_terminal(self) -> None:
        log: list[str] = []
        _chain(log).invoke_head()
        assert log == ["terminal"]

    def test_onion_order(self) -> None:
        log: list[str] = []
        chain = _chain(log)
        for label in ("A", "B", "C"):
            chain.prepend(_Recorder(label, log))

        chain.invoke_head()

        assert log == [
            "enter C",
            "enter B",
            "enter A",
            "terminal",
            "exit A",
            "exit B",
            "exit C",
        ]

    def test_head_is_last_prepended(self) -> None:
        log: list[str] = []
        chain = _chain(log)
        a = _Recorder("A", log)
        b = _Recorder("B", log)
        chain.prepend(a)
        chain.prepend(b)
        assert chain.head is b
        assert list(chain) == [b, a]
        assert len(chain) == 2

    def test_function_middleware(self) -> None:
        log: list[str] = []
        chain = _chain(log)

        def tag(app: Any, next: Next) -> None:
            log.append("tag")
            next()

        chain.prepend(tag)
        chain.invoke_head()
        assert log == ["tag", "terminal"]


class TestShortCircuit:
    def test_unit_that_does_not_delegate_stops_the_chain(self) -> None:
        log: list[str] = []
        chain = _chain(log)
        chain.prepend(_Recorder("inner", log))

        def gate(app: Any, next: Next) -> None:
            log.append("gate")

        chain.prepend(gate)
        chain.invoke_head()
        assert log == ["gate"]

    def test_next_twice_raises(self) -> None:
        log: list[str] = []
        chain = _chain(log)

        def greedy(app: Any, next: Next) -> None:
            next()
            next()

        chain.prepend(greedy)
        with pytest.raises(RuntimeError, match="more than once"):
            chain.invoke_head()
        assert log == ["terminal"]


class TestFailure:
    def test_error_skips_post_work(self) -> None:
        log: list[str] = []

        def explode() -> None:
            raise ValueError("boom")

        chain = MiddlewareChain(object(), terminal=explode)
        chain.prepend(_Recorder("A", log))
        chain.prepend(_Recorder("B", log))

        with pytest.raises(ValueError, match="boom"):
            chain.invoke_head()
        assert log == ["enter B", "enter A"]

    def test_finally_still_runs(self) -> None:
        log: list[str] = []

        def explode() -> None:
            raise ValueError("boom")

        def cleanup(app: Any, next: Next) -> None:
            try:
                next()
            finally:
                log.append("cleaned")

        chain = MiddlewareChain(object(), terminal=explode)
        chain.prepend(cleanup)
        with pytest.raises(ValueError):
            chain.invoke_head()
        assert log == ["cleaned"]

    def test_same_unit_twice_rejected(self) -> None:
        log: list[str] = []
        chain = _chain(log)
        unit = _Recorder("A", log)
        chain.prepend(unit)
        with pytest.raises(ValueError, match="already in the chain"):
            chain.prepend(unit)


class TestRunTime:
    def test_records_elapsed(self) -> None:
        class _FakeApp:
            output_sink = None

        runtime = RunTime()
        chain = MiddlewareChain(_FakeApp(), terminal=lambda: None)
        chain.prepend(runtime)
        chain.invoke_head()
        assert runtime.elapsed is not None
        assert runtime.elapsed >= 0
