"""Tests for omniapp.dispatch and omniapp.controller."""

import sys
import types
from pathlib import Path

import pytest

from omniapp.app import App
from omniapp.controller import Controller, resolve_controller
from omniapp.mode import Mode


class Greeter(Controller):
    def before(self) -> None:
        self.app.echo("[")

    def run(self, name: str) -> None:
        self.app.echo(f"hi {name}")

    def after(self) -> None:
        self.app.echo("]")


class Plain:
    """Not a controller."""


def _app() -> App:
    return App(mode=Mode.CLI)


def _captured(app: App, handler: object, params: tuple[object, ...] = ()) -> tuple[bool, str]:
    with app.buffer.capture() as captured:
        ok = app.dispatch(handler, params)
    return ok, captured.getvalue()


@pytest.fixture
def _controller_module(monkeypatch: pytest.MonkeyPatch) -> None:
    mod = types.ModuleType("_fake_controllers")
    mod.Greeter = Greeter  # type: ignore[attr-defined]
    mod.Plain = Plain  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_controllers", mod)


class TestCallables:
    def test_called_positionally(self) -> None:
        app = _app()
        seen: list[tuple[object, ...]] = []
        ok, _ = _captured(app, lambda a, b: seen.append((a, b)), (1, "x"))
        assert ok is True
        assert seen == [(1, "x")]

    def test_string_return_is_echoed(self) -> None:
        app = _app()
        ok, body = _captured(app, lambda: "hello")
        assert ok is True
        assert body == "hello"

    def test_non_string_return_ignored(self) -> None:
        ok, body = _captured(_app(), lambda: 42)
        assert ok is True
        assert body == ""

    def test_errors_propagate(self) -> None:
        app = _app()

        def broken() -> None:
            raise KeyError("missing")

        with pytest.raises(KeyError):
            app.dispatch(broken)


class TestNotDispatchable:
    def test_none(self) -> None:
        assert _app().dispatch(None) is False

    def test_non_callable(self) -> None:
        assert _app().dispatch(42) is False

    def test_unknown_name(self) -> None:
        assert _app().dispatch("nobody") is False

    def test_unknown_module(self) -> None:
        assert _app().dispatch("_no_such_module_here:Thing") is False


class TestControllers:
    def test_class_reference(self) -> None:
        ok, body = _captured(_app(), Greeter, ("ada",))
        assert ok is True
        assert body == "[hi ada]"

    def test_registered_name(self) -> None:
        app = _app()
        app.controller("greeter")(Greeter)
        ok, body = _captured(app, "greeter", ("bob",))
        assert ok is True
        assert body == "[hi bob]"

    def test_controller_receives_params(self) -> None:
        app = _app()
        seen: list[Controller] = []

        class Spy(Controller):
            def run(self, *params: object) -> None:
                seen.append(self)

        app.dispatch(Spy, (1, 2))
        assert seen[0].params == (1, 2)
        assert seen[0].app is app

    @pytest.mark.usefixtures("_controller_module")
    def test_import_string(self) -> None:
        ok, body = _captured(_app(), "_fake_controllers:Greeter", ("cy",))
        assert ok is True
        assert body == "[hi cy]"

    @pytest.mark.usefixtures("_controller_module")
    def test_import_string_to_non_controller(self) -> None:
        assert _app().dispatch("_fake_controllers:Plain") is False

    def test_missing_module_is_not_dispatchable(self) -> None:
        assert _app().dispatch("_no_such_controllers:Greeter") is False

    def test_missing_submodule_is_not_dispatchable(self) -> None:
        assert resolve_controller("omniapp._no_such_controllers:Greeter") is None

    def test_broken_import_inside_module_propagates(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "_broken_controllers.py").write_text(
            "import _omniapp_absent_dependency\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, "_broken_controllers", raising=False)

        with pytest.raises(ModuleNotFoundError, match="_omniapp_absent_dependency"):
            _app().dispatch("_broken_controllers:Greeter")

    def test_resolve_passthrough(self) -> None:
        assert resolve_controller(Greeter) is Greeter
        assert resolve_controller(Plain) is None
        assert resolve_controller("greeter", {"greeter": Greeter}) is Greeter

    def test_plain_class_is_called_like_a_callable(self) -> None:
        assert _app().dispatch(Plain) is True

    def test_base_run_not_implemented(self) -> None:
        with pytest.raises(NotImplementedError):
            _app().dispatch(Controller)
