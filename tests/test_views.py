"""Tests for omniapp.views — kida rendering through App.render()."""

import io
from pathlib import Path

import pytest

from omniapp.app import App
from omniapp.config import AppConfig
from omniapp.errors import ConfigurationError
from omniapp.mode import Mode
from omniapp.views import create_environment, render_template


@pytest.fixture
def views(tmp_path: Path) -> Path:
    (tmp_path / "hello.html").write_text("Hello {{ name }}!")
    return tmp_path


class TestCreateEnvironment:
    def test_requires_views_dir(self) -> None:
        with pytest.raises(ConfigurationError, match="No views directory"):
            create_environment(AppConfig())

    def test_render_template(self, views: Path) -> None:
        env = create_environment(AppConfig(views=views))
        assert render_template(env, "hello.html", {"name": "kida"}) == "Hello kida!"

    def test_autoescape(self, views: Path) -> None:
        env = create_environment(AppConfig(views=views))
        html = render_template(env, "hello.html", {"name": "<b>"})
        assert "<b>" not in html


class TestAppRender:
    def test_render_into_response(self, views: Path) -> None:
        stream = io.StringIO()
        app = App(mode=Mode.CLI, stream=stream)
        app.init({"views": views})

        @app.route("/hello/{name}")
        def hello(name: str) -> None:
            app.render("hello.html", name=name)

        output = app.run(argv=["prog", "hello", "world"])
        assert output.status == 200
        assert stream.getvalue() == "Hello world!"

    def test_render_without_views_is_fatal(self) -> None:
        stream = io.StringIO()
        app = App(mode=Mode.CLI, stream=stream)
        app.init()
        app.map("/", lambda: app.render("hello.html"))

        with pytest.raises(ConfigurationError, match="No views directory"):
            app.run(argv=["prog"])
        assert stream.getvalue() == ""
