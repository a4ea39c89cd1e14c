"""Kida environment setup for ``App.render()``.

The environment is created lazily on first render from ``AppConfig.views``
and reused for the life of the app.
"""

from collections.abc import Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from omniapp.config import AppConfig
from omniapp.errors import ConfigurationError


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment rooted at ``config.views``."""
    if config.views is None:
        msg = "No views directory configured. Set AppConfig(views=...) to use render()."
        raise ConfigurationError(msg)
    return Environment(
        loader=FileSystemLoader(str(config.views)),
        autoescape=True,
        auto_reload=config.debug,
    )


def render_template(env: Environment, name: str, context: Mapping[str, Any]) -> str:
    """Render a full template to string."""
    template = env.get_template(name)
    return template.render(dict(context))
