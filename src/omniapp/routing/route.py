"""Routing value types: path segments, registered routes, matches."""

import re
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """One slash-separated piece of a route path.

    ``users`` is literal; ``{id:int}`` captures a parameter named ``id``
    through the ``int`` converter (``str`` when no converter is given).
    """

    text: str
    param: str | None = None
    converter: str = "str"

    @property
    def is_param(self) -> bool:
        return self.param is not None


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route: a path pattern and the handler it resolves to.

    ``handler`` is either a plain callable or a named/class controller
    reference; the dispatcher decides which.
    """

    path: str
    handler: Any
    name: str | None = None
    pattern: re.Pattern[str] | None = field(default=None, compare=False, repr=False)
    param_types: tuple[str, ...] = field(default=(), compare=False, repr=False)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful resolve: handler, route, positional params."""

    handler: Any
    route: Route
    params: tuple[Any, ...] = ()
