"""Ordered router with compiled path patterns.

Routes are matched in registration order. The first match wins for
``resolve()``; ``matches()`` yields every match so a handler that
passes can fall through to the next one.

A miss is a first-class outcome (``None``), never an exception.
"""

import logging
import re
from collections.abc import Iterator
from typing import Any

from omniapp.errors import ConfigurationError
from omniapp.routing.params import CONVERTERS, convert_param
from omniapp.routing.route import PathSegment, Route, RouteMatch

logger = logging.getLogger("omniapp.routing")


_PARAM = re.compile(r"\{(?P<name>\w+)(?::(?P<converter>\w+))?\}")


def parse_path(path: str) -> list[PathSegment]:
    """Split a route path into literal and parameter segments.

    ``"/users/{id:int}"`` gives ``users`` (literal) and ``id`` (converted
    with ``int``). Empty segments are dropped, so ``"/"`` parses to ``[]``.
    """
    segments: list[PathSegment] = []
    for part in filter(None, path.split("/")):
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> syntax. "
                "Use {param} (or {param:int}) for path parameters."
            )
            raise ConfigurationError(msg)
        m = _PARAM.fullmatch(part)
        if m is None:
            segments.append(PathSegment(text=part))
            continue
        converter = m["converter"] or "str"
        if converter not in CONVERTERS:
            msg = f"Unknown converter {converter!r} in route {path!r}."
            raise ConfigurationError(msg)
        segments.append(PathSegment(text=part, param=m["name"], converter=converter))
    return segments


def compile_path(path: str) -> tuple[re.Pattern[str], tuple[str, ...]]:
    """Compile a route path into a full-match regex and its converter names."""
    segments = parse_path(path)
    parts: list[str] = []
    for i, seg in enumerate(segments):
        if not seg.is_param:
            parts.append(re.escape(seg.text))
            continue
        converter = CONVERTERS[seg.converter]
        if converter.spans_slashes and i != len(segments) - 1:
            msg = f"A {{{seg.param}:{seg.converter}}} segment must be last in route {path!r}."
            raise ConfigurationError(msg)
        parts.append(f"({converter.pattern})")
    types = tuple(seg.converter for seg in segments if seg.is_param)
    return re.compile("/".join(parts)), types


class Router:
    """Ordered router.

    Usage::

        router = Router()
        router.add(Route("/users/{id:int}", show_user))
        match = router.resolve("/users/42")
        match.handler, match.params   # (show_user, (42,))

    Also keeps the not-found and error handlers the App falls back to.
    """

    __slots__ = ("_error_handler", "_not_found_handler", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._not_found_handler: Any = None
        self._error_handler: Any = None

    def add(self, route: Route) -> Route:
        """Register a route. Its pattern is compiled now, so bad paths fail early."""
        pattern, types = compile_path(route.path)
        compiled = Route(
            path=route.path,
            handler=route.handler,
            name=route.name,
            pattern=pattern,
            param_types=types,
        )
        self._routes.append(compiled)
        return compiled

    def on(self, path: str, handler: Any, *, name: str | None = None) -> Route:
        """Shorthand for ``add(Route(path, handler, name))``."""
        return self.add(Route(path=path, handler=handler, name=name))

    def discard(self, route: Route) -> None:
        """Remove a route previously returned by ``add()``. Missing routes are ignored."""
        self._routes = [r for r in self._routes if r is not route]

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def matches(self, path: str) -> Iterator[RouteMatch]:
        """Yield every route matching *path*, in registration order."""
        normalized = path.strip("/")
        for route in self._routes:
            assert route.pattern is not None
            m = route.pattern.fullmatch(normalized)
            if m is None:
                continue
            try:
                params = tuple(
                    convert_param(value, param_type)
                    for value, param_type in zip(m.groups(), route.param_types, strict=True)
                )
            except ValueError:
                continue
            yield RouteMatch(handler=route.handler, route=route, params=params)

    def resolve(self, path: str) -> RouteMatch | None:
        """Return the first match for *path*, or ``None`` when nothing matches."""
        for match in self.matches(path):
            return match
        logger.debug("no route matches %r", path)
        return None

    # -- Fallback handlers --

    def register_not_found(self, handler: Any) -> None:
        self._not_found_handler = handler

    @property
    def not_found_handler(self) -> Any:
        return self._not_found_handler

    def register_error(self, handler: Any) -> None:
        self._error_handler = handler

    @property
    def error_handler(self) -> Any:
        return self._error_handler
