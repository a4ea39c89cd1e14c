"""Built-in middleware: RunTime.

Installed by ``App.init()`` as the first (innermost) unit, so it measures
the request itself; anything added later wraps it.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from omniapp.middleware.protocol import Next
from omniapp.output import HTTPResponse

if TYPE_CHECKING:
    from omniapp.app import App

logger = logging.getLogger("omniapp.middleware")


class RunTime:
    """Measure how long the rest of the chain takes.

    On the HTTP path the figure is sent back as an ``X-Runtime`` header
    (seconds, six decimals). If the request raises, nothing is recorded.
    """

    __slots__ = ("elapsed", "header")

    def __init__(self, header: str = "X-Runtime") -> None:
        self.header = header
        self.elapsed: float | None = None

    def __call__(self, app: App, next: Next) -> None:
        start = time.perf_counter()
        next()
        self.elapsed = time.perf_counter() - start
        if isinstance(app.output_sink, HTTPResponse):
            app.output_sink.header(self.header, f"{self.elapsed:.6f}")
        logger.debug("request took %.6fs", self.elapsed)
