"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    def mw(app: App, next: Next) -> None

Built-in middleware:
    RunTime -- Measures request time, installed by App.init()
"""

from omniapp.middleware.builtin import RunTime
from omniapp.middleware.chain import MiddlewareChain
from omniapp.middleware.protocol import Middleware, Next

__all__ = ["Middleware", "MiddlewareChain", "Next", "RunTime"]
