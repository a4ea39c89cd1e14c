"""Tagged outcome of one dispatch attempt.

Signals are the handler-facing API for non-local exit. The call path
translates them into one of these values in a single place, and
``App.call()`` interprets the result with an exhaustive ``match``.
"""

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Completed:
    """The handler finished (or raised ``Stop``). ``body`` is the captured output."""

    body: str = ""


@dataclass(frozen=True, slots=True)
class Missed:
    """No route matched, or the matched handler could not be dispatched."""


@dataclass(frozen=True, slots=True)
class Passed:
    """The handler raised ``Pass``; its output was discarded."""


@dataclass(frozen=True, slots=True)
class Failed:
    """The handler raised an unexpected exception."""

    error: Exception


Outcome: TypeAlias = Completed | Missed | Passed | Failed
