"""Converters for typed path parameters (``{id:int}``, ``{rest:path}``).

Each converter pairs the regex a segment must match with the callable
that turns the matched text into the value handed to the handler.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Converter:
    pattern: str
    convert: Callable[[str], Any]
    # Only a trailing segment may use a converter that spans slashes
    spans_slashes: bool = False


CONVERTERS: dict[str, Converter] = {
    "str": Converter(r"[^/]+", str),
    "int": Converter(r"-?\d+", int),
    "float": Converter(r"-?\d+(?:\.\d+)?", float),
    "path": Converter(r".+", str, spans_slashes=True),
}


def convert_param(value: str, param_type: str) -> Any:
    """Convert captured *value* with the converter named *param_type*.

    ``ValueError`` from the converter propagates; the router treats it as
    a non-match.
    """
    return CONVERTERS[param_type].convert(value)
