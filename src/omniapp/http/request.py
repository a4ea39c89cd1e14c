"""Immutable HTTP request.

Frozen metadata only. The core routes on ``path``; method, headers and
query are carried for handlers that want them. Body parsing is left to
the host.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qs


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Header names are lower-cased; the first value of a repeated header wins.
    """

    method: str = "GET"
    path: str = "/"
    query_string: bytes = b""
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    http_version: str = "1.1"
    client: tuple[str, int] | None = None

    @property
    def query(self) -> dict[str, list[str]]:
        """Parsed query string (name -> values)."""
        return parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        headers: dict[str, str] = {}
        for name, value in scope.get("headers", ()):
            headers.setdefault(name.decode("latin-1").lower(), value.decode("latin-1"))
        client = scope.get("client")
        return cls(
            method=scope.get("method", "GET"),
            path=scope.get("path", "/") or "/",
            query_string=scope.get("query_string", b""),
            headers=MappingProxyType(headers),
            http_version=scope.get("http_version", "1.1"),
            client=tuple(client) if client else None,
        )
