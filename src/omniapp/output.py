"""Output sinks — where a finished request's body and status go.

Unlike the immutable request, a sink is mutable: it is created fresh
for each ``App.run()`` and filled in place while the request runs.
``HTTPResponse`` backs the networked mode, ``ConsoleOutput`` the
console mode; both share the ``Output`` write/status/flush surface.
"""

from dataclasses import dataclass, field


@dataclass(slots=True)
class Output:
    """Common sink surface."""

    status: int = 200
    charset: str = "utf-8"
    _chunks: list[str] = field(default_factory=list, repr=False)

    def write(self, data: str | bytes) -> None:
        """Append *data* to the body."""
        if isinstance(data, bytes):
            data = data.decode(self.charset)
        if data:
            self._chunks.append(data)

    def clear(self) -> None:
        """Drop the body written so far."""
        self._chunks.clear()

    def set_status(self, status: int) -> None:
        self.status = status

    def set_content_type(self, content_type: str) -> None:
        """No-op unless the sink carries a content type."""

    @property
    def body(self) -> str:
        return "".join(self._chunks)

    def flush(self) -> bytes:
        """Return the encoded body and empty it."""
        data = self.body.encode(self.charset)
        self._chunks.clear()
        return data


@dataclass(slots=True)
class HTTPResponse(Output):
    """Sink for the networked mode."""

    content_type: str = "text/html; charset=utf-8"
    headers: list[tuple[str, str]] = field(default_factory=list)

    def set_content_type(self, content_type: str) -> None:
        self.content_type = content_type

    def header(self, name: str, value: str) -> None:
        """Add a response header (replacing an existing one of the same name)."""
        lowered = name.lower()
        self.headers = [(n, v) for n, v in self.headers if n.lower() != lowered]
        self.headers.append((name, value))

    def get_header(self, name: str) -> str | None:
        lowered = name.lower()
        for n, v in self.headers:
            if n.lower() == lowered:
                return v
        return None


@dataclass(slots=True)
class ConsoleOutput(Output):
    """Sink for the console mode. Status maps onto the process exit code."""

    @property
    def exit_code(self) -> int:
        return 0 if self.status < 400 else 1
