"""Host-facing pieces: ASGI translation and error reporting."""
