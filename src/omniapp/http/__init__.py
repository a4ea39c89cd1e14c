"""HTTP-side types: the immutable Request."""

from omniapp.http.request import Request

__all__ = ["Request"]
