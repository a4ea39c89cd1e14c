"""Error reporting for the request pipeline.

Formats failures for the log and the last-resort fatal line written at
shutdown. Traceback verbosity is controlled by the ``OMNIAPP_TRACEBACK``
environment variable (``compact``, ``full``, ``minimal``; default compact).
"""

from __future__ import annotations

import logging
import os
import traceback as _traceback

logger = logging.getLogger("omniapp.server")


def _is_app_frame(filename: str) -> bool:
    """True if the frame is from the application (not stdlib/site-packages)."""
    if "site-packages" in filename:
        return False
    if filename.startswith("<"):
        return False
    stdlib_prefix = os.path.dirname(os.__file__)
    return not filename.startswith(stdlib_prefix)


def format_compact_traceback(exc: BaseException) -> str:
    """Error summary plus the last few application frames."""
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    app_frames = [f for f in frames if _is_app_frame(f.filename)]
    display_frames = app_frames if app_frames else frames[-3:]

    parts = [f"{type(exc).__name__}: {exc}"]
    if display_frames:
        parts.append("  Trace (app frames):")
        for frame in display_frames[-5:]:
            parts.append(f"    {frame.filename}:{frame.lineno} in {frame.name}")
            if frame.line:
                parts.append(f"      {frame.line.strip()}")
    return "\n".join(parts)


def format_fatal_line(exc: BaseException) -> str:
    """One line: type, location, message.

    This is what ``App.shutdown()`` writes when an unrecovered fatal
    error ended the process.
    """
    tb = exc.__traceback__
    frames = _traceback.extract_tb(tb) if tb else []
    last = frames[-1] if frames else None
    if last is None and isinstance(exc, SyntaxError) and exc.filename:
        location = f" at {exc.filename}:{exc.lineno}"
    else:
        location = f" at {last.filename}:{last.lineno}" if last else ""
    return f"{type(exc).__name__}{location}: {exc}"


def log_failure(exc: BaseException, path: str | None = None) -> None:
    """Log a handler failure that is about to become a 500."""
    prefix = f"500 {path}" if path is not None else "Request failed"
    style = os.environ.get("OMNIAPP_TRACEBACK", "compact").lower()

    if style == "full":
        logger.error(prefix, exc_info=exc)
    elif style == "minimal":
        logger.error("%s: %s", prefix, format_fatal_line(exc))
    else:
        logger.error("%s\n%s", prefix, format_compact_traceback(exc))
