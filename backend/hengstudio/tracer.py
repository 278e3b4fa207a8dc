"""
Follow-Through Tracer

Step-by-step trace of a request through the studio backend: the service
call, payload validation, the projects document read-modify-write, backups
and uploads. Silent unless FOLLOW_THROUGH is set.

    ▶ [services.projects] CALL: create()
    ⛁ [storage.projects] DISK: backup projects.2024-...json
    ⛁ [storage.projects] DISK: write projects.json (3 records)
    ◀ [services.projects] RESULT: create() ✓ Project 9f1c...
"""
import functools
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

tracer = logging.getLogger("followthrough")

_enabled = False
_handler: Optional[logging.Handler] = None


def is_enabled() -> bool:
    return _enabled


def _summarize(value: Any, max_len: int = 60) -> str:
    """Short description of a traced value."""
    if value is None:
        return "<None>"
    if isinstance(value, list):
        return f"{len(value)} items"
    if hasattr(value, "id") and hasattr(value, "title"):
        return f"Project {value.id}"
    text = str(value)
    return text if len(text) <= max_len else f"{text[:max_len]}..."


def _emit(icon: str, kind: str, module: str, detail: str) -> None:
    stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    tracer.info(f"[{stamp}] {icon} [{module}] {kind}: {detail}")


def trace_step(module: str, description: str) -> None:
    """A processing step worth seeing in the trace."""
    if _enabled:
        _emit("•", "STEP", module, description)


def trace_disk(module: str, action: str, path: Path, detail: str = "") -> None:
    """A file touched on disk (write, backup, prune, store)."""
    if not _enabled:
        return
    line = f"{action} {Path(path).name}"
    if detail:
        line += f" ({detail})"
    _emit("⛁", "DISK", module, line)


def trace_rejected(module: str, reason: str) -> None:
    """Input refused before anything was written."""
    if _enabled:
        _emit("✗", "REJECT", module, reason)


def traced(module: str):
    """
    Trace entry and exit of an async service method.

    Usage:
        @traced("services.projects")
        async def create(self, payload): ...
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if not _enabled:
                return await func(*args, **kwargs)
            _emit("▶", "CALL", module, f"{func.__name__}()")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _emit("◀", "RESULT", module, f"{func.__name__}() ✗ {type(e).__name__}: {e}")
                raise
            _emit("◀", "RESULT", module, f"{func.__name__}() ✓ {_summarize(result)}")
            return result

        return wrapper

    return decorator


def setup_follow_through_logging(enabled: bool) -> None:
    """Turn the trace on or off. The trace prints bare lines to stderr."""
    global _enabled, _handler
    _enabled = enabled

    if enabled and _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter("%(message)s"))
        tracer.addHandler(_handler)
        tracer.setLevel(logging.INFO)
        tracer.propagate = False
        tracer.info("=== FOLLOW-THROUGH MODE ENABLED ===")
    elif not enabled and _handler is not None:
        tracer.removeHandler(_handler)
        _handler = None
        tracer.propagate = True
