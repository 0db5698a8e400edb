# src/logging/context.py — v1
"""Contextual logging support: attach request_id, style, step to log records.

Each request runs in its own asyncio task, so context variables keep
concurrent requests apart.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_style: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "style", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass(frozen=True)
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    style: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        style=_style.get(),
        step=_step.get(),
    )


def set_request_context(request_id: str, style: str | None = None) -> None:
    """Set request-level context (called once per pipeline invocation)."""
    _request_id.set(request_id)
    _style.set(style)
    _step.set(None)


def set_step(step: str | None) -> None:
    """Mark the pipeline stage currently running."""
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _style.set(None)
    _step.set(None)
