"""Trace id propagation using structlog contextvars."""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import contextmanager

import structlog.contextvars as contextvars


def generate_trace_id() -> str:
    """Generate a unique 32-character hexadecimal trace id."""
    return uuid.uuid4().hex


def get_trace_id() -> str | None:
    """Get the current trace id from context, if any."""
    return contextvars.get_contextvars().get("trace_id")


@contextmanager
def trace_context(trace_id: str | None = None, **extra: str) -> Generator[str]:
    """Bind a trace id (and optional extra fields) for the duration of a block.

    The previous context is restored on exit, so nested blocks such as a batch
    run inside a request keep the outer trace id afterwards.

    Args:
        trace_id: Trace id to use. If None, generates a new one.
        **extra: Additional context fields, e.g. ``batch_id``

    Yields:
        The trace id being used

    Example:
        >>> with trace_context() as trace_id:
        ...     logger.info("Processing batch")  # Will include trace_id
    """
    old_context = dict(contextvars.get_contextvars())

    if trace_id is None:
        trace_id = generate_trace_id()

    contextvars.clear_contextvars()
    contextvars.bind_contextvars(trace_id=trace_id, **extra)

    try:
        yield trace_id
    finally:
        contextvars.clear_contextvars()
        if old_context:
            contextvars.bind_contextvars(**old_context)
