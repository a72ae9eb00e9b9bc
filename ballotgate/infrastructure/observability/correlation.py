"""Correlation ID management for ballot request tracing.

Every HTTP request and every scenario step runs under a correlation id
held in a contextvar. The structlog processor below copies it into each
log entry, so all lines produced by one ballot operation can be joined.

Usage:
    with correlation_scope(request.headers.get("X-Correlation-ID")):
        service.vote("alice", 0)
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

# Empty string means "no correlation id in this context"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new correlation ID (UUID4 string)."""
    return str(uuid4())


def get_correlation_id() -> str:
    """Get the current correlation ID, or an empty string if unset."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID in the current context."""
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under a correlation id, restoring the previous one after.

    Args:
        correlation_id: Id to use. A fresh one is generated when None or empty.

    Yields:
        The correlation id in effect inside the block.
    """
    value = correlation_id or generate_correlation_id()
    token = _correlation_id.set(value)
    try:
        yield value
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding correlation_id to every log entry.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with correlation_id added when one is set.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict
