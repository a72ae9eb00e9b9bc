"""Primitive: all-or-nothing ballot operations.

A ballot operation changes its state and then appends its notification.
If the append (or anything else in the section) raises, the registered
undo steps put the state back and the original exception propagates, so
callers never observe a half-applied operation.

Usage:
    with AtomicOperationContext("vote") as ctx:
        snapshot = state.snapshot()
        ctx.add_rollback(lambda: state.restore(snapshot))
        state.proposals[0] = state.proposals[0].with_vote()
        event_log.append(event)
"""

from __future__ import annotations

from collections.abc import Callable
from types import TracebackType

import structlog

log = structlog.get_logger(__name__)

RollbackHandler = Callable[[], None]


class AtomicOperationContext:
    """Runs undo steps, newest first, when its block raises.

    An undo step that itself fails is logged and skipped; the remaining
    steps still run. The block's exception is never suppressed.
    """

    def __init__(self, operation: str = "") -> None:
        self._operation = operation
        self._undo: list[RollbackHandler] = []

    def add_rollback(self, handler: RollbackHandler) -> None:
        """Register an undo step taking no arguments."""
        self._undo.append(handler)

    def __enter__(self) -> AtomicOperationContext:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> bool:
        if exc_val is None:
            return False

        log.warning(
            "ballot_operation_rolled_back",
            operation=self._operation,
            cause=type(exc_val).__name__,
            detail=str(exc_val),
            undo_steps=len(self._undo),
        )
        while self._undo:
            step = self._undo.pop()
            try:
                step()
            except Exception as undo_error:
                log.error(
                    "ballot_undo_step_failed",
                    operation=self._operation,
                    undo_error_type=type(undo_error).__name__,
                    undo_error=str(undo_error),
                )
        return False
