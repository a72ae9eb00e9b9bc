"""Ballot Event Log Port.

This module defines the protocol for the append-only public log that
receives ballot notifications. The log is an external collaborator: the
ballot only appends to it and reads it back for observers.

Rules:
1. ONE EVENT PER CALL - every successful mutating operation appends
   exactly one event; failures append nothing
2. FAIL LOUD - an append failure propagates, and the ballot rolls the
   operation back
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ballotgate.domain.events import BallotEvent


@runtime_checkable
class BallotEventLogPort(Protocol):
    """Protocol for the append-only ballot notification log.

    Example:
        log = InMemoryBallotEventLog()
        stored = log.append(event)
        assert stored.sequence == 1
    """

    def append(self, event: BallotEvent) -> BallotEvent:
        """Append event to the log.

        Args:
            event: The notification to record. Its sequence is unset.

        Returns:
            The stored event, stamped with its sequence number.

        Raises:
            Exception: Any failure to record the event. Callers treat this
                as fatal for the operation that produced the event.
        """
        ...

    def events(self, event_type: str | None = None) -> Sequence[BallotEvent]:
        """Return recorded events in append order.

        Args:
            event_type: If given, only events of this type.
        """
        ...
