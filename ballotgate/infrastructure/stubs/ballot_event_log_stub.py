"""In-memory implementation of BallotEventLogPort.

Used by the HTTP layer for development and by tests for assertions. It
can be configured to fail so rollback paths can be exercised.

Usage in tests:
    log = InMemoryBallotEventLog()
    service = BallotService(event_log=log)

    service.register_voter("admin", "alice")

    assert len(log.events()) == 1
    assert log.events()[0].event_type == "voter.registered"
"""

from __future__ import annotations

from ballotgate.domain.events import BallotEvent


class EventLogUnavailableError(Exception):
    """Raised by the stub when configured to simulate an outage."""


class InMemoryBallotEventLog:
    """Append-only list of ballot events.

    Attributes:
        should_fail: If True, append raises fail_exception.
        fail_exception: Exception raised when should_fail is set.
    """

    def __init__(self) -> None:
        self._events: list[BallotEvent] = []
        self.should_fail: bool = False
        self.fail_exception: Exception = EventLogUnavailableError(
            "Ballot event log unavailable"
        )

    def append(self, event: BallotEvent) -> BallotEvent:
        if self.should_fail:
            raise self.fail_exception
        stored = event.with_sequence(len(self._events) + 1)
        self._events.append(stored)
        return stored

    def events(self, event_type: str | None = None) -> list[BallotEvent]:
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.event_type == event_type]

    def __len__(self) -> int:
        return len(self._events)

    def reset(self) -> None:
        """Clear recorded events and failure configuration."""
        self._events.clear()
        self.should_fail = False
