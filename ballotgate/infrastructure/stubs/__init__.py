"""In-memory stub implementations of application ports."""

from ballotgate.infrastructure.stubs.ballot_event_log_stub import (
    EventLogUnavailableError,
    InMemoryBallotEventLog,
)

__all__: list[str] = ["EventLogUnavailableError", "InMemoryBallotEventLog"]
