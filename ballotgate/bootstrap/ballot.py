"""Bootstrap wiring for ballot dependencies."""

from __future__ import annotations

from ballotgate.application.ports.ballot_event_log import BallotEventLogPort
from ballotgate.application.services.ballot_service import BallotService
from ballotgate.config.ballot_config import BallotConfig
from ballotgate.infrastructure.stubs.ballot_event_log_stub import (
    InMemoryBallotEventLog,
)


def build_ballot_service(
    config: BallotConfig | None = None,
    event_log: BallotEventLogPort | None = None,
) -> BallotService:
    """Create a fresh ballot.

    Args:
        config: Ballot configuration. Read from the environment when None.
        event_log: Notification log. A new in-memory log when None.

    Returns:
        BallotService for a ballot in RegisteringVoters.
    """
    return BallotService(
        event_log=event_log if event_log is not None else InMemoryBallotEventLog(),
        config=config or BallotConfig.from_environment(),
    )


__all__ = ["build_ballot_service"]
