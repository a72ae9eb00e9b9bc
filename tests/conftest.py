"""
Pytest configuration and shared fixtures for ballotgate tests.

Testing Standards:
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
- Ballots are driven through BallotService with an in-memory event log
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ballotgate.application.services.ballot_service import BallotService
from ballotgate.config.ballot_config import BallotConfig
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.infrastructure.stubs.ballot_event_log_stub import (
    InMemoryBallotEventLog,
)
from tests.helpers import ADMIN, close_voting, open_voting


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from ballotgate import __version__

    return __version__


@pytest.fixture
def event_log() -> InMemoryBallotEventLog:
    """Fresh in-memory notification log."""
    return InMemoryBallotEventLog()


@pytest.fixture
def make_service(
    event_log: InMemoryBallotEventLog,
) -> Callable[..., BallotService]:
    """Factory for ballots of a given variant sharing the event_log fixture."""

    def _make(variant: BallotVariant = BallotVariant.EXTENDED) -> BallotService:
        return BallotService(
            event_log=event_log,
            config=BallotConfig(variant=variant, admin_id=ADMIN),
        )

    return _make


@pytest.fixture
def service(make_service: Callable[..., BallotService]) -> BallotService:
    """Extended ballot in RegisteringVoters."""
    return make_service()


@pytest.fixture
def voting_service(service: BallotService) -> BallotService:
    """Extended ballot in VotingSessionStarted with voters v1-v4 and two proposals."""
    open_voting(service, ["v1", "v2", "v3", "v4"], ["Build a park", "Build a pool"])
    return service


@pytest.fixture
def runoff_service(voting_service: BallotService) -> BallotService:
    """Extended ballot in RunoffVotingStarted after a 2-2 tie."""
    close_voting(voting_service, {"v1": 0, "v2": 0, "v3": 1, "v4": 1})
    voting_service.tally_votes(ADMIN)
    return voting_service
