"""Application services - Use case orchestration.

Available services:
- BallotService: Phase-gated voting workflow, tally and tie resolution
"""

from ballotgate.application.services.ballot_service import (
    LINEAR_TRANSITIONS,
    BallotService,
)

__all__: list[str] = ["BallotService", "LINEAR_TRANSITIONS"]
