"""Domain models for ballotgate."""

from ballotgate.domain.models.ballot_state import BallotSnapshot, BallotState
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.domain.models.proposal import Proposal
from ballotgate.domain.models.tally_result import TallyResult, WinnerResult
from ballotgate.domain.models.voter import Voter
from ballotgate.domain.models.workflow_status import (
    RESULT_STATUSES,
    WORKFLOW_TRANSITION_MATRIX,
    WorkflowStatus,
)

__all__: list[str] = [
    "BallotSnapshot",
    "BallotState",
    "BallotVariant",
    "Proposal",
    "RESULT_STATUSES",
    "TallyResult",
    "Voter",
    "WORKFLOW_TRANSITION_MATRIX",
    "WinnerResult",
    "WorkflowStatus",
]
