"""Ballot state model.

BallotState is the single mutable object holding everything one ballot
knows: the fixed administrator, the workflow status, the voter and
proposal registries, the current winning set and the runoff ballot.
It is owned by exactly one BallotService and is never a module global.

Voter and Proposal records are frozen, so a snapshot only needs shallow
copies of the containers.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ballotgate.domain.errors import InvalidPhaseError, InvalidProposalError
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.domain.models.proposal import Proposal
from ballotgate.domain.models.voter import Voter
from ballotgate.domain.models.workflow_status import WorkflowStatus


@dataclass(frozen=True)
class BallotSnapshot:
    """Point-in-time copy of a BallotState, used for rollback."""

    status: WorkflowStatus
    voters: dict[str, Voter]
    proposals: tuple[Proposal, ...]
    winning_proposal_ids: tuple[int, ...]
    runoff_proposal_ids: tuple[int, ...]


@dataclass
class BallotState:
    """All mutable state of one ballot.

    Attributes:
        admin_id: Administrator identity, fixed at creation.
        variant: Ballot generation in use.
        status: Current workflow status.
        voters: Voter records keyed by identity. Unknown identities are absent.
        proposals: Ordered proposals; the index is the proposal id.
        winning_proposal_ids: Indices tied for first after the latest tally.
        runoff_proposal_ids: Indices on the runoff ballot.
    """

    admin_id: str
    variant: BallotVariant = BallotVariant.EXTENDED
    status: WorkflowStatus = WorkflowStatus.REGISTERING_VOTERS
    voters: dict[str, Voter] = field(default_factory=dict)
    proposals: list[Proposal] = field(default_factory=list)
    winning_proposal_ids: list[int] = field(default_factory=list)
    runoff_proposal_ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.admin_id:
            raise ValueError("admin_id must be a non-empty identity")

    # Voter registry

    def get_voter(self, voter_id: str) -> Voter:
        """Return the voter record, zero-valued for unknown identities."""
        return self.voters.get(voter_id) or Voter.unknown(voter_id)

    def put_voter(self, voter: Voter) -> None:
        self.voters[voter.voter_id] = voter

    def is_registered(self, voter_id: str) -> bool:
        return self.get_voter(voter_id).is_registered

    @property
    def registered_voter_ids(self) -> list[str]:
        return [v.voter_id for v in self.voters.values() if v.is_registered]

    # Proposal registry

    @property
    def proposal_count(self) -> int:
        return len(self.proposals)

    def has_proposal(self, proposal_id: int) -> bool:
        """True if proposal_id is a plain int inside the proposal list."""
        if isinstance(proposal_id, bool) or not isinstance(proposal_id, int):
            return False
        return 0 <= proposal_id < len(self.proposals)

    def get_proposal(self, proposal_id: int) -> Proposal:
        """Return the proposal at proposal_id.

        Raises:
            InvalidProposalError: If proposal_id is out of range.
        """
        if not self.has_proposal(proposal_id):
            raise InvalidProposalError(proposal_id, len(self.proposals))
        return self.proposals[proposal_id]

    # Workflow

    def advance(self, target: WorkflowStatus, operation: str) -> WorkflowStatus:
        """Move to target if the transition matrix allows it.

        Args:
            target: Status to move to.
            operation: Name of the calling operation, for the error.

        Returns:
            The status before the move.

        Raises:
            InvalidPhaseError: If target is not a valid successor.
        """
        if not self.status.can_transition_to(target):
            raise InvalidPhaseError(
                operation,
                self.status,
                _predecessors(target),
            )
        previous = self.status
        self.status = target
        return previous

    # Rollback support

    def snapshot(self) -> BallotSnapshot:
        return BallotSnapshot(
            status=self.status,
            voters=dict(self.voters),
            proposals=tuple(self.proposals),
            winning_proposal_ids=tuple(self.winning_proposal_ids),
            runoff_proposal_ids=tuple(self.runoff_proposal_ids),
        )

    def restore(self, snapshot: BallotSnapshot) -> None:
        """Put every mutable field back to the snapshot's values."""
        self.status = snapshot.status
        self.voters = dict(snapshot.voters)
        self.proposals = list(snapshot.proposals)
        self.winning_proposal_ids = list(snapshot.winning_proposal_ids)
        self.runoff_proposal_ids = list(snapshot.runoff_proposal_ids)

    def to_dict(self) -> dict[str, object]:
        return {
            "admin_id": self.admin_id,
            "variant": self.variant.value,
            "status": self.status.value,
            "voters": [v.to_dict() for v in self.voters.values()],
            "proposals": [p.to_dict() for p in self.proposals],
            "winning_proposal_ids": list(self.winning_proposal_ids),
            "runoff_proposal_ids": list(self.runoff_proposal_ids),
        }


def _predecessors(target: WorkflowStatus) -> list[WorkflowStatus]:
    """Statuses from which target can be reached in one step."""
    return [status for status in WorkflowStatus if status.can_transition_to(target)]
