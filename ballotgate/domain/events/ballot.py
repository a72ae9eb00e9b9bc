"""Ballot notification event types.

Every successful state-changing ballot operation produces exactly one
BallotEvent. Events are never batched and never suppressed. Failed
operations produce none.

Event type constants follow lowercase.dot.notation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any

VOTER_REGISTERED_EVENT_TYPE: str = "voter.registered"
VOTER_REVOKED_EVENT_TYPE: str = "voter.revoked"
PROPOSAL_REGISTERED_EVENT_TYPE: str = "proposal.registered"
PROPOSAL_DELETED_EVENT_TYPE: str = "proposal.deleted"
VOTE_CAST_EVENT_TYPE: str = "vote.cast"
RUNOFF_VOTE_CAST_EVENT_TYPE: str = "vote.runoff_cast"
WORKFLOW_STATUS_CHANGED_EVENT_TYPE: str = "workflow.status_changed"

BALLOT_EVENT_TYPES: frozenset[str] = frozenset(
    {
        VOTER_REGISTERED_EVENT_TYPE,
        VOTER_REVOKED_EVENT_TYPE,
        PROPOSAL_REGISTERED_EVENT_TYPE,
        PROPOSAL_DELETED_EVENT_TYPE,
        VOTE_CAST_EVENT_TYPE,
        RUNOFF_VOTE_CAST_EVENT_TYPE,
        WORKFLOW_STATUS_CHANGED_EVENT_TYPE,
    }
)


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class VoterPayload:
    """Payload for voter.registered and voter.revoked."""

    voter_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"voter_id": self.voter_id}


@dataclass(frozen=True, eq=True)
class ProposalPayload:
    """Payload for proposal.registered and proposal.deleted.

    Attributes:
        proposal_id: Index of the proposal when the event happened.
        description: Proposal description.
    """

    proposal_id: int
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"proposal_id": self.proposal_id, "description": self.description}


@dataclass(frozen=True, eq=True)
class VotePayload:
    """Payload for vote.cast and vote.runoff_cast."""

    voter_id: str
    proposal_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"voter_id": self.voter_id, "proposal_id": self.proposal_id}


@dataclass(frozen=True, eq=True)
class WorkflowStatusChangePayload:
    """Payload for workflow.status_changed.

    Attributes:
        previous_status: Status value before the change.
        new_status: Status value after the change.
    """

    previous_status: str
    new_status: str

    def __post_init__(self) -> None:
        if self.previous_status == self.new_status:
            raise ValueError("A status change must change the status")

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous_status": self.previous_status,
            "new_status": self.new_status,
        }


BallotPayload = (
    VoterPayload | ProposalPayload | VotePayload | WorkflowStatusChangePayload
)


@dataclass(frozen=True, eq=True)
class BallotEvent:
    """A notification appended to the ballot event log.

    Attributes:
        event_type: One of BALLOT_EVENT_TYPES.
        actor_id: Identity whose call produced the event.
        payload: Event-specific payload.
        recorded_at: UTC timestamp of the call.
        sequence: Position in the log, assigned on append.
    """

    event_type: str
    actor_id: str
    payload: BallotPayload
    recorded_at: datetime = field(default_factory=_utc_now)
    sequence: int | None = None

    def __post_init__(self) -> None:
        if self.event_type not in BALLOT_EVENT_TYPES:
            raise ValueError(f"Unknown ballot event type: {self.event_type}")

    def with_sequence(self, sequence: int) -> BallotEvent:
        """Return a copy stamped with its log position."""
        return replace(self, sequence=sequence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sequence": self.sequence,
            "event_type": self.event_type,
            "actor_id": self.actor_id,
            "payload": self.payload.to_dict(),
            "recorded_at": self.recorded_at.isoformat(),
        }
