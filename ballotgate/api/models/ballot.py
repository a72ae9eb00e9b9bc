"""Ballot API request/response models.

Pydantic models for the /v1/ballot endpoints. Error bodies follow
RFC 7807 problem details.
"""

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

from ballotgate.domain.events import BallotEvent
from ballotgate.domain.models.proposal import Proposal
from ballotgate.domain.models.tally_result import TallyResult, WinnerResult
from ballotgate.domain.models.voter import Voter

# Custom datetime serializer for ISO 8601 with Z suffix (Pydantic v2)
DateTimeWithZ = Annotated[
    datetime,
    PlainSerializer(
        lambda v: v.isoformat().replace("+00:00", "Z") if v else None, return_type=str
    ),
]


class RegisterVoterRequest(BaseModel):
    """Request to register a voter."""

    voter_id: str = Field(..., min_length=1, description="Identity to register")


class RegisterProposalRequest(BaseModel):
    """Request to register a proposal."""

    description: str = Field(..., description="Proposal description")


class VoteRequest(BaseModel):
    """Request to cast a vote, or to name the tie-break winner."""

    proposal_id: int = Field(..., ge=0, description="Proposal index")


class VoterResponse(BaseModel):
    """Voter record."""

    voter_id: str
    is_registered: bool
    has_voted: bool
    voted_proposal_id: int | None = None
    has_voted_runoff: bool
    runoff_voted_proposal_id: int | None = None

    @classmethod
    def from_voter(cls, voter: Voter) -> "VoterResponse":
        return cls(**voter.to_dict())


class ProposalResponse(BaseModel):
    """One proposal with its index."""

    proposal_id: int
    description: str
    vote_count: int
    runoff_vote_count: int

    @classmethod
    def from_proposal(cls, proposal_id: int, proposal: Proposal) -> "ProposalResponse":
        return cls(proposal_id=proposal_id, **proposal.to_dict())


class ProposalListResponse(BaseModel):
    proposals: list[ProposalResponse]


class ProposalRegisteredResponse(BaseModel):
    proposal_id: int


class VoteCountResponse(BaseModel):
    proposal_id: int
    vote_count: int


class WorkflowStatusResponse(BaseModel):
    """Current workflow position of the ballot."""

    status: str
    variant: str
    admin_id: str
    winning_proposal_ids: list[int]
    runoff_proposal_ids: list[int]


class TallyResponse(BaseModel):
    """Outcome of a tally or runoff count."""

    winning_proposal_ids: list[int]
    top_count: int | None
    status: str

    @classmethod
    def from_result(cls, result: TallyResult, status: str) -> "TallyResponse":
        return cls(
            winning_proposal_ids=list(result.winning_ids),
            top_count=result.top_count,
            status=status,
        )


class WinnerResponse(BaseModel):
    """Winning proposal(s). resolved is False while a runoff tie is open."""

    proposal_ids: list[int]
    descriptions: list[str]
    resolved: bool

    @classmethod
    def from_result(cls, result: WinnerResult) -> "WinnerResponse":
        return cls(
            proposal_ids=list(result.proposal_ids),
            descriptions=list(result.descriptions),
            resolved=result.resolved,
        )


class BallotEventResponse(BaseModel):
    """One notification from the ballot event log."""

    sequence: int | None
    event_type: str
    actor_id: str
    payload: dict[str, Any]
    recorded_at: DateTimeWithZ

    @classmethod
    def from_event(cls, event: BallotEvent) -> "BallotEventResponse":
        return cls(
            sequence=event.sequence,
            event_type=event.event_type,
            actor_id=event.actor_id,
            payload=event.payload.to_dict(),
            recorded_at=event.recorded_at,
        )


class BallotEventListResponse(BaseModel):
    events: list[BallotEventResponse]
    total: int


class BallotErrorResponse(BaseModel):
    """RFC 7807 problem details for ballot errors."""

    type: str = Field(..., description="URI identifying the error type")
    title: str
    status: int
    detail: str
    instance: str | None = None
