"""Ballot notification events."""

from ballotgate.domain.events.ballot import (
    BALLOT_EVENT_TYPES,
    PROPOSAL_DELETED_EVENT_TYPE,
    PROPOSAL_REGISTERED_EVENT_TYPE,
    RUNOFF_VOTE_CAST_EVENT_TYPE,
    VOTE_CAST_EVENT_TYPE,
    VOTER_REGISTERED_EVENT_TYPE,
    VOTER_REVOKED_EVENT_TYPE,
    WORKFLOW_STATUS_CHANGED_EVENT_TYPE,
    BallotEvent,
    ProposalPayload,
    VotePayload,
    VoterPayload,
    WorkflowStatusChangePayload,
)

__all__: list[str] = [
    "BALLOT_EVENT_TYPES",
    "BallotEvent",
    "PROPOSAL_DELETED_EVENT_TYPE",
    "PROPOSAL_REGISTERED_EVENT_TYPE",
    "ProposalPayload",
    "RUNOFF_VOTE_CAST_EVENT_TYPE",
    "VOTE_CAST_EVENT_TYPE",
    "VOTER_REGISTERED_EVENT_TYPE",
    "VOTER_REVOKED_EVENT_TYPE",
    "VotePayload",
    "VoterPayload",
    "WORKFLOW_STATUS_CHANGED_EVENT_TYPE",
    "WorkflowStatusChangePayload",
]
