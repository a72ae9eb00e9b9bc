"""Ballot workflow status and its transition matrix.

The ballot moves forward through a fixed sequence of phases. Each phase
unlocks exactly one category of mutating operation: voters are registered
while RegisteringVoters, proposals while ProposalsRegistrationStarted,
votes while VotingSessionStarted, runoff votes while RunoffVotingStarted.

State Machine:
    RegisteringVoters -> ProposalsRegistrationStarted
    ProposalsRegistrationStarted -> ProposalsRegistrationEnded
    ProposalsRegistrationEnded -> VotingSessionStarted
    VotingSessionStarted -> VotingSessionEnded
    VotingSessionEnded -> VotesTallied (single winner)
    VotingSessionEnded -> RunoffVotingStarted (tie)
    RunoffVotingStarted -> VotesTallied (single runoff winner)
    RunoffVotingStarted -> RunoffVotingEnded (runoff still tied)
    RunoffVotingEnded -> VotesTallied (administrator tie-break)

Terminal State:
    VotesTallied. No transition leaves it.
"""

from __future__ import annotations

from enum import Enum


class WorkflowStatus(Enum):
    """Phase of the ballot workflow.

    Values are the camel-case names used in notifications and over HTTP.
    """

    REGISTERING_VOTERS = "RegisteringVoters"
    PROPOSALS_REGISTRATION_STARTED = "ProposalsRegistrationStarted"
    PROPOSALS_REGISTRATION_ENDED = "ProposalsRegistrationEnded"
    VOTING_SESSION_STARTED = "VotingSessionStarted"
    VOTING_SESSION_ENDED = "VotingSessionEnded"
    VOTES_TALLIED = "VotesTallied"
    RUNOFF_VOTING_STARTED = "RunoffVotingStarted"
    RUNOFF_VOTING_ENDED = "RunoffVotingEnded"

    def is_terminal(self) -> bool:
        """Check if this status ends the workflow.

        Returns:
            True if no further transitions are permitted.
        """
        return not self.valid_transitions()

    def is_final_result(self) -> bool:
        """Check if results may be read in this status.

        RunoffVotingEnded counts as readable: the caller sees the
        unresolved tied set until the administrator breaks the tie.

        Returns:
            True for VotesTallied and RunoffVotingEnded.
        """
        return self in RESULT_STATUSES

    def valid_transitions(self) -> frozenset[WorkflowStatus]:
        """Get valid successor statuses.

        Returns:
            Frozenset of statuses this status can move to.
            Empty set for the terminal status.
        """
        return WORKFLOW_TRANSITION_MATRIX.get(self, frozenset())

    def can_transition_to(self, target: WorkflowStatus) -> bool:
        """Check whether moving to target is allowed from this status."""
        return target in self.valid_transitions()


# Statuses in which get_winner may be called
RESULT_STATUSES: frozenset[WorkflowStatus] = frozenset(
    {
        WorkflowStatus.VOTES_TALLIED,
        WorkflowStatus.RUNOFF_VOTING_ENDED,
    }
)

# Maps each status to its valid successor statuses
WORKFLOW_TRANSITION_MATRIX: dict[WorkflowStatus, frozenset[WorkflowStatus]] = {
    WorkflowStatus.REGISTERING_VOTERS: frozenset(
        {WorkflowStatus.PROPOSALS_REGISTRATION_STARTED}
    ),
    WorkflowStatus.PROPOSALS_REGISTRATION_STARTED: frozenset(
        {WorkflowStatus.PROPOSALS_REGISTRATION_ENDED}
    ),
    WorkflowStatus.PROPOSALS_REGISTRATION_ENDED: frozenset(
        {WorkflowStatus.VOTING_SESSION_STARTED}
    ),
    WorkflowStatus.VOTING_SESSION_STARTED: frozenset(
        {WorkflowStatus.VOTING_SESSION_ENDED}
    ),
    # Tally branches on whether the first round produced a tie
    WorkflowStatus.VOTING_SESSION_ENDED: frozenset(
        {
            WorkflowStatus.VOTES_TALLIED,
            WorkflowStatus.RUNOFF_VOTING_STARTED,
        }
    ),
    # Ending the runoff branches on whether the tie persisted
    WorkflowStatus.RUNOFF_VOTING_STARTED: frozenset(
        {
            WorkflowStatus.VOTES_TALLIED,
            WorkflowStatus.RUNOFF_VOTING_ENDED,
        }
    ),
    WorkflowStatus.RUNOFF_VOTING_ENDED: frozenset({WorkflowStatus.VOTES_TALLIED}),
    WorkflowStatus.VOTES_TALLIED: frozenset(),
}
