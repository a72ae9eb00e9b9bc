"""Ballot service: the phase-gated voting workflow.

This module implements every ballot operation on top of one BallotState:
voter and proposal registration, the administrator's phase transitions,
first-round and runoff voting, tallying, the administrator tie-break and
result retrieval.

Rules:
1. GUARD ORDER - variant feature, then authorization, then phase, then
   data validity. The same call on the same state fails the same way.
2. ALL OR NOTHING - every guard runs before any mutation; mutation and
   the notification append share one atomic section that restores the
   state if the append fails.
3. ONE NOTIFICATION PER CALL - each successful mutating call appends
   exactly one event; a failed call appends none.
4. ONE LOCK PER OPERATION - each call holds the service lock from its
   first guard to its notification.

Runoff indexing:
    runoff_vote, end_runoff_voting_session and decide_tie all take and
    return original proposal ids. runoff_vote only accepts ids on the
    runoff ballot, and runoff votes are counted in runoff_vote_count so
    first-round counts stay untouched.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from ballotgate.application.ports.ballot_event_log import BallotEventLogPort
from ballotgate.config.ballot_config import DEFAULT_BALLOT_CONFIG, BallotConfig
from ballotgate.domain.errors import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    FeatureDisabledError,
    InvalidDescriptionError,
    InvalidProposalError,
    NoResultError,
    NotRegisteredError,
    NotTiedError,
    ResultsNotFinalError,
)
from ballotgate.domain.events import (
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
from ballotgate.domain.exceptions import BallotError
from ballotgate.domain.models.ballot_state import BallotState
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.domain.models.proposal import Proposal
from ballotgate.domain.models.tally_result import TallyResult, WinnerResult
from ballotgate.domain.models.voter import Voter
from ballotgate.domain.models.workflow_status import WorkflowStatus
from ballotgate.domain.primitives import AtomicOperationContext
from ballotgate.domain.services import AuthorizationGate, require_status, tally

logger = structlog.get_logger(__name__)

# Linear administrator transitions: operation -> (required status, new status)
LINEAR_TRANSITIONS: dict[str, tuple[WorkflowStatus, WorkflowStatus]] = {
    "start_proposals_registration": (
        WorkflowStatus.REGISTERING_VOTERS,
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
    ),
    "end_proposals_registration": (
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
        WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
    ),
    "start_voting_session": (
        WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
        WorkflowStatus.VOTING_SESSION_STARTED,
    ),
    "end_voting_session": (
        WorkflowStatus.VOTING_SESSION_STARTED,
        WorkflowStatus.VOTING_SESSION_ENDED,
    ),
}


class BallotService:
    """Runs one ballot from voter registration to its final result.

    Mutating operations take the caller identity as their first argument.
    The identity comes from an external authentication substrate; the
    service only compares it with the administrator and the voter registry.

    Example:
        service = BallotService(InMemoryBallotEventLog(), BallotConfig(admin_id="admin"))
        service.register_voter("admin", "alice")
        service.start_proposals_registration("admin")
        service.register_proposal("alice", "Build a park")
    """

    def __init__(
        self,
        event_log: BallotEventLogPort,
        config: BallotConfig | None = None,
        state: BallotState | None = None,
    ) -> None:
        """Initialize the ballot service.

        Args:
            event_log: Append-only notification log.
            config: Ballot configuration. Defaults to DEFAULT_BALLOT_CONFIG.
            state: Existing ballot state. A fresh ballot is created from
                config when omitted.
        """
        self._config = config or DEFAULT_BALLOT_CONFIG
        self._event_log = event_log
        self._state = state or BallotState(
            admin_id=self._config.admin_id,
            variant=self._config.variant,
        )
        self._gate = AuthorizationGate(self._state)
        self._lock = threading.RLock()
        self._log = logger.bind(
            component="ballot_service",
            variant=self._state.variant.value,
        )
        self._log.info("ballot_created", admin_id=self._state.admin_id)

    # =========================================================================
    # Public reads
    # =========================================================================

    @property
    def admin_id(self) -> str:
        return self._state.admin_id

    @property
    def variant(self) -> BallotVariant:
        return self._state.variant

    @property
    def event_log(self) -> BallotEventLogPort:
        return self._event_log

    @property
    def workflow_status(self) -> WorkflowStatus:
        with self._lock:
            return self._state.status

    @property
    def winning_proposal_ids(self) -> list[int]:
        with self._lock:
            return list(self._state.winning_proposal_ids)

    @property
    def runoff_proposal_ids(self) -> list[int]:
        with self._lock:
            return list(self._state.runoff_proposal_ids)

    def get_voter(self, voter_id: str) -> Voter:
        """Return the voter record, zero-valued for unknown identities."""
        with self._lock:
            return self._state.get_voter(voter_id)

    def get_proposals(self) -> list[Proposal]:
        """Return all proposals in index order."""
        with self._lock:
            return list(self._state.proposals)

    def get_proposal(self, proposal_id: int) -> Proposal:
        """Return one proposal.

        Raises:
            InvalidProposalError: If proposal_id is out of range.
        """
        with self._lock:
            return self._state.get_proposal(proposal_id)

    def get_vote_count_for_proposal(self, proposal_id: int) -> int:
        """Return the first-round vote count of one proposal.

        Raises:
            InvalidProposalError: If proposal_id is out of range.
        """
        with self._lock:
            return self._state.get_proposal(proposal_id).vote_count

    def get_winner(self) -> WinnerResult:
        """Return the winning proposal(s).

        While RunoffVotingEnded the tie is still open: every tied proposal
        is returned and resolved is False.

        Raises:
            ResultsNotFinalError: Unless VotesTallied or RunoffVotingEnded.
            NoResultError: If the winning set is empty.
        """
        with self._lock:
            status = self._state.status
            if not status.is_final_result():
                raise ResultsNotFinalError(status)
            winning_ids = tuple(self._state.winning_proposal_ids)
            if not winning_ids:
                raise NoResultError()
            return WinnerResult(
                proposal_ids=winning_ids,
                descriptions=tuple(
                    self._state.proposals[i].description for i in winning_ids
                ),
                resolved=status is WorkflowStatus.VOTES_TALLIED,
            )

    def snapshot(self) -> dict[str, Any]:
        """Return the whole ballot as plain data."""
        with self._lock:
            return self._state.to_dict()

    # =========================================================================
    # Voter registry
    # =========================================================================

    def register_voter(self, caller_id: str, voter_id: str) -> Voter:
        """Register voter_id (administrator, RegisteringVoters).

        Raises:
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside RegisteringVoters.
            AlreadyRegisteredError: If voter_id is already registered.
        """
        operation = "register_voter"
        with self._operation(operation, caller_id, voter_id=voter_id) as log:
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, WorkflowStatus.REGISTERING_VOTERS)
            voter = self._state.get_voter(voter_id)
            if voter.is_registered:
                raise AlreadyRegisteredError(voter_id)

            registered = voter.with_registration(True)

            def mutate() -> BallotEvent:
                self._state.put_voter(registered)
                return BallotEvent(
                    event_type=VOTER_REGISTERED_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=VoterPayload(voter_id=voter_id),
                )

            self._commit(operation, mutate)
            log.info("voter_registered")
            return registered

    def revoke_voter(self, caller_id: str, voter_id: str) -> Voter:
        """Unregister voter_id (administrator, RegisteringVoters).

        Raises:
            FeatureDisabledError: In the basic variant.
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside RegisteringVoters.
            NotRegisteredError: If voter_id is not registered.
        """
        operation = "revoke_voter"
        with self._operation(operation, caller_id, voter_id=voter_id) as log:
            self._require_feature(operation, self._state.variant.supports_registry_removal)
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, WorkflowStatus.REGISTERING_VOTERS)
            voter = self._state.get_voter(voter_id)
            if not voter.is_registered:
                raise NotRegisteredError(voter_id)

            revoked = voter.with_registration(False)

            def mutate() -> BallotEvent:
                self._state.put_voter(revoked)
                return BallotEvent(
                    event_type=VOTER_REVOKED_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=VoterPayload(voter_id=voter_id),
                )

            self._commit(operation, mutate)
            log.info("voter_revoked")
            return revoked

    # =========================================================================
    # Proposal registry
    # =========================================================================

    def register_proposal(self, caller_id: str, description: str) -> int:
        """Add a proposal (registered voter, ProposalsRegistrationStarted).

        Returns:
            The new proposal's index.

        Raises:
            NotEligibleError: If caller_id is not a registered voter.
            InvalidPhaseError: Outside ProposalsRegistrationStarted.
            InvalidDescriptionError: If description is blank or too long.
        """
        operation = "register_proposal"
        with self._operation(operation, caller_id) as log:
            self._gate.require_registered_voter(caller_id)
            require_status(
                self._state, operation, WorkflowStatus.PROPOSALS_REGISTRATION_STARTED
            )
            self._validate_description(description)

            proposal_id = self._state.proposal_count

            def mutate() -> BallotEvent:
                self._state.proposals.append(Proposal(description=description))
                return BallotEvent(
                    event_type=PROPOSAL_REGISTERED_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=ProposalPayload(
                        proposal_id=proposal_id, description=description
                    ),
                )

            self._commit(operation, mutate)
            log.info("proposal_registered", proposal_id=proposal_id)
            return proposal_id

    def delete_proposal(self, caller_id: str, proposal_id: int) -> Proposal:
        """Remove a proposal (administrator, ProposalsRegistrationStarted).

        Every later proposal moves down one index. Callers must not reuse
        indices read before the deletion.

        Returns:
            The removed proposal.

        Raises:
            FeatureDisabledError: In the basic variant.
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside ProposalsRegistrationStarted.
            InvalidProposalError: If proposal_id is out of range.
        """
        operation = "delete_proposal"
        with self._operation(operation, caller_id, proposal_id=proposal_id) as log:
            self._require_feature(operation, self._state.variant.supports_registry_removal)
            self._gate.require_admin(caller_id, operation)
            require_status(
                self._state, operation, WorkflowStatus.PROPOSALS_REGISTRATION_STARTED
            )
            removed = self._state.get_proposal(proposal_id)

            def mutate() -> BallotEvent:
                del self._state.proposals[proposal_id]
                return BallotEvent(
                    event_type=PROPOSAL_DELETED_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=ProposalPayload(
                        proposal_id=proposal_id, description=removed.description
                    ),
                )

            self._commit(operation, mutate)
            log.info("proposal_deleted", remaining=self._state.proposal_count)
            return removed

    # =========================================================================
    # Workflow transitions
    # =========================================================================

    def start_proposals_registration(self, caller_id: str) -> WorkflowStatus:
        return self._advance_linear("start_proposals_registration", caller_id)

    def end_proposals_registration(self, caller_id: str) -> WorkflowStatus:
        return self._advance_linear("end_proposals_registration", caller_id)

    def start_voting_session(self, caller_id: str) -> WorkflowStatus:
        return self._advance_linear("start_voting_session", caller_id)

    def end_voting_session(self, caller_id: str) -> WorkflowStatus:
        return self._advance_linear("end_voting_session", caller_id)

    # =========================================================================
    # Voting
    # =========================================================================

    def vote(self, caller_id: str, proposal_id: int) -> Voter:
        """Cast the caller's single first-round vote (VotingSessionStarted).

        Raises:
            NotEligibleError: If caller_id is not a registered voter.
            InvalidPhaseError: Outside VotingSessionStarted.
            AlreadyVotedError: If the caller already voted this round.
            InvalidProposalError: If proposal_id is out of range.
        """
        operation = "vote"
        with self._operation(operation, caller_id, proposal_id=proposal_id) as log:
            self._gate.require_registered_voter(caller_id)
            require_status(self._state, operation, WorkflowStatus.VOTING_SESSION_STARTED)
            voter = self._state.get_voter(caller_id)
            if voter.has_voted:
                raise AlreadyVotedError(caller_id)
            proposal = self._state.get_proposal(proposal_id)

            voted = voter.with_vote(proposal_id)

            def mutate() -> BallotEvent:
                self._state.put_voter(voted)
                self._state.proposals[proposal_id] = proposal.with_vote()
                return BallotEvent(
                    event_type=VOTE_CAST_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=VotePayload(voter_id=caller_id, proposal_id=proposal_id),
                )

            self._commit(operation, mutate)
            log.info("vote_cast")
            return voted

    def runoff_vote(self, caller_id: str, proposal_id: int) -> Voter:
        """Cast the caller's single runoff vote (RunoffVotingStarted).

        proposal_id is an original proposal id and must be on the runoff
        ballot.

        Raises:
            FeatureDisabledError: Outside the extended variant.
            NotEligibleError: If caller_id is not a registered voter.
            InvalidPhaseError: Outside RunoffVotingStarted.
            AlreadyVotedError: If the caller already voted in the runoff.
            InvalidProposalError: If proposal_id is not on the runoff ballot.
        """
        operation = "runoff_vote"
        with self._operation(operation, caller_id, proposal_id=proposal_id) as log:
            self._require_feature(operation, self._state.variant.supports_runoff)
            self._gate.require_registered_voter(caller_id)
            require_status(self._state, operation, WorkflowStatus.RUNOFF_VOTING_STARTED)
            voter = self._state.get_voter(caller_id)
            if voter.has_voted_runoff:
                raise AlreadyVotedError(caller_id, round_name="runoff")
            if (
                not self._state.has_proposal(proposal_id)
                or proposal_id not in self._state.runoff_proposal_ids
            ):
                raise InvalidProposalError(
                    proposal_id,
                    len(self._state.runoff_proposal_ids),
                    ballot="runoff",
                )
            proposal = self._state.proposals[proposal_id]

            voted = voter.with_runoff_vote(proposal_id)

            def mutate() -> BallotEvent:
                self._state.put_voter(voted)
                self._state.proposals[proposal_id] = proposal.with_runoff_vote()
                return BallotEvent(
                    event_type=RUNOFF_VOTE_CAST_EVENT_TYPE,
                    actor_id=caller_id,
                    payload=VotePayload(voter_id=caller_id, proposal_id=proposal_id),
                )

            self._commit(operation, mutate)
            log.info("runoff_vote_cast")
            return voted

    # =========================================================================
    # Tally and resolution
    # =========================================================================

    def tally_votes(self, caller_id: str) -> TallyResult:
        """Count first-round votes and move to the result or the runoff.

        Extended: a single winner moves to VotesTallied; a tie snapshots
        the tied proposals as the runoff ballot and moves to
        RunoffVotingStarted. Intermediate: the full tied set is recorded
        and the ballot moves to VotesTallied. Basic: the first proposal
        reaching the highest count wins outright.

        Raises:
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside VotingSessionEnded.
        """
        operation = "tally_votes"
        with self._operation(operation, caller_id) as log:
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, WorkflowStatus.VOTING_SESSION_ENDED)

            variant = self._state.variant
            result = tally(
                ((i, p.vote_count) for i, p in enumerate(self._state.proposals)),
                keep_ties=variant.detects_ties,
            )
            if result.is_tie and variant.supports_runoff:
                target = WorkflowStatus.RUNOFF_VOTING_STARTED
            else:
                target = WorkflowStatus.VOTES_TALLIED

            def mutate() -> BallotEvent:
                self._state.winning_proposal_ids = list(result.winning_ids)
                if target is WorkflowStatus.RUNOFF_VOTING_STARTED:
                    self._state.runoff_proposal_ids = list(result.winning_ids)
                return self._status_event(caller_id, operation, target)

            self._commit(operation, mutate)
            log.info(
                "votes_tallied",
                winning_ids=list(result.winning_ids),
                top_count=result.top_count,
                new_status=target.value,
            )
            return result

    def end_runoff_voting_session(self, caller_id: str) -> TallyResult:
        """Count runoff votes over the runoff ballot.

        A single winner moves to VotesTallied; a persisting tie moves to
        RunoffVotingEnded, where only decide_tie is legal.

        Raises:
            FeatureDisabledError: Outside the extended variant.
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside RunoffVotingStarted.
        """
        operation = "end_runoff_voting_session"
        with self._operation(operation, caller_id) as log:
            self._require_feature(operation, self._state.variant.supports_runoff)
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, WorkflowStatus.RUNOFF_VOTING_STARTED)

            result = tally(
                (i, self._state.proposals[i].runoff_vote_count)
                for i in self._state.runoff_proposal_ids
            )
            if result.is_tie:
                target = WorkflowStatus.RUNOFF_VOTING_ENDED
            else:
                target = WorkflowStatus.VOTES_TALLIED

            def mutate() -> BallotEvent:
                self._state.winning_proposal_ids = list(result.winning_ids)
                return self._status_event(caller_id, operation, target)

            self._commit(operation, mutate)
            log.info(
                "runoff_tallied",
                winning_ids=list(result.winning_ids),
                top_count=result.top_count,
                new_status=target.value,
            )
            return result

    def decide_tie(self, caller_id: str, proposal_id: int) -> WinnerResult:
        """Break a runoff tie in favor of proposal_id (RunoffVotingEnded).

        Raises:
            FeatureDisabledError: Outside the extended variant.
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: Outside RunoffVotingEnded.
            InvalidProposalError: If proposal_id is out of range.
            NotTiedError: If proposal_id is not one of the tied proposals.
        """
        operation = "decide_tie"
        with self._operation(operation, caller_id, proposal_id=proposal_id) as log:
            self._require_feature(operation, self._state.variant.supports_runoff)
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, WorkflowStatus.RUNOFF_VOTING_ENDED)
            proposal = self._state.get_proposal(proposal_id)
            tied = list(self._state.winning_proposal_ids)
            if proposal_id not in tied:
                raise NotTiedError(proposal_id, tied)

            def mutate() -> BallotEvent:
                self._state.winning_proposal_ids = [proposal_id]
                return self._status_event(
                    caller_id, operation, WorkflowStatus.VOTES_TALLIED
                )

            self._commit(operation, mutate)
            log.info("tie_decided", tied_ids=tied)
            return WinnerResult(
                proposal_ids=(proposal_id,),
                descriptions=(proposal.description,),
                resolved=True,
            )

    # =========================================================================
    # Internals
    # =========================================================================

    @contextmanager
    def _operation(
        self, operation: str, caller_id: str, **context: Any
    ) -> Iterator[Any]:
        """Serialize one operation and log its rejection, if any."""
        with self._lock:
            log = self._log.bind(operation=operation, caller_id=caller_id, **context)
            try:
                yield log
            except BallotError as exc:
                log.warning(
                    "ballot_operation_rejected",
                    error_type=type(exc).__name__,
                    error=str(exc),
                    status=self._state.status.value,
                )
                raise

    def _commit(self, operation: str, mutate: Callable[[], BallotEvent]) -> BallotEvent:
        """Apply mutate and append its event, or roll both back."""
        with AtomicOperationContext(operation) as ctx:
            snapshot = self._state.snapshot()
            ctx.add_rollback(lambda: self._state.restore(snapshot))
            event = mutate()
            return self._event_log.append(event)

    def _require_feature(self, operation: str, enabled: bool) -> None:
        if not enabled:
            raise FeatureDisabledError(operation, self._state.variant.value)

    def _validate_description(self, description: str) -> None:
        if not description or not description.strip():
            raise InvalidDescriptionError("description must not be blank")
        limit = self._config.max_description_length
        if len(description) > limit:
            raise InvalidDescriptionError(
                f"description exceeds {limit} characters"
            )

    def _status_event(
        self, caller_id: str, operation: str, target: WorkflowStatus
    ) -> BallotEvent:
        """Advance the state to target and build its status-change event."""
        previous = self._state.advance(target, operation)
        return BallotEvent(
            event_type=WORKFLOW_STATUS_CHANGED_EVENT_TYPE,
            actor_id=caller_id,
            payload=WorkflowStatusChangePayload(
                previous_status=previous.value,
                new_status=target.value,
            ),
        )

    def _advance_linear(self, operation: str, caller_id: str) -> WorkflowStatus:
        """Run one of the four linear administrator transitions.

        Raises:
            UnauthorizedError: If caller_id is not the administrator.
            InvalidPhaseError: If the ballot is not in the required status.
        """
        required, target = LINEAR_TRANSITIONS[operation]
        with self._operation(operation, caller_id) as log:
            self._gate.require_admin(caller_id, operation)
            require_status(self._state, operation, required)

            self._commit(
                operation, lambda: self._status_event(caller_id, operation, target)
            )
            log.info(
                "workflow_status_changed",
                previous_status=required.value,
                new_status=target.value,
            )
            return target
