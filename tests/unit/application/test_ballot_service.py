"""Unit tests for BallotService.

Covers the guard order, every operation in every variant, the
notification log contract and rollback on a failed append.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from ballotgate.application.services.ballot_service import BallotService
from ballotgate.config.ballot_config import BallotConfig
from ballotgate.domain.errors import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    FeatureDisabledError,
    InvalidDescriptionError,
    InvalidPhaseError,
    InvalidProposalError,
    NoResultError,
    NotEligibleError,
    NotRegisteredError,
    NotTiedError,
    ResultsNotFinalError,
    UnauthorizedError,
)
from ballotgate.domain.models.ballot_variant import BallotVariant
from ballotgate.domain.models.workflow_status import WorkflowStatus
from ballotgate.infrastructure.stubs.ballot_event_log_stub import (
    EventLogUnavailableError,
    InMemoryBallotEventLog,
)
from tests.helpers import ADMIN, close_runoff, close_voting, open_voting

ServiceFactory = Callable[..., BallotService]


class TestVoterRegistry:
    """Tests for register_voter and revoke_voter."""

    def test_admin_registers_voter(self, service: BallotService) -> None:
        voter = service.register_voter(ADMIN, "alice")

        assert voter.is_registered is True
        assert service.get_voter("alice").is_registered is True

    def test_unknown_voter_reads_as_zero_valued(self, service: BallotService) -> None:
        voter = service.get_voter("nobody")

        assert voter.is_registered is False
        assert voter.has_voted is False

    def test_non_admin_cannot_register(self, service: BallotService) -> None:
        with pytest.raises(UnauthorizedError):
            service.register_voter("alice", "bob")

    def test_double_registration_rejected(self, service: BallotService) -> None:
        service.register_voter(ADMIN, "alice")

        with pytest.raises(AlreadyRegisteredError):
            service.register_voter(ADMIN, "alice")

    def test_registration_closed_after_phase_moves(self, service: BallotService) -> None:
        service.start_proposals_registration(ADMIN)

        with pytest.raises(InvalidPhaseError):
            service.register_voter(ADMIN, "alice")

    def test_revoke_voter(self, service: BallotService) -> None:
        service.register_voter(ADMIN, "alice")

        voter = service.revoke_voter(ADMIN, "alice")

        assert voter.is_registered is False
        assert service.get_voter("alice").is_registered is False

    def test_revoke_unregistered_rejected(self, service: BallotService) -> None:
        with pytest.raises(NotRegisteredError):
            service.revoke_voter(ADMIN, "alice")

    def test_revoked_voter_can_register_again(self, service: BallotService) -> None:
        service.register_voter(ADMIN, "alice")
        service.revoke_voter(ADMIN, "alice")

        assert service.register_voter(ADMIN, "alice").is_registered is True


class TestProposalRegistry:
    """Tests for register_proposal and delete_proposal."""

    @pytest.fixture
    def open_service(self, service: BallotService) -> BallotService:
        service.register_voter(ADMIN, "alice")
        service.start_proposals_registration(ADMIN)
        return service

    def test_register_returns_sequential_indices(
        self, open_service: BallotService
    ) -> None:
        assert open_service.register_proposal("alice", "A") == 0
        assert open_service.register_proposal("alice", "B") == 1
        assert [p.description for p in open_service.get_proposals()] == ["A", "B"]

    def test_duplicate_descriptions_allowed(self, open_service: BallotService) -> None:
        open_service.register_proposal("alice", "Build a park")
        open_service.register_proposal("alice", "Build a park")

        assert len(open_service.get_proposals()) == 2

    def test_unregistered_caller_not_eligible(self, open_service: BallotService) -> None:
        with pytest.raises(NotEligibleError):
            open_service.register_proposal("mallory", "A")

    def test_admin_must_be_registered_to_propose(
        self, open_service: BallotService
    ) -> None:
        with pytest.raises(NotEligibleError):
            open_service.register_proposal(ADMIN, "A")

    @pytest.mark.parametrize("description", ["", "   "])
    def test_blank_description_rejected(
        self, open_service: BallotService, description: str
    ) -> None:
        with pytest.raises(InvalidDescriptionError):
            open_service.register_proposal("alice", description)

    def test_description_length_limit(self, event_log: InMemoryBallotEventLog) -> None:
        service = BallotService(
            event_log=event_log,
            config=BallotConfig(admin_id=ADMIN, max_description_length=5),
        )
        service.register_voter(ADMIN, "alice")
        service.start_proposals_registration(ADMIN)

        service.register_proposal("alice", "12345")
        with pytest.raises(InvalidDescriptionError):
            service.register_proposal("alice", "123456")

    def test_get_proposal_out_of_range(self, open_service: BallotService) -> None:
        with pytest.raises(InvalidProposalError):
            open_service.get_proposal(0)

    def test_delete_shifts_later_indices(self, open_service: BallotService) -> None:
        for description in ["A", "B", "C"]:
            open_service.register_proposal("alice", description)

        removed = open_service.delete_proposal(ADMIN, 0)

        assert removed.description == "A"
        assert [p.description for p in open_service.get_proposals()] == ["B", "C"]
        assert open_service.get_proposal(0).description == "B"

    def test_delete_out_of_range(self, open_service: BallotService) -> None:
        open_service.register_proposal("alice", "A")

        with pytest.raises(InvalidProposalError):
            open_service.delete_proposal(ADMIN, 1)

    def test_delete_requires_admin(self, open_service: BallotService) -> None:
        open_service.register_proposal("alice", "A")

        with pytest.raises(UnauthorizedError):
            open_service.delete_proposal("alice", 0)


class TestWorkflowTransitions:
    """Tests for the four linear administrator transitions."""

    def test_linear_progression(self, service: BallotService) -> None:
        assert service.start_proposals_registration(ADMIN) is (
            WorkflowStatus.PROPOSALS_REGISTRATION_STARTED
        )
        assert service.end_proposals_registration(ADMIN) is (
            WorkflowStatus.PROPOSALS_REGISTRATION_ENDED
        )
        assert service.start_voting_session(ADMIN) is WorkflowStatus.VOTING_SESSION_STARTED
        assert service.end_voting_session(ADMIN) is WorkflowStatus.VOTING_SESSION_ENDED
        assert service.workflow_status is WorkflowStatus.VOTING_SESSION_ENDED

    def test_skipping_a_phase_rejected(self, service: BallotService) -> None:
        with pytest.raises(InvalidPhaseError) as exc_info:
            service.start_voting_session(ADMIN)

        assert exc_info.value.current_status is WorkflowStatus.REGISTERING_VOTERS
        assert service.workflow_status is WorkflowStatus.REGISTERING_VOTERS

    def test_repeating_a_transition_rejected(self, service: BallotService) -> None:
        service.start_proposals_registration(ADMIN)

        with pytest.raises(InvalidPhaseError):
            service.start_proposals_registration(ADMIN)

    def test_transition_requires_admin(self, service: BallotService) -> None:
        with pytest.raises(UnauthorizedError):
            service.start_proposals_registration("alice")

    def test_voting_can_start_with_zero_proposals(self, service: BallotService) -> None:
        service.start_proposals_registration(ADMIN)
        service.end_proposals_registration(ADMIN)

        assert service.start_voting_session(ADMIN) is WorkflowStatus.VOTING_SESSION_STARTED


class TestVoting:
    """Tests for vote."""

    def test_vote_recorded(self, voting_service: BallotService) -> None:
        voter = voting_service.vote("v1", 1)

        assert voter.has_voted is True
        assert voter.voted_proposal_id == 1
        assert voting_service.get_vote_count_for_proposal(1) == 1

    def test_second_vote_rejected_and_count_unchanged(
        self, voting_service: BallotService
    ) -> None:
        voting_service.vote("v1", 0)

        with pytest.raises(AlreadyVotedError):
            voting_service.vote("v1", 1)

        assert voting_service.get_vote_count_for_proposal(0) == 1
        assert voting_service.get_vote_count_for_proposal(1) == 0

    def test_invalid_proposal_rejected(self, voting_service: BallotService) -> None:
        with pytest.raises(InvalidProposalError):
            voting_service.vote("v1", 2)

        assert voting_service.get_voter("v1").has_voted is False

    def test_unregistered_voter_not_eligible(self, voting_service: BallotService) -> None:
        with pytest.raises(NotEligibleError):
            voting_service.vote("mallory", 0)

    def test_vote_after_session_ends_rejected(
        self, voting_service: BallotService
    ) -> None:
        voting_service.end_voting_session(ADMIN)

        with pytest.raises(InvalidPhaseError):
            voting_service.vote("v1", 0)

    def test_count_equals_voters_naming_it(self, voting_service: BallotService) -> None:
        for voter_id, proposal_id in [("v1", 0), ("v2", 1), ("v3", 0)]:
            voting_service.vote(voter_id, proposal_id)

        voted_for_zero = [
            v for v in ["v1", "v2", "v3", "v4"]
            if voting_service.get_voter(v).voted_proposal_id == 0
        ]
        assert voting_service.get_vote_count_for_proposal(0) == len(voted_for_zero)


class TestProposalIdType:
    """Non-int proposal ids are rejected the same way by every operation."""

    @pytest.mark.parametrize("bad_id", ["0", 1.0, True, None])
    def test_vote_rejects_non_int_id(
        self, voting_service: BallotService, bad_id: object
    ) -> None:
        with pytest.raises(InvalidProposalError):
            voting_service.vote("v1", bad_id)

        assert voting_service.get_voter("v1").has_voted is False

    @pytest.mark.parametrize("bad_id", ["0", True])
    def test_runoff_vote_rejects_non_int_id(
        self, runoff_service: BallotService, bad_id: object
    ) -> None:
        with pytest.raises(InvalidProposalError) as exc_info:
            runoff_service.runoff_vote("v1", bad_id)

        assert exc_info.value.ballot == "runoff"
        assert runoff_service.get_voter("v1").has_voted_runoff is False

    def test_decide_tie_rejects_non_int_id(self, runoff_service: BallotService) -> None:
        close_runoff(runoff_service, {"v1": 0, "v3": 1})

        with pytest.raises(InvalidProposalError):
            runoff_service.decide_tie(ADMIN, "0")

        assert runoff_service.workflow_status is WorkflowStatus.RUNOFF_VOTING_ENDED

    def test_reads_reject_non_int_id(self, voting_service: BallotService) -> None:
        with pytest.raises(InvalidProposalError):
            voting_service.get_proposal("1")
        with pytest.raises(InvalidProposalError):
            voting_service.get_vote_count_for_proposal("1")


class TestGuardOrder:
    """The first failing guard decides the error."""

    def test_feature_checked_before_authorization(
        self, make_service: ServiceFactory
    ) -> None:
        basic = make_service(BallotVariant.BASIC)

        with pytest.raises(FeatureDisabledError):
            basic.revoke_voter("mallory", "alice")

    def test_authorization_checked_before_phase(self, service: BallotService) -> None:
        with pytest.raises(UnauthorizedError):
            service.end_voting_session("mallory")

    def test_eligibility_checked_before_phase(self, service: BallotService) -> None:
        with pytest.raises(NotEligibleError):
            service.vote("mallory", 0)

    def test_phase_checked_before_data(self, service: BallotService) -> None:
        service.register_voter(ADMIN, "alice")

        with pytest.raises(InvalidPhaseError):
            service.vote("alice", 99)

    def test_already_voted_checked_before_proposal_range(
        self, voting_service: BallotService
    ) -> None:
        voting_service.vote("v1", 0)

        with pytest.raises(AlreadyVotedError):
            voting_service.vote("v1", 99)


class TestTally:
    """Tests for tally_votes in the extended variant."""

    def test_scenario_a_single_winner(self, service: BallotService) -> None:
        open_voting(service, ["v1", "v2", "v3"], ["Build a park", "Build a pool"])
        close_voting(service, {"v1": 0, "v2": 0, "v3": 1})

        result = service.tally_votes(ADMIN)

        assert result.winning_ids == (0,)
        assert service.workflow_status is WorkflowStatus.VOTES_TALLIED
        winner = service.get_winner()
        assert winner.descriptions == ("Build a park",)
        assert winner.resolved is True

    def test_scenario_b_tie_opens_runoff(self, voting_service: BallotService) -> None:
        close_voting(voting_service, {"v1": 0, "v2": 0, "v3": 1, "v4": 1})

        result = voting_service.tally_votes(ADMIN)

        assert result.winning_ids == (0, 1)
        assert result.top_count == 2
        assert voting_service.workflow_status is WorkflowStatus.RUNOFF_VOTING_STARTED
        assert voting_service.runoff_proposal_ids == [0, 1]

    def test_runoff_ballot_only_holds_tied_proposals(
        self, service: BallotService
    ) -> None:
        open_voting(service, ["v1", "v2", "v3", "v4"], ["A", "B", "C"])
        close_voting(service, {"v1": 0, "v2": 2, "v3": 0, "v4": 2})

        service.tally_votes(ADMIN)

        assert service.runoff_proposal_ids == [0, 2]

    def test_no_votes_ties_every_proposal(self, voting_service: BallotService) -> None:
        voting_service.end_voting_session(ADMIN)

        result = voting_service.tally_votes(ADMIN)

        assert result.winning_ids == (0, 1)
        assert result.top_count == 0

    def test_no_proposals_gives_no_result(self, service: BallotService) -> None:
        open_voting(service, ["v1"], [])
        service.end_voting_session(ADMIN)

        result = service.tally_votes(ADMIN)

        assert result.is_empty
        assert service.workflow_status is WorkflowStatus.VOTES_TALLIED
        with pytest.raises(NoResultError):
            service.get_winner()

    def test_tally_requires_ended_session(self, voting_service: BallotService) -> None:
        with pytest.raises(InvalidPhaseError):
            voting_service.tally_votes(ADMIN)

    def test_winner_not_available_before_tally(
        self, voting_service: BallotService
    ) -> None:
        with pytest.raises(ResultsNotFinalError):
            voting_service.get_winner()

    def test_tally_only_once(self, voting_service: BallotService) -> None:
        close_voting(voting_service, {"v1": 0})
        voting_service.tally_votes(ADMIN)

        with pytest.raises(InvalidPhaseError):
            voting_service.tally_votes(ADMIN)


class TestRunoff:
    """Tests for runoff_vote, end_runoff_voting_session and decide_tie."""

    def test_runoff_vote_counts_separately(self, runoff_service: BallotService) -> None:
        runoff_service.runoff_vote("v1", 1)

        proposal = runoff_service.get_proposal(1)
        assert proposal.runoff_vote_count == 1
        assert proposal.vote_count == 2

    def test_first_round_voters_may_vote_in_runoff(
        self, runoff_service: BallotService
    ) -> None:
        voter = runoff_service.runoff_vote("v1", 0)

        assert voter.has_voted is True
        assert voter.has_voted_runoff is True

    def test_runoff_vote_once(self, runoff_service: BallotService) -> None:
        runoff_service.runoff_vote("v1", 0)

        with pytest.raises(AlreadyVotedError):
            runoff_service.runoff_vote("v1", 1)

    def test_runoff_vote_for_eliminated_proposal_rejected(
        self, service: BallotService
    ) -> None:
        open_voting(service, ["v1", "v2", "v3", "v4"], ["A", "B", "C"])
        close_voting(service, {"v1": 0, "v2": 0, "v3": 1, "v4": 1})
        service.tally_votes(ADMIN)

        with pytest.raises(InvalidProposalError) as exc_info:
            service.runoff_vote("v1", 2)

        assert exc_info.value.ballot == "runoff"

    def test_runoff_single_winner(self, runoff_service: BallotService) -> None:
        close_runoff(runoff_service, {"v1": 1, "v2": 1, "v3": 0})

        assert runoff_service.workflow_status is WorkflowStatus.VOTES_TALLIED
        assert runoff_service.get_winner().proposal_ids == (1,)

    def test_scenario_c_runoff_tie_decided(self, runoff_service: BallotService) -> None:
        close_runoff(runoff_service, {"v1": 0, "v2": 1})
        assert runoff_service.workflow_status is WorkflowStatus.RUNOFF_VOTING_ENDED

        open_result = runoff_service.get_winner()
        assert open_result.proposal_ids == (0, 1)
        assert open_result.resolved is False

        decided = runoff_service.decide_tie(ADMIN, 1)

        assert decided.proposal_ids == (1,)
        assert runoff_service.workflow_status is WorkflowStatus.VOTES_TALLIED
        assert runoff_service.get_winner().descriptions == ("Build a pool",)

    def test_decide_tie_rejects_untied_proposal(self, service: BallotService) -> None:
        open_voting(service, ["v1", "v2", "v3", "v4"], ["A", "B", "C"])
        close_voting(service, {"v1": 0, "v2": 0, "v3": 1, "v4": 1})
        service.tally_votes(ADMIN)
        close_runoff(service, {"v1": 0, "v2": 1})

        with pytest.raises(NotTiedError):
            service.decide_tie(ADMIN, 2)
        with pytest.raises(InvalidProposalError):
            service.decide_tie(ADMIN, 7)
        assert service.workflow_status is WorkflowStatus.RUNOFF_VOTING_ENDED

    def test_decide_tie_requires_runoff_ended(
        self, runoff_service: BallotService
    ) -> None:
        with pytest.raises(InvalidPhaseError):
            runoff_service.decide_tie(ADMIN, 0)

    def test_decide_tie_requires_admin(self, runoff_service: BallotService) -> None:
        close_runoff(runoff_service, {"v1": 0, "v2": 1})

        with pytest.raises(UnauthorizedError):
            runoff_service.decide_tie("v1", 0)

    def test_empty_runoff_stays_tied(self, runoff_service: BallotService) -> None:
        result = runoff_service.end_runoff_voting_session(ADMIN)

        assert result.winning_ids == (0, 1)
        assert runoff_service.workflow_status is WorkflowStatus.RUNOFF_VOTING_ENDED

    def test_no_operations_after_votes_tallied(
        self, runoff_service: BallotService
    ) -> None:
        close_runoff(runoff_service, {"v1": 1})

        with pytest.raises(InvalidPhaseError):
            runoff_service.runoff_vote("v2", 1)
        with pytest.raises(InvalidPhaseError):
            runoff_service.end_runoff_voting_session(ADMIN)


class TestVariants:
    """Tests for the basic and intermediate variants."""

    def test_basic_first_reaching_max_wins(self, make_service: ServiceFactory) -> None:
        basic = make_service(BallotVariant.BASIC)
        open_voting(basic, ["v1", "v2"], ["A", "B"])
        close_voting(basic, {"v1": 1, "v2": 0})

        result = basic.tally_votes(ADMIN)

        assert result.winning_ids == (0,)
        assert basic.workflow_status is WorkflowStatus.VOTES_TALLIED
        assert basic.get_winner().resolved is True

    @pytest.mark.parametrize(
        "operation,args",
        [
            ("revoke_voter", ("alice",)),
            ("delete_proposal", (0,)),
            ("runoff_vote", (0,)),
            ("end_runoff_voting_session", ()),
            ("decide_tie", (0,)),
        ],
    )
    def test_basic_lacks_extended_operations(
        self, make_service: ServiceFactory, operation: str, args: tuple
    ) -> None:
        basic = make_service(BallotVariant.BASIC)

        with pytest.raises(FeatureDisabledError):
            getattr(basic, operation)(ADMIN, *args)

    def test_intermediate_reports_tie_without_runoff(
        self, make_service: ServiceFactory
    ) -> None:
        intermediate = make_service(BallotVariant.INTERMEDIATE)
        open_voting(intermediate, ["v1", "v2"], ["A", "B"])
        close_voting(intermediate, {"v1": 1, "v2": 0})

        result = intermediate.tally_votes(ADMIN)

        assert result.winning_ids == (0, 1)
        assert intermediate.workflow_status is WorkflowStatus.VOTES_TALLIED
        assert intermediate.runoff_proposal_ids == []
        winner = intermediate.get_winner()
        assert winner.proposal_ids == (0, 1)
        assert winner.is_tie is True

    def test_intermediate_supports_revoke(self, make_service: ServiceFactory) -> None:
        intermediate = make_service(BallotVariant.INTERMEDIATE)
        intermediate.register_voter(ADMIN, "alice")

        assert intermediate.revoke_voter(ADMIN, "alice").is_registered is False

    def test_intermediate_lacks_runoff(self, make_service: ServiceFactory) -> None:
        intermediate = make_service(BallotVariant.INTERMEDIATE)

        with pytest.raises(FeatureDisabledError):
            intermediate.runoff_vote(ADMIN, 0)


class TestNotifications:
    """Every successful mutation appends exactly one event."""

    def test_one_event_per_operation(
        self, service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        open_voting(service, ["v1", "v2"], ["A", "B"])
        close_voting(service, {"v1": 0, "v2": 1})
        service.tally_votes(ADMIN)

        # 2 voters, 3 transitions, 2 proposals, 2 votes, end session, tally
        assert len(event_log) == 11
        assert [e.sequence for e in event_log.events()] == list(range(1, 12))

    def test_event_types(
        self, voting_service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        voting_service.vote("v1", 0)

        last = event_log.events()[-1]
        assert last.event_type == "vote.cast"
        assert last.actor_id == "v1"
        assert last.payload.to_dict() == {"voter_id": "v1", "proposal_id": 0}

    def test_status_change_event_payload(
        self, service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        service.start_proposals_registration(ADMIN)

        changes = event_log.events("workflow.status_changed")
        assert len(changes) == 1
        assert changes[0].payload.previous_status == "RegisteringVoters"
        assert changes[0].payload.new_status == "ProposalsRegistrationStarted"

    def test_failed_operation_appends_nothing(
        self, voting_service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        before = len(event_log)

        with pytest.raises(InvalidProposalError):
            voting_service.vote("v1", 9)

        assert len(event_log) == before


class TestRollback:
    """A failed append leaves the ballot unchanged."""

    def test_vote_rolled_back(
        self, voting_service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        event_log.should_fail = True

        with pytest.raises(EventLogUnavailableError):
            voting_service.vote("v1", 0)

        assert voting_service.get_voter("v1").has_voted is False
        assert voting_service.get_vote_count_for_proposal(0) == 0

    def test_tally_rolled_back(
        self, voting_service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        close_voting(voting_service, {"v1": 0, "v2": 0, "v3": 1, "v4": 1})
        event_log.should_fail = True

        with pytest.raises(EventLogUnavailableError):
            voting_service.tally_votes(ADMIN)

        assert voting_service.workflow_status is WorkflowStatus.VOTING_SESSION_ENDED
        assert voting_service.winning_proposal_ids == []
        assert voting_service.runoff_proposal_ids == []

    def test_delete_rolled_back(
        self, service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        service.register_voter(ADMIN, "alice")
        service.start_proposals_registration(ADMIN)
        service.register_proposal("alice", "A")
        event_log.should_fail = True

        with pytest.raises(EventLogUnavailableError):
            service.delete_proposal(ADMIN, 0)

        assert [p.description for p in service.get_proposals()] == ["A"]

    def test_service_usable_after_outage(
        self, voting_service: BallotService, event_log: InMemoryBallotEventLog
    ) -> None:
        event_log.should_fail = True
        with pytest.raises(EventLogUnavailableError):
            voting_service.vote("v1", 0)

        event_log.should_fail = False
        voting_service.vote("v1", 0)

        assert voting_service.get_vote_count_for_proposal(0) == 1


class TestDeletionShift:
    """Deleting a proposal moves later proposals down one index."""

    def test_scenario_e_later_index_takes_the_slot(
        self, service: BallotService
    ) -> None:
        service.register_voter(ADMIN, "alice")
        service.start_proposals_registration(ADMIN)
        for description in ["A", "B", "C"]:
            service.register_proposal("alice", description)

        service.delete_proposal(ADMIN, 0)
        service.end_proposals_registration(ADMIN)
        service.start_voting_session(ADMIN)
        service.vote("alice", 0)

        assert service.get_proposal(0).description == "B"
        assert service.get_proposal(0).vote_count == 1
