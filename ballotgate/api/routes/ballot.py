"""Ballot API routes.

FastAPI router exposing the ballot workflow over HTTP.

Access classes:
- Administrator: voter registry, proposal deletion, phase transitions,
  tally, runoff close, tie-break
- Registered voter: proposal registration, vote, runoff vote
- Public: status, proposals, vote counts, voters, winner, event log

Mutating routes read the caller identity from the X-Caller-Id header.
Handlers are plain functions; the service serializes operations itself.
"""

from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Request

from ballotgate.api.dependencies.ballot import get_ballot_service, get_caller_id
from ballotgate.api.models.ballot import (
    BallotErrorResponse,
    BallotEventListResponse,
    BallotEventResponse,
    ProposalListResponse,
    ProposalRegisteredResponse,
    ProposalResponse,
    RegisterProposalRequest,
    RegisterVoterRequest,
    TallyResponse,
    VoteCountResponse,
    VoteRequest,
    VoterResponse,
    WinnerResponse,
    WorkflowStatusResponse,
)
from ballotgate.application.services.ballot_service import BallotService
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
from ballotgate.domain.exceptions import BallotError

router = APIRouter(prefix="/v1/ballot", tags=["ballot"])

# Error class -> (HTTP status, problem type slug, title)
ERROR_MAP: dict[type[BallotError], tuple[int, str, str]] = {
    UnauthorizedError: (403, "unauthorized", "Unauthorized"),
    NotEligibleError: (403, "not-eligible", "Not Eligible"),
    InvalidProposalError: (404, "invalid-proposal", "Invalid Proposal"),
    NoResultError: (404, "no-result", "No Result"),
    InvalidPhaseError: (409, "invalid-phase", "Invalid Phase"),
    AlreadyRegisteredError: (409, "already-registered", "Already Registered"),
    NotRegisteredError: (409, "not-registered", "Not Registered"),
    AlreadyVotedError: (409, "already-voted", "Already Voted"),
    NotTiedError: (409, "not-tied", "Not Tied"),
    ResultsNotFinalError: (409, "results-not-final", "Results Not Final"),
    FeatureDisabledError: (409, "feature-disabled", "Feature Disabled"),
    InvalidDescriptionError: (422, "invalid-description", "Invalid Description"),
}

ERROR_RESPONSES: dict[int | str, dict] = {
    401: {"model": BallotErrorResponse, "description": "Caller identity missing"},
    403: {"model": BallotErrorResponse, "description": "Unauthorized or not eligible"},
    404: {"model": BallotErrorResponse, "description": "Unknown proposal or no result"},
    409: {"model": BallotErrorResponse, "description": "Operation not legal now"},
}

# URL action -> service method name for the linear transitions
WORKFLOW_ACTIONS: dict[str, str] = {
    "start-proposals-registration": "start_proposals_registration",
    "end-proposals-registration": "end_proposals_registration",
    "start-voting-session": "start_voting_session",
    "end-voting-session": "end_voting_session",
}


def raise_problem(exc: BallotError, request: Request) -> NoReturn:
    """Convert a domain error to an RFC 7807 HTTPException."""
    status, slug, title = ERROR_MAP.get(
        type(exc), (400, "ballot-error", "Ballot Error")
    )
    raise HTTPException(
        status_code=status,
        detail={
            "type": f"urn:ballotgate:ballot:{slug}",
            "title": title,
            "status": status,
            "detail": str(exc),
            "instance": str(request.url),
        },
    ) from None


def _status_response(service: BallotService) -> WorkflowStatusResponse:
    return WorkflowStatusResponse(
        status=service.workflow_status.value,
        variant=service.variant.value,
        admin_id=service.admin_id,
        winning_proposal_ids=service.winning_proposal_ids,
        runoff_proposal_ids=service.runoff_proposal_ids,
    )


# =============================================================================
# Public reads
# =============================================================================


@router.get("/status", response_model=WorkflowStatusResponse)
def get_status(
    service: BallotService = Depends(get_ballot_service),
) -> WorkflowStatusResponse:
    """Current workflow status, winning set and runoff ballot."""
    return _status_response(service)


@router.get("/proposals", response_model=ProposalListResponse)
def list_proposals(
    service: BallotService = Depends(get_ballot_service),
) -> ProposalListResponse:
    return ProposalListResponse(
        proposals=[
            ProposalResponse.from_proposal(i, p)
            for i, p in enumerate(service.get_proposals())
        ]
    )


@router.get(
    "/proposals/{proposal_id}",
    response_model=ProposalResponse,
    responses=ERROR_RESPONSES,
)
def get_proposal(
    proposal_id: int,
    request: Request,
    service: BallotService = Depends(get_ballot_service),
) -> ProposalResponse:
    try:
        return ProposalResponse.from_proposal(
            proposal_id, service.get_proposal(proposal_id)
        )
    except BallotError as e:
        raise_problem(e, request)


@router.get(
    "/proposals/{proposal_id}/votes",
    response_model=VoteCountResponse,
    responses=ERROR_RESPONSES,
)
def get_vote_count(
    proposal_id: int,
    request: Request,
    service: BallotService = Depends(get_ballot_service),
) -> VoteCountResponse:
    try:
        count = service.get_vote_count_for_proposal(proposal_id)
    except BallotError as e:
        raise_problem(e, request)
    return VoteCountResponse(proposal_id=proposal_id, vote_count=count)


@router.get("/voters/{voter_id}", response_model=VoterResponse)
def get_voter(
    voter_id: str,
    service: BallotService = Depends(get_ballot_service),
) -> VoterResponse:
    return VoterResponse.from_voter(service.get_voter(voter_id))


@router.get("/winner", response_model=WinnerResponse, responses=ERROR_RESPONSES)
def get_winner(
    request: Request,
    service: BallotService = Depends(get_ballot_service),
) -> WinnerResponse:
    """Winning proposal(s) once results are final."""
    try:
        return WinnerResponse.from_result(service.get_winner())
    except BallotError as e:
        raise_problem(e, request)


@router.get("/events", response_model=BallotEventListResponse)
def list_events(
    event_type: str | None = None,
    service: BallotService = Depends(get_ballot_service),
) -> BallotEventListResponse:
    """The ballot's notification log, in append order."""
    events = service.event_log.events(event_type)
    return BallotEventListResponse(
        events=[BallotEventResponse.from_event(e) for e in events],
        total=len(events),
    )


# =============================================================================
# Voter registry (administrator)
# =============================================================================


@router.post(
    "/voters",
    response_model=VoterResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def register_voter(
    request_data: RegisterVoterRequest,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> VoterResponse:
    try:
        voter = service.register_voter(caller_id, request_data.voter_id)
    except BallotError as e:
        raise_problem(e, request)
    return VoterResponse.from_voter(voter)


@router.delete(
    "/voters/{voter_id}",
    response_model=VoterResponse,
    responses=ERROR_RESPONSES,
)
def revoke_voter(
    voter_id: str,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> VoterResponse:
    try:
        voter = service.revoke_voter(caller_id, voter_id)
    except BallotError as e:
        raise_problem(e, request)
    return VoterResponse.from_voter(voter)


# =============================================================================
# Proposal registry
# =============================================================================


@router.post(
    "/proposals",
    response_model=ProposalRegisteredResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def register_proposal(
    request_data: RegisterProposalRequest,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> ProposalRegisteredResponse:
    try:
        proposal_id = service.register_proposal(caller_id, request_data.description)
    except BallotError as e:
        raise_problem(e, request)
    return ProposalRegisteredResponse(proposal_id=proposal_id)


@router.delete(
    "/proposals/{proposal_id}",
    response_model=ProposalResponse,
    responses=ERROR_RESPONSES,
)
def delete_proposal(
    proposal_id: int,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> ProposalResponse:
    """Delete a proposal. Later proposals move down one index."""
    try:
        removed = service.delete_proposal(caller_id, proposal_id)
    except BallotError as e:
        raise_problem(e, request)
    return ProposalResponse.from_proposal(proposal_id, removed)


# =============================================================================
# Workflow (administrator)
# =============================================================================


@router.post(
    "/workflow/{action}",
    response_model=WorkflowStatusResponse,
    responses=ERROR_RESPONSES,
)
def advance_workflow(
    action: str,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> WorkflowStatusResponse:
    """Run one of the four linear phase transitions."""
    method_name = WORKFLOW_ACTIONS.get(action)
    if method_name is None:
        raise HTTPException(
            status_code=404,
            detail={
                "type": "urn:ballotgate:ballot:unknown-action",
                "title": "Unknown Workflow Action",
                "status": 404,
                "detail": f"Unknown workflow action {action!r}; "
                f"expected one of {sorted(WORKFLOW_ACTIONS)}",
                "instance": str(request.url),
            },
        )
    try:
        getattr(service, method_name)(caller_id)
    except BallotError as e:
        raise_problem(e, request)
    return _status_response(service)


@router.post("/tally", response_model=TallyResponse, responses=ERROR_RESPONSES)
def tally_votes(
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> TallyResponse:
    try:
        result = service.tally_votes(caller_id)
    except BallotError as e:
        raise_problem(e, request)
    return TallyResponse.from_result(result, service.workflow_status.value)


@router.post("/runoff/end", response_model=TallyResponse, responses=ERROR_RESPONSES)
def end_runoff_voting_session(
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> TallyResponse:
    try:
        result = service.end_runoff_voting_session(caller_id)
    except BallotError as e:
        raise_problem(e, request)
    return TallyResponse.from_result(result, service.workflow_status.value)


@router.post("/tie-break", response_model=WinnerResponse, responses=ERROR_RESPONSES)
def decide_tie(
    request_data: VoteRequest,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> WinnerResponse:
    try:
        result = service.decide_tie(caller_id, request_data.proposal_id)
    except BallotError as e:
        raise_problem(e, request)
    return WinnerResponse.from_result(result)


# =============================================================================
# Voting (registered voters)
# =============================================================================


@router.post(
    "/votes",
    response_model=VoterResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def vote(
    request_data: VoteRequest,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> VoterResponse:
    try:
        voter = service.vote(caller_id, request_data.proposal_id)
    except BallotError as e:
        raise_problem(e, request)
    return VoterResponse.from_voter(voter)


@router.post(
    "/runoff-votes",
    response_model=VoterResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def runoff_vote(
    request_data: VoteRequest,
    request: Request,
    caller_id: str = Depends(get_caller_id),
    service: BallotService = Depends(get_ballot_service),
) -> VoterResponse:
    """Vote in the runoff. proposal_id is the original proposal id."""
    try:
        voter = service.runoff_vote(caller_id, request_data.proposal_id)
    except BallotError as e:
        raise_problem(e, request)
    return VoterResponse.from_voter(voter)
