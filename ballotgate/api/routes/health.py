"""Health check endpoint for the ballot API."""

from fastapi import APIRouter, Depends

from ballotgate import __version__
from ballotgate.api.dependencies.ballot import get_ballot_service
from ballotgate.api.models.health import HealthResponse
from ballotgate.application.services.ballot_service import BallotService

router = APIRouter(prefix="/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(
    service: BallotService = Depends(get_ballot_service),
) -> HealthResponse:
    """Return health status and the hosted ballot's phase."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        ballot_status=service.workflow_status.value,
    )
