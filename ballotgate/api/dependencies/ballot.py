"""Ballot API dependencies.

Dependency injection setup for the ballot service and caller identity.
The HTTP process hosts one ballot, configured from the environment on
first use, with an in-memory notification log.

Note: The caller identity is taken from the X-Caller-Id header set by the
authentication proxy in front of the API. This module does not
authenticate; it only reads the identity it is handed.
"""

from fastapi import Header, HTTPException

from ballotgate.application.services.ballot_service import BallotService
from ballotgate.bootstrap.ballot import build_ballot_service
from ballotgate.config.ballot_config import BallotConfig

CALLER_HEADER = "X-Caller-Id"

# Singleton ballot for this process
_ballot_service: BallotService | None = None


def get_ballot_service() -> BallotService:
    """Get the ballot service singleton.

    Created on first use from BallotConfig.from_environment().

    Returns:
        BallotService for the hosted ballot.
    """
    global _ballot_service
    if _ballot_service is None:
        _ballot_service = build_ballot_service()
    return _ballot_service


def reset_ballot_service(config: BallotConfig | None = None) -> BallotService:
    """Replace the hosted ballot with a fresh one.

    Args:
        config: Configuration for the new ballot. Read from the
            environment when None.

    Returns:
        The new BallotService.
    """
    global _ballot_service
    _ballot_service = build_ballot_service(config)
    return _ballot_service


def get_caller_id(
    x_caller_id: str | None = Header(default=None, alias=CALLER_HEADER),
) -> str:
    """Extract the caller identity from the request.

    Raises:
        HTTPException 401: If the header is missing or blank.
    """
    if x_caller_id is None or not x_caller_id.strip():
        raise HTTPException(
            status_code=401,
            detail={
                "type": "urn:ballotgate:identity:missing",
                "title": "Caller Identity Missing",
                "status": 401,
                "detail": f"The {CALLER_HEADER} header is required",
            },
        )
    return x_caller_id.strip()
