"""FastAPI dependencies for the ballot API."""

from ballotgate.api.dependencies.ballot import (
    CALLER_HEADER,
    get_ballot_service,
    get_caller_id,
    reset_ballot_service,
)

__all__: list[str] = [
    "CALLER_HEADER",
    "get_ballot_service",
    "get_caller_id",
    "reset_ballot_service",
]
