"""Domain errors for ballotgate.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from BallotError.
"""

from ballotgate.domain.errors.authorization import NotEligibleError, UnauthorizedError
from ballotgate.domain.errors.registry import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    InvalidDescriptionError,
    InvalidProposalError,
    NotRegisteredError,
)
from ballotgate.domain.errors.workflow import (
    FeatureDisabledError,
    InvalidPhaseError,
    NoResultError,
    NotTiedError,
    ResultsNotFinalError,
)

__all__: list[str] = [
    "AlreadyRegisteredError",
    "AlreadyVotedError",
    "FeatureDisabledError",
    "InvalidDescriptionError",
    "InvalidPhaseError",
    "InvalidProposalError",
    "NoResultError",
    "NotEligibleError",
    "NotRegisteredError",
    "NotTiedError",
    "ResultsNotFinalError",
    "UnauthorizedError",
]
