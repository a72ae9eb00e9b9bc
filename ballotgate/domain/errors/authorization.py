"""Authorization and eligibility errors.

Raised by the authorization gate at the top of every mutating
operation. Authorization is always checked before the workflow phase.
"""

from __future__ import annotations

from ballotgate.domain.exceptions import BallotError


class UnauthorizedError(BallotError):
    """Raised when a non-administrator calls an administrator operation.

    Attributes:
        caller_id: Identity that attempted the call.
        operation: Name of the rejected operation.
    """

    def __init__(self, caller_id: str, operation: str) -> None:
        """Initialize unauthorized error.

        Args:
            caller_id: Identity that attempted the call.
            operation: Name of the rejected operation.
        """
        self.caller_id = caller_id
        self.operation = operation
        super().__init__(
            f"Caller {caller_id!r} is not the ballot administrator; "
            f"{operation} requires administrator rights"
        )


class NotEligibleError(BallotError):
    """Raised when a caller who is not a registered voter acts as one.

    Attributes:
        caller_id: Identity that attempted the call.
    """

    def __init__(self, caller_id: str) -> None:
        self.caller_id = caller_id
        super().__init__(f"Caller {caller_id!r} is not a registered voter")
