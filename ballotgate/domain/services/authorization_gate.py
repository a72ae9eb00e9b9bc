"""Identity and authorization gate.

Pure predicate checks run at the top of every mutating ballot operation.
The administrator check always precedes the phase check, which precedes
any data validity check, so the same call against the same state always
fails with the same error.
"""

from __future__ import annotations

from ballotgate.domain.errors import InvalidPhaseError, NotEligibleError, UnauthorizedError
from ballotgate.domain.models.ballot_state import BallotState
from ballotgate.domain.models.workflow_status import WorkflowStatus


class AuthorizationGate:
    """Checks caller identity against a ballot's administrator and voters.

    The gate holds no state of its own; it reads the ballot it is given.
    """

    def __init__(self, state: BallotState) -> None:
        self._state = state

    def is_admin(self, caller_id: str) -> bool:
        return caller_id == self._state.admin_id

    def require_admin(self, caller_id: str, operation: str) -> None:
        """Raise UnauthorizedError unless caller_id is the administrator."""
        if not self.is_admin(caller_id):
            raise UnauthorizedError(caller_id, operation)

    def require_registered_voter(self, caller_id: str) -> None:
        """Raise NotEligibleError unless caller_id is a registered voter."""
        if not self._state.is_registered(caller_id):
            raise NotEligibleError(caller_id)


def require_status(
    state: BallotState,
    operation: str,
    *allowed: WorkflowStatus,
) -> None:
    """Raise InvalidPhaseError unless the ballot is in one of allowed.

    Args:
        state: Ballot to check.
        operation: Name of the calling operation, for the error.
        *allowed: Statuses in which the operation is legal.
    """
    if state.status not in allowed:
        raise InvalidPhaseError(operation, state.status, allowed)
