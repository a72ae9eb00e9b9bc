"""Workflow phase and result errors.

This module defines errors raised when an operation is not legal in the
current workflow status, or when results are read before they exist.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from ballotgate.domain.exceptions import BallotError

if TYPE_CHECKING:
    from ballotgate.domain.models.workflow_status import WorkflowStatus


class InvalidPhaseError(BallotError):
    """Raised when an operation is attempted in the wrong workflow status.

    Attributes:
        operation: Name of the rejected operation.
        current_status: Status the ballot is in.
        required_statuses: Statuses in which the operation is legal.
    """

    def __init__(
        self,
        operation: str,
        current_status: WorkflowStatus,
        required_statuses: Iterable[WorkflowStatus] = (),
    ) -> None:
        """Initialize invalid phase error.

        Args:
            operation: Name of the rejected operation.
            current_status: Status the ballot is in.
            required_statuses: Statuses in which the operation is legal.
        """
        self.operation = operation
        self.current_status = current_status
        self.required_statuses = tuple(required_statuses)

        required_str = (
            f" Required: {[s.value for s in self.required_statuses]}"
            if self.required_statuses
            else ""
        )
        super().__init__(
            f"{operation} is not allowed while {current_status.value}.{required_str}"
        )


class ResultsNotFinalError(BallotError):
    """Raised when results are read before the tally has completed.

    Attributes:
        current_status: Status the ballot is in.
    """

    def __init__(self, current_status: WorkflowStatus) -> None:
        self.current_status = current_status
        super().__init__(
            f"Results are not final while {current_status.value}"
        )


class NoResultError(BallotError):
    """Raised when a tally produced an empty winning set."""

    def __init__(self) -> None:
        super().__init__("The tally produced no winning proposal")


class NotTiedError(BallotError):
    """Raised when a tie-break names a proposal outside the tied set.

    Attributes:
        proposal_id: Proposal named by the administrator.
        tied_proposal_ids: Proposals currently tied.
    """

    def __init__(self, proposal_id: int, tied_proposal_ids: Iterable[int]) -> None:
        self.proposal_id = proposal_id
        self.tied_proposal_ids = tuple(tied_proposal_ids)
        super().__init__(
            f"Proposal {proposal_id} is not among the tied proposals "
            f"{list(self.tied_proposal_ids)}"
        )


class FeatureDisabledError(BallotError):
    """Raised when the configured ballot variant does not offer an operation.

    Attributes:
        operation: Name of the rejected operation.
        variant: Configured variant value.
    """

    def __init__(self, operation: str, variant: str) -> None:
        self.operation = operation
        self.variant = variant
        super().__init__(f"{operation} is not available in the {variant} ballot")
