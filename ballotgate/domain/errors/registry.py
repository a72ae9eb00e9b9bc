"""Voter and proposal registry errors."""

from __future__ import annotations

from ballotgate.domain.exceptions import BallotError


class AlreadyRegisteredError(BallotError):
    """Raised when registering a voter that is already registered."""

    def __init__(self, voter_id: str) -> None:
        self.voter_id = voter_id
        super().__init__(f"Voter {voter_id!r} is already registered")


class NotRegisteredError(BallotError):
    """Raised when revoking a voter that is not registered."""

    def __init__(self, voter_id: str) -> None:
        self.voter_id = voter_id
        super().__init__(f"Voter {voter_id!r} is not registered")


class AlreadyVotedError(BallotError):
    """Raised on a second vote by the same voter in one round.

    Attributes:
        voter_id: Identity of the voter.
        round_name: "voting" or "runoff".
    """

    def __init__(self, voter_id: str, round_name: str = "voting") -> None:
        self.voter_id = voter_id
        self.round_name = round_name
        super().__init__(
            f"Voter {voter_id!r} has already voted in the {round_name} round"
        )


class InvalidProposalError(BallotError):
    """Raised when a proposal id does not address a valid proposal.

    Attributes:
        proposal_id: The rejected id.
        proposal_count: Number of proposals on the addressed ballot.
        ballot: "runoff" for the runoff ballot, empty for the full list.
    """

    def __init__(self, proposal_id: int, proposal_count: int, ballot: str = "") -> None:
        self.proposal_id = proposal_id
        self.proposal_count = proposal_count
        self.ballot = ballot
        where = f" on the {ballot} ballot" if ballot else ""
        super().__init__(
            f"Proposal {proposal_id} does not exist{where} "
            f"({proposal_count} proposals)"
        )


class InvalidDescriptionError(BallotError):
    """Raised when a proposal description is blank or too long."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid proposal description: {reason}")
