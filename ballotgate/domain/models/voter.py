"""Voter record model.

A voter record exists implicitly, zero-valued, for every identity. The
administrator registers identities during RegisteringVoters. Vote flags
are set once per round and never reset; the first round and the runoff
round are recorded separately.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, eq=True)
class Voter:
    """Registration and voting status of one identity.

    Attributes:
        voter_id: Caller identity this record belongs to.
        is_registered: Whether the administrator registered the identity.
        has_voted: Whether the voter cast a first-round vote.
        voted_proposal_id: Proposal index voted for in the first round.
        has_voted_runoff: Whether the voter cast a runoff vote.
        runoff_voted_proposal_id: Proposal index voted for in the runoff.
    """

    voter_id: str
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int | None = None
    has_voted_runoff: bool = False
    runoff_voted_proposal_id: int | None = None

    @classmethod
    def unknown(cls, voter_id: str) -> Voter:
        """Zero-valued record for an identity with no history."""
        return cls(voter_id=voter_id)

    def with_registration(self, is_registered: bool) -> Voter:
        """Return a copy with the registration flag set."""
        return replace(self, is_registered=is_registered)

    def with_vote(self, proposal_id: int) -> Voter:
        """Return a copy recording a first-round vote for proposal_id."""
        return replace(self, has_voted=True, voted_proposal_id=proposal_id)

    def with_runoff_vote(self, proposal_id: int) -> Voter:
        """Return a copy recording a runoff vote for proposal_id."""
        return replace(
            self, has_voted_runoff=True, runoff_voted_proposal_id=proposal_id
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "voter_id": self.voter_id,
            "is_registered": self.is_registered,
            "has_voted": self.has_voted,
            "voted_proposal_id": self.voted_proposal_id,
            "has_voted_runoff": self.has_voted_runoff,
            "runoff_voted_proposal_id": self.runoff_voted_proposal_id,
        }
