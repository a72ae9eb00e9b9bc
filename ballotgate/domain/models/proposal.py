"""Proposal model.

Proposals live in an ordered list and are identified by their position.
Deleting a proposal shifts every later proposal down by one index, so
callers must not hold on to indices across a deletion.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, eq=True)
class Proposal:
    """A candidate option on the ballot.

    Attributes:
        description: Free-text description submitted by a voter.
        vote_count: First-round votes received.
        runoff_vote_count: Runoff votes received.
    """

    description: str
    vote_count: int = 0
    runoff_vote_count: int = 0

    def __post_init__(self) -> None:
        """Validate vote counters."""
        if self.vote_count < 0 or self.runoff_vote_count < 0:
            raise ValueError("Vote counts cannot be negative")

    def with_vote(self) -> Proposal:
        """Return a copy with one more first-round vote."""
        return replace(self, vote_count=self.vote_count + 1)

    def with_runoff_vote(self) -> Proposal:
        """Return a copy with one more runoff vote."""
        return replace(self, runoff_vote_count=self.runoff_vote_count + 1)

    def to_dict(self) -> dict[str, object]:
        return {
            "description": self.description,
            "vote_count": self.vote_count,
            "runoff_vote_count": self.runoff_vote_count,
        }
