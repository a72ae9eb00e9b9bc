"""Tally result models.

A TallyResult is the outcome of one argmax-with-ties scan. A
WinnerResult is what get_winner hands back to callers once results are
final.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class TallyResult:
    """Outcome of one scan over a set of proposals.

    Attributes:
        winning_ids: Proposal indices sharing the highest count, in scan order.
        top_count: The highest count seen, or None when nothing was scanned.
        scanned_ids: Proposal indices the scan covered, in order.
    """

    winning_ids: tuple[int, ...]
    top_count: int | None
    scanned_ids: tuple[int, ...]

    @property
    def is_empty(self) -> bool:
        return not self.winning_ids

    @property
    def is_tie(self) -> bool:
        """True when more than one proposal shares the highest count."""
        return len(self.winning_ids) > 1

    @property
    def sole_winner(self) -> int | None:
        """The single winning index, or None for ties and empty scans."""
        if len(self.winning_ids) == 1:
            return self.winning_ids[0]
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "winning_ids": list(self.winning_ids),
            "top_count": self.top_count,
            "scanned_ids": list(self.scanned_ids),
        }


@dataclass(frozen=True, eq=True)
class WinnerResult:
    """Winning proposal(s) as reported to callers.

    Attributes:
        proposal_ids: Winning indices. More than one means an open tie.
        descriptions: Descriptions matching proposal_ids, in order.
        resolved: False while a runoff tie awaits the administrator.
    """

    proposal_ids: tuple[int, ...]
    descriptions: tuple[str, ...]
    resolved: bool

    def __post_init__(self) -> None:
        if len(self.proposal_ids) != len(self.descriptions):
            raise ValueError("proposal_ids and descriptions must align")

    @property
    def is_tie(self) -> bool:
        return len(self.proposal_ids) > 1

    def to_dict(self) -> dict[str, object]:
        return {
            "proposal_ids": list(self.proposal_ids),
            "descriptions": list(self.descriptions),
            "resolved": self.resolved,
        }
