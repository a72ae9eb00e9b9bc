"""Vote tally engine.

Single-pass argmax with ties: walk the proposals once, keeping the
highest count seen and every index that reached it. A strictly higher
count clears the set and restarts it with the new leader; an equal count
joins the set.

The scan is pure. Given the same (proposal_id, count) pairs in the same
order it always returns the same TallyResult.
"""

from __future__ import annotations

from collections.abc import Iterable

from ballotgate.domain.models.tally_result import TallyResult


def tally(
    counts: Iterable[tuple[int, int]],
    keep_ties: bool = True,
) -> TallyResult:
    """Find the proposal(s) with the highest count.

    Args:
        counts: (proposal_id, count) pairs in ballot order.
        keep_ties: When False, the first index reaching the highest count
            wins outright and later equal counts are ignored.

    Returns:
        TallyResult with the winning ids in scan order.
    """
    top_count: int | None = None
    winners: list[int] = []
    scanned: list[int] = []

    for proposal_id, count in counts:
        scanned.append(proposal_id)
        if top_count is None or count > top_count:
            top_count = count
            winners = [proposal_id]
        elif count == top_count and keep_ties:
            winners.append(proposal_id)

    return TallyResult(
        winning_ids=tuple(winners),
        top_count=top_count,
        scanned_ids=tuple(scanned),
    )
