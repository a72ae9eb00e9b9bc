"""Ballot variant model.

Three generations of the ballot share one state machine and differ in
which operations they offer and how the tally treats ties.

Variants:
    BASIC: register, propose, vote, tally. The first proposal reaching
        the highest count wins outright.
    INTERMEDIATE: adds voter revocation and proposal deletion. Ties are
        detected and reported, but no runoff is held.
    EXTENDED: adds the runoff round and the administrator tie-break.
"""

from __future__ import annotations

from enum import Enum


class BallotVariant(Enum):
    """Generation of ballot behavior in use."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    EXTENDED = "extended"

    @property
    def supports_registry_removal(self) -> bool:
        """Whether revoke_voter and delete_proposal are offered."""
        return self is not BallotVariant.BASIC

    @property
    def detects_ties(self) -> bool:
        """Whether the tally keeps every proposal tied for first."""
        return self is not BallotVariant.BASIC

    @property
    def supports_runoff(self) -> bool:
        """Whether a tie leads to a runoff round and tie-break."""
        return self is BallotVariant.EXTENDED
