"""Test helpers for ballotgate tests.

Helpers:
    open_voting: Register voters and proposals and open the vote
    close_voting: Cast first-round ballots and close the vote
    close_runoff: Cast runoff ballots and close the runoff

Usage:
    from tests.helpers import open_voting
"""

from tests.helpers.ballot_helpers import ADMIN, close_runoff, close_voting, open_voting

__all__ = ["ADMIN", "close_runoff", "close_voting", "open_voting"]
