"""
ballotgate - Phase-gated voting workflow and tally engine

An administrator drives a ballot through its phases (voter registration,
proposal registration, voting, tallying, runoff) while registered voters
submit proposals and cast a single vote per round.

Every state-changing call either commits fully and appends exactly one
notification to the ballot event log, or fails with no effect.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
