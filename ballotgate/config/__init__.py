"""Configuration module for ballotgate.

Available Configurations:
- BallotConfig: Ballot variant, administrator and description limits
"""

from ballotgate.config.ballot_config import DEFAULT_BALLOT_CONFIG, BallotConfig

__all__ = [
    "BallotConfig",
    "DEFAULT_BALLOT_CONFIG",
]
