"""
Domain layer - Pure ballot rules for ballotgate.

This layer contains:
- Domain models (workflow status, voters, proposals, ballot state)
- Domain events (ballot notifications)
- Domain services (authorization gate, tally engine)
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or api.
"""

from ballotgate.domain.exceptions import BallotError

__all__: list[str] = ["BallotError"]
