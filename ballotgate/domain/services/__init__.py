"""Domain services: pure rules over ballot state."""

from ballotgate.domain.services.authorization_gate import (
    AuthorizationGate,
    require_status,
)
from ballotgate.domain.services.tally_engine import tally

__all__: list[str] = ["AuthorizationGate", "require_status", "tally"]
