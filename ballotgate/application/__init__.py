"""
Application layer - Use cases and orchestration for ballotgate.

This layer contains:
- Application services (ballot workflow orchestration)
- Port definitions (interfaces to the notification log)

IMPORT RULES:
- CAN import from: domain, config
- CANNOT import from: infrastructure, api
"""

from ballotgate.application.ports import BallotEventLogPort

__all__: list[str] = ["BallotEventLogPort"]
