"""
API routes for ballotgate.

Available routers:
- health: Health check endpoint
- ballot: Ballot workflow endpoints
"""

from ballotgate.api.routes.ballot import router as ballot_router
from ballotgate.api.routes.health import router as health_router

__all__: list[str] = ["ballot_router", "health_router"]
