"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Health status string (e.g., "healthy").
        version: Package version.
        ballot_status: Workflow status of the hosted ballot.
    """

    status: str
    version: str
    ballot_status: str
