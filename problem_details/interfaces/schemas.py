"""
Pydantic schemas for API responses.

Error responses are not modelled here: they are rendered as
RFC 7807 Problem Details by the error handling middleware.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
