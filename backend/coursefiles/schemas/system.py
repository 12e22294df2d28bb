"""System schemas."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Service status; ``database`` reports whether the file store answers."""
    status: str = "ok"
    version: str
    service: str = "coursefiles"
    database: str = "ok"
