"""Health check response models."""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Response for GET /health."""

    status: Literal["ok"] = "ok"
    service: str
    sessions: int
    """Number of currently open SSE sessions."""
