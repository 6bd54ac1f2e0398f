"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

from advisor_match.api.version import BUILD_VERSION

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = BUILD_VERSION


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Liveness probe - always returns 200 if the service is running.
    The engine holds no external connections, so liveness is also readiness.
    """
    return HealthResponse(status="ok")
