"""Health check routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from bizops.config import Settings
from bizops.util.clock import Clock

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    environment: str
    timestamp: datetime
    version: str
    git_sha: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings], clock: FromDishka[Clock]
) -> HealthResponse:
    """Liveness probe; touches no database or identity provider."""
    return HealthResponse(
        status="healthy",
        environment=settings.environment,
        timestamp=clock.now(),
        version="0.1.0",
        git_sha=settings.git_sha,
    )
