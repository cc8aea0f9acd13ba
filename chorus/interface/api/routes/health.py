"""Health check routes."""

from datetime import datetime, timezone

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from chorus.adapter.realtime import BroadcastHub
from chorus.config import Settings


router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    observers: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings], hub: FromDishka[BroadcastHub]
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status and the number of connected realtime sessions
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version="0.1.0",
        git_sha=settings.git_sha,
        observers=hub.observer_count,
    )
