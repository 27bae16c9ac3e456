"""
Health check endpoints.
"""

from datetime import datetime

from fastapi import APIRouter, Request
from pydantic import BaseModel

from ...application.services import change_feed as topics
from ..deps import SettingsDep, StoreDep
from ..schemas.common import ApiResponse
from ..utils.responses import ok

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    timestamp: datetime
    version: str
    service: str


@router.get("/", response_model=ApiResponse[HealthResponse])
async def health_check(request: Request, settings: SettingsDep):
    """
    Health check endpoint.

    Returns the current status of the service.
    """
    return ok(request, data=HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=settings.app_version,
        service=settings.app_name,
    ), message="OK")


@router.get("/ready", response_model=ApiResponse[dict])
async def readiness_check(request: Request, store: StoreDep):
    """
    Readiness check endpoint.

    Ready once the store is up and the staff roster has been loaded.
    """
    checks = {}
    doctors = await store.staff.find_doctors()
    checks["store"] = "ok"
    checks["doctors"] = len(doctors)
    checks["revisions"] = {topic: store.feed.revision(topic) for topic in topics.TOPICS}
    all_ok = len(doctors) > 0

    return ok(request, data={
        "status": "ready" if all_ok else "degraded",
        "timestamp": datetime.utcnow(),
        "checks": checks,
    }, message="OK" if all_ok else "No doctors on the roster")


@router.get("/live", response_model=ApiResponse[dict])
async def liveness_check(request: Request):
    """
    Liveness check endpoint.

    Returns whether the service is alive.
    """
    return ok(request, data={"status": "alive", "timestamp": datetime.utcnow()}, message="OK")
