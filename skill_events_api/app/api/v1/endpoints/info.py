"""
Information endpoints for API v1.

``GET /info/`` returns the service name and version; ``GET
/info/health`` is a liveness probe used by the mobile client to check
that the configured API base URL is reachable.
"""

from typing import Any, Dict

from fastapi import APIRouter

from skill_events_api.app.core.config import settings

router = APIRouter()


@router.get("/", response_model=Dict[str, Any])
async def get_info() -> Dict[str, Any]:
    return {"project": settings.project_name, "version": settings.api_version}


@router.get("/health", response_model=Dict[str, Any])
async def health() -> Dict[str, Any]:
    return {"ok": True}
