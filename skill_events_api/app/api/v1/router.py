"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (credits, events,
registrations, submissions, info) under a unified prefix.  When new
endpoints are added, update this file to include their routers.
"""

from fastapi import APIRouter

from .endpoints import (
    credits,
    events,
    registrations,
    submissions,
    info,
)

router = APIRouter()

router.include_router(credits.router, prefix="/credits", tags=["credits"])
# Registration and submission routers define full "/events/{id}/..."
# paths themselves, so they are included without a prefix and ahead of
# the generic event routes.
router.include_router(registrations.router, tags=["registrations"])
router.include_router(submissions.router, tags=["submissions"])
router.include_router(events.router, prefix="/events", tags=["events"])
router.include_router(info.router, prefix="/info", tags=["info"])
