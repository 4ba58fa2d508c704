"""Health and readiness check routes."""

import logging

from fastapi import APIRouter, Request

from config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "video-data-proxy"


@router.get("/ready")
async def ready() -> dict:
    """Lightweight readiness check — no external calls."""
    return {"status": "ok", "service": SERVICE_NAME, "commit": settings.git_sha}


@router.get("/health")
async def health(request: Request) -> dict:
    """Readiness plus cache occupancy. Does not launch a browser."""
    cache = request.app.state.video_service.cache
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "commit": settings.git_sha,
        "cache": {"entries": len(cache), "max_entries": cache.max_entries},
    }
