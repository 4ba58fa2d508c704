"""Video data proxy route.

GET /api/fetch?TARGET_URL=<video_url>   (aliases: target_url, url)
"""

import logging

from fastapi import APIRouter, Depends, Request, Response

from services.video_data import VideoDataService, resolve_target_url

logger = logging.getLogger(__name__)

router = APIRouter()


def get_video_service(request: Request) -> VideoDataService:
    return request.app.state.video_service


@router.options("/api/fetch")
async def fetch_preflight() -> Response:
    """CORS preflight: bare 200, CORS headers added by middleware."""
    return Response(status_code=200)


@router.get("/api/fetch")
async def fetch_video_data(
    request: Request,
    service: VideoDataService = Depends(get_video_service),
) -> dict:
    """Video metadata for the requested URL, served from cache when fresh."""
    target_url = resolve_target_url(request.query_params)
    return await service.get_video_data(target_url)
