"""Video data proxy as an Azure Functions HTTP trigger (serverless hosting)."""

import json
import logging

import azure.functions as func

from config import settings
from errors import VideoProxyError
from services.video_data import VideoDataService, resolve_target_url

logger = logging.getLogger(__name__)

bp = func.Blueprint()

# Built on first invocation and reused while the function host stays warm
_service: VideoDataService | None = None


def _get_service() -> VideoDataService:
    global _service
    if _service is None:
        _service = VideoDataService.from_settings(settings)
    return _service


def _json_response(payload: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(payload),
        status_code=status_code,
        headers=settings.cors_headers,
        mimetype="application/json",
    )


async def handle_fetch_request(req: func.HttpRequest, service: VideoDataService) -> func.HttpResponse:
    if req.method.upper() == "OPTIONS":
        return func.HttpResponse(status_code=200, headers=settings.cors_headers)

    try:
        target_url = resolve_target_url(req.params)
        result = await service.get_video_data(target_url)
    except VideoProxyError as e:
        return _json_response({"error": str(e)}, status_code=e.status_code)
    except Exception as e:
        logger.exception("Fetch endpoint failed")
        return _json_response({"error": str(e)}, status_code=500)

    return _json_response(result)


@bp.route(route="fetch", methods=["GET", "OPTIONS"])
async def fetch_video_data(req: func.HttpRequest) -> func.HttpResponse:
    return await handle_fetch_request(req, _get_service())
