"""Custom exceptions and centralized FastAPI error handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import settings

logger = logging.getLogger(__name__)

USAGE_HINT = "Please provide ?TARGET_URL=<video_url>"


class VideoProxyError(Exception):
    """Base exception with HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(VideoProxyError):
    def __init__(self, message: str = USAGE_HINT):
        super().__init__(message, status_code=400)


class FetchError(VideoProxyError):
    """Browser-mediated upstream call failed (navigation, timeout, evaluation)."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    """Register centralized exception handlers on the FastAPI app."""

    @app.exception_handler(VideoProxyError)
    async def handle_video_proxy_error(_request: Request, exc: VideoProxyError):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception):
        logger.exception("Unhandled error: %s", exc)
        # Runs outside the middleware stack, so CORS headers are set here too
        return JSONResponse(
            {"error": "Internal server error"},
            status_code=500,
            headers=settings.cors_headers,
        )
