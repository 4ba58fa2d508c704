"""FastAPI application entry point for the video data proxy."""

import logging
import sys

from fastapi import FastAPI, Request, Response

from config import settings
from errors import register_error_handlers
from services.video_data import VideoDataService

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(video_service: VideoDataService | None = None) -> FastAPI:
    app = FastAPI(title="Video Data Proxy", version="1.0.0")

    problems = settings.validate()
    if problems:
        logger.warning("Invalid configuration: %s", "; ".join(problems))

    # One cache per process instance, shared by every request
    app.state.video_service = video_service or VideoDataService.from_settings(settings)

    # CORS + security headers on every response, preflight included
    @app.middleware("http")
    async def add_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers.update(settings.cors_headers)
        response.headers["X-Content-Type-Options"] = "nosniff"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.video import router as video_router

    app.include_router(health_router)
    app.include_router(video_router)

    return app


app = create_app()
