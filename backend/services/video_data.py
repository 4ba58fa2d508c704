"""Video data lookup: cache in front of the browser fetcher.

Shared by the FastAPI routes and the Azure Functions blueprint. Raises
ValidationError / FetchError; the HTTP layers turn those into responses.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from config import Settings, settings as default_settings
from errors import FetchError, ValidationError, VideoProxyError
from services.cache import TTLCache, normalize
from services.fetcher import BrowserFetcher, FetchResult

logger = logging.getLogger(__name__)

# Query parameter aliases, checked in order
TARGET_URL_PARAMS = ("TARGET_URL", "target_url", "url")


def _retrieve_exception(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()


def resolve_target_url(params: Mapping[str, str]) -> str:
    """Return the first non-blank target URL among the accepted aliases."""
    for name in TARGET_URL_PARAMS:
        value = params.get(name)
        if value and value.strip():
            return value
    raise ValidationError()


class VideoDataService:
    def __init__(
        self,
        cache: TTLCache,
        fetcher,
        default_ttl_seconds: int = 300,
        single_flight: bool = False,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.default_ttl_seconds = default_ttl_seconds
        self.single_flight = single_flight
        self._in_flight: dict[str, asyncio.Future] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "VideoDataService":
        """Build the per-process service: one cache, one fetcher."""
        settings = settings or default_settings
        cache = TTLCache(
            max_entries=settings.cache_max_entries,
            default_ttl_seconds=settings.cache_ttl_seconds,
        )
        return cls(
            cache=cache,
            fetcher=BrowserFetcher(settings),
            default_ttl_seconds=settings.cache_ttl_seconds,
            single_flight=settings.cache_single_flight,
        )

    async def get_video_data(self, target_url: str) -> dict[str, Any]:
        """Return the success envelope for target_url, fetching on cache miss."""
        key = normalize(target_url)

        hit = self.cache.lookup(key)
        if hit is not None:
            logger.info("Cache hit for %s (ttl=%ds)", key, hit.ttl)
            return {
                "status": "success",
                "cached": True,
                "ttl": hit.ttl,
                "requested_url": target_url,
                "response": hit.value,
            }

        logger.info("Cache miss for %s", key)
        result = await self._fetch(key, target_url)

        # Only the data part is cached; api_status is not tracked for hits
        self.cache.store(key, result.data, self.default_ttl_seconds)
        return {
            "status": "success",
            "cached": False,
            "ttl": self.default_ttl_seconds,
            "requested_url": target_url,
            "api_status": result.status,
            "response": result.data,
        }

    async def _call_fetcher(self, target_url: str) -> FetchResult:
        try:
            return await self.fetcher.fetch(target_url)
        except VideoProxyError:
            raise
        except Exception as e:
            logger.error("Fetch failed for %s: %s", target_url, e)
            raise FetchError(str(e) or type(e).__name__) from e

    async def _fetch(self, key: str, target_url: str) -> FetchResult:
        if not self.single_flight:
            return await self._call_fetcher(target_url)

        pending = self._in_flight.get(key)
        if pending is not None:
            logger.info("Joining in-flight fetch for %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._call_fetcher(target_url))
        # The starter may be cancelled with nobody else waiting
        task.add_done_callback(_retrieve_exception)
        self._in_flight[key] = task
        try:
            return await asyncio.shield(task)
        finally:
            self._in_flight.pop(key, None)
