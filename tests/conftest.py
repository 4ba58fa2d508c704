import pytest

from services.cache import TTLCache
from services.fetcher import FetchResult
from services.video_data import VideoDataService


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Records calls; returns a canned result or raises a canned error."""

    def __init__(self, result: FetchResult | None = None, error: Exception | None = None) -> None:
        self.result = result or FetchResult(status=200, data={"title": "clip", "medias": []})
        self.error = error
        self.calls: list[str] = []

    async def fetch(self, target_url: str) -> FetchResult:
        self.calls.append(target_url)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def cache(clock) -> TTLCache:
    return TTLCache(max_entries=10, default_ttl_seconds=300, clock=clock)


@pytest.fixture
def service(cache, fetcher) -> VideoDataService:
    return VideoDataService(cache=cache, fetcher=fetcher, default_ttl_seconds=300)
