"""Centralized configuration — all env vars in one place."""

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_allow_origin: str = os.getenv("CORS_ALLOW_ORIGIN", "*")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Cache
        self.cache_ttl_seconds: int = int(os.getenv("CACHE_TTL_SECONDS", "300"))
        self.cache_max_entries: int = int(os.getenv("CACHE_MAX_ENTRIES", "50"))
        self.cache_single_flight: bool = _env_bool("CACHE_SINGLE_FLIGHT", False)

        # Upstream site behind the browser challenge
        self.upstream_origin: str = os.getenv("UPSTREAM_ORIGIN", "https://getindevice.com").rstrip("/")
        self.upstream_path: str = os.getenv("UPSTREAM_PATH", "/wp-json/aio-dl/video-data/")
        self.challenge_wait_ms: int = int(os.getenv("CHALLENGE_WAIT_MS", "4000"))
        self.navigation_timeout_ms: int = int(os.getenv("NAVIGATION_TIMEOUT_MS", "30000"))

        # Headless browser
        self.chromium_executable_path: str | None = os.getenv("CHROMIUM_EXECUTABLE_PATH") or None
        self.browser_headless: bool = _env_bool("BROWSER_HEADLESS", True)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def upstream_api_url(self) -> str:
        return f"{self.upstream_origin}{self.upstream_path}"

    @property
    def cors_headers(self) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": "GET, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }

    def validate(self) -> list[str]:
        """Return list of configuration problems (empty when usable)."""
        problems = []
        if self.cache_max_entries < 1:
            problems.append(f"CACHE_MAX_ENTRIES must be >= 1 (got {self.cache_max_entries})")
        if self.cache_ttl_seconds < 0:
            problems.append(f"CACHE_TTL_SECONDS must be >= 0 (got {self.cache_ttl_seconds})")
        if self.challenge_wait_ms < 0:
            problems.append(f"CHALLENGE_WAIT_MS must be >= 0 (got {self.challenge_wait_ms})")
        if self.navigation_timeout_ms < 0:
            problems.append(f"NAVIGATION_TIMEOUT_MS must be >= 0 (got {self.navigation_timeout_ms})")
        return problems


settings = Settings()
