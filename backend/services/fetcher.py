"""Headless-browser client for the getindevice video-data API.

The upstream site sits behind a Cloudflare JS challenge, so a plain HTTP
client gets a challenge page instead of JSON. We open the site in headless
Chromium (Playwright), give the challenge time to clear, then issue the
form POST from inside the page so the clearance cookies ride along.

Flow per call:
    launch Chromium → random mobile UA → goto origin (networkidle)
    → fixed wait → fetch(POST url+token) in page → close browser
"""

import json
import logging
import random
import string
from typing import Any, NamedTuple

from playwright.async_api import async_playwright

from config import Settings, settings as default_settings
from errors import FetchError

logger = logging.getLogger(__name__)

ANDROID_VERSIONS = ["9", "10", "11", "12", "13"]

# Serverless sandboxes have no /dev/shm and no user namespaces
CHROMIUM_ARGS = ["--no-sandbox", "--disable-dev-shm-usage", "--disable-gpu"]

# Runs inside the page. Returns the raw body so parsing stays in Python.
_POST_SCRIPT = """
async ({ targetUrl, postUrl, token }) => {
    const body = new URLSearchParams();
    body.append("url", targetUrl);
    body.append("token", token);
    const response = await fetch(postUrl, {
        method: "POST",
        headers: { "Content-Type": "application/x-www-form-urlencoded" },
        body,
    });
    return { status: response.status, text: await response.text() };
}
"""


class FetchResult(NamedTuple):
    status: int
    data: Any


def random_user_agent() -> str:
    """Randomized Android Chrome user agent."""
    android = random.choice(ANDROID_VERSIONS)
    device = random.choice(string.ascii_uppercase)
    chrome_major = random.randint(100, 129)
    build = random.randint(0, 9998)
    return (
        f"Mozilla/5.0 (Linux; Android {android}; {device}) AppleWebKit/537.36 "
        f"(KHTML, like Gecko) Chrome/{chrome_major}.0.0.{build} Mobile Safari/537.36"
    )


def random_token(length: int = 8) -> str:
    """Opaque base-36 token the upstream form expects."""
    alphabet = string.ascii_lowercase + string.digits
    return "".join(random.choices(alphabet, k=length))


def parse_body(text: str) -> Any:
    """Upstream JSON, or {"raw": text} when the body is not JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return {"raw": text}


class BrowserFetcher:
    """Fetch video data through a fresh headless Chromium session per call."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or default_settings

    async def fetch(self, target_url: str) -> FetchResult:
        cfg = self.settings
        logger.info("Fetching video data for %s via %s", target_url, cfg.upstream_origin)
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(
                    headless=cfg.browser_headless,
                    executable_path=cfg.chromium_executable_path,
                    args=CHROMIUM_ARGS,
                )
                try:
                    context = await browser.new_context(user_agent=random_user_agent())
                    page = await context.new_page()

                    await page.goto(
                        cfg.upstream_origin,
                        wait_until="networkidle",
                        timeout=cfg.navigation_timeout_ms,
                    )
                    # Let the challenge script finish and set its cookies
                    await page.wait_for_timeout(cfg.challenge_wait_ms)

                    raw = await page.evaluate(
                        _POST_SCRIPT,
                        {
                            "targetUrl": target_url,
                            "postUrl": cfg.upstream_api_url,
                            "token": random_token(),
                        },
                    )
                finally:
                    await browser.close()
            result = FetchResult(status=int(raw["status"]), data=parse_body(raw["text"]))
        except Exception as e:
            logger.error("Browser fetch failed for %s: %s", target_url, e)
            raise FetchError(str(e) or type(e).__name__) from e

        logger.info("Upstream responded %d for %s", result.status, target_url)
        return result
