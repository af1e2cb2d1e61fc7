"""
ScraperAPI client.

Fetches a page's markup (JS rendered by default) and, on request, a
screenshot of it. Everything here reports failure as ScrapeResult(success=False)
instead of raising, so callers can decide how much a missing piece matters.
"""

import json
from typing import Any, Literal
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from livepreview.config import get_settings
from livepreview.errors import AcquisitionError
from livepreview.image_utils import to_data_url


TRUNCATION_MARKER = "... [Content truncated due to size]"
CONNECTION_TEST_URL = "http://httpbin.org/ip"

# premium tiers are mutually exclusive
_EXCLUSIVE = {"premium": "ultra_premium", "ultra_premium": "premium"}


class ScrapeOptions(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    url: str
    screenshot: bool = False
    render_js: bool = True
    premium: bool = False
    ultra_premium: bool = False
    device: Literal["desktop", "mobile", "tablet"] = "desktop"
    auto_scroll: bool = False
    country: str | None = None
    wait_for: int | None = None  # milliseconds

    @field_validator("url")
    @classmethod
    def _check_url(cls, v: str) -> str:
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Please enter a valid URL")
        return v

    @model_validator(mode="after")
    def _one_premium_tier(self):
        if self.premium and self.ultra_premium:
            raise ValueError("premium and ultra_premium cannot both be enabled")
        return self

    def toggle(self, option: str, value: bool) -> "ScrapeOptions":
        """Return a copy with a boolean option set; enabling one premium tier clears the other."""
        name = _field_name(option)
        if ScrapeOptions.model_fields[name].annotation is not bool:
            raise ValueError(f"{option} is not a toggle")
        update = {name: value}
        if value and name in _EXCLUSIVE:
            update[_EXCLUSIVE[name]] = False
        return self.model_copy(update=update)

    def to_params(self) -> dict[str, str]:
        """ScraperAPI query parameters, minus api_key / url / screenshot."""
        params = {}
        if not self.render_js:
            params["render"] = "false"
        if self.premium:
            params["premium"] = "true"
        if self.ultra_premium:
            params["ultra_premium"] = "true"
        if self.device != "desktop":
            params["device"] = self.device
        if self.auto_scroll:
            params["autoScroll"] = "true"
        if self.country:
            params["country_code"] = self.country
        if self.wait_for:
            params["wait_for"] = str(self.wait_for)
        return params


class ScrapeResult(BaseModel):
    success: bool
    data: Any = None
    screenshot_url: str | None = None
    error: str | None = None


def _field_name(option: str) -> str:
    if option in ScrapeOptions.model_fields:
        return option
    for name, field in ScrapeOptions.model_fields.items():
        if field.alias == option:
            return name
    raise ValueError(f"Unknown scrape option: {option}")


def _get_http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=get_settings().scrape_timeout, follow_redirects=True)


def _parse_body(text: str, max_chars: int) -> Any:
    """JSON if it parses, otherwise the text (truncated past max_chars)."""
    try:
        return json.loads(text)
    except ValueError:
        pass
    if len(text) > max_chars:
        return text[:max_chars] + TRUNCATION_MARKER
    return text


def _media_type(content_type: str | None, default: str) -> str:
    return (content_type or default).split(";", 1)[0].strip() or default


async def scrape_website(options: ScrapeOptions | dict) -> ScrapeResult:
    """Call ScraperAPI for options.url. Never raises."""
    try:
        if not isinstance(options, ScrapeOptions):
            options = ScrapeOptions.model_validate(options)

        settings = get_settings()
        if not settings.scraper_api_key:
            raise AcquisitionError(
                "API key not found in environment variables. Please add SCRAPER_API_KEY to your .env file."
            )

        extra = options.to_params()
        params = {"api_key": settings.scraper_api_key, "url": options.url, **extra}
        if options.screenshot:
            params["screenshot"] = "true"

        kind = "screenshot" if options.screenshot else "content"
        print(f"[scraper] Requesting {kind} for {options.url} params={extra}")

        async with _get_http_client() as client:
            resp = await client.get(settings.scraper_api_url, params=params)
            if not resp.is_success:
                raise AcquisitionError(f"Scrape request failed: {resp.status_code} {resp.text[:300]}")

            if options.screenshot:
                return await _screenshot_result(client, resp, settings.max_content_chars)

        data = _parse_body(resp.text, settings.max_content_chars)
        print(f"[scraper] Got {len(resp.text)} chars for {options.url}")
        return ScrapeResult(success=True, data=data)

    except ValidationError as e:
        message = e.errors()[0]["msg"].removeprefix("Value error, ")
        print(f"[scraper] Invalid options: {message}")
        return ScrapeResult(success=False, error=message)
    except Exception as e:
        print(f"[scraper] Error: {type(e).__name__}: {e}")
        return ScrapeResult(success=False, error=str(e) or type(e).__name__)


async def _screenshot_result(client: httpx.AsyncClient, resp: httpx.Response, max_chars: int) -> ScrapeResult:
    shot_url = resp.headers.get("sa-screenshot")
    if shot_url:
        print(f"[scraper] Screenshot URL in headers: {shot_url}")
        image = await client.get(shot_url)
        if not image.is_success:
            raise AcquisitionError(f"Failed to fetch screenshot from {shot_url}")
        media_type = _media_type(image.headers.get("content-type"), "image/png")
        return ScrapeResult(success=True, screenshot_url=to_data_url(image.content, media_type))

    content_type = resp.headers.get("content-type", "")
    if "image" in content_type:
        print("[scraper] Response body is the screenshot")
        media_type = _media_type(content_type, "image/png")
        return ScrapeResult(success=True, screenshot_url=to_data_url(resp.content, media_type))

    print("[scraper] No screenshot in response, returning body")
    return ScrapeResult(success=True, data=_parse_body(resp.text, max_chars))


async def fetch_page_content(url: str, options: dict | None = None) -> ScrapeResult:
    return await scrape_website({**(options or {}), "url": url, "screenshot": False})


async def fetch_screenshot(url: str, options: dict | None = None) -> ScrapeResult:
    return await scrape_website({**(options or {}), "url": url, "screenshot": True})


async def check_scraper_connection() -> dict:
    """Smoke-test the API key with a trivial request."""
    try:
        settings = get_settings()
        if not settings.scraper_api_key:
            raise AcquisitionError("API key not found in environment variables")

        async with _get_http_client() as client:
            resp = await client.get(
                settings.scraper_api_url,
                params={"api_key": settings.scraper_api_key, "url": CONNECTION_TEST_URL},
            )
        if not resp.is_success:
            raise AcquisitionError(f"Test request failed: {resp.status_code} {resp.text[:300]}")

        print(f"[scraper] Connection test response: {resp.text[:200]}")
        return {
            "success": True,
            "message": "ScraperAPI integration test successful",
            "data": _parse_body(resp.text, settings.max_content_chars),
        }
    except Exception as e:
        print(f"[scraper] Connection test failed: {e}")
        return {
            "success": False,
            "message": "ScraperAPI integration test failed",
            "error": str(e) or type(e).__name__,
        }
