"""
URL -> snippet pipeline: scrape, generate, hand the code to the source buffer.

    acquire_page()   content + screenshot, concurrently
    generate         one model call (generator.py)
    buffer.set()     the buffer's listener renders it in the preview

generate_from_url() returns the final PipelineResult; the streaming variant
emits the same steps as SSE events.
"""

import asyncio
import json
import time
from typing import AsyncIterator

from pydantic import BaseModel

from livepreview.generator import generate_component_source
from livepreview.scraper import fetch_page_content, fetch_screenshot


PAGE_OPTIONS = {"render_js": True, "ultra_premium": True, "device": "desktop"}


def sse_event(event_type: str, data: dict) -> str:
    """One Server-Sent Event line carrying `{"type": event_type, **data}`."""
    return f"data: {json.dumps({'type': event_type, **data}, default=str)}\n\n"


class AcquiredPage(BaseModel):
    success: bool
    html: str = ""
    screenshot_url: str | None = None
    error: str | None = None
    duration: float = 0.0


class PipelineResult(BaseModel):
    success: bool
    code: str | None = None
    error: str | None = None
    warnings: list[str] = []
    scrape_duration: float = 0.0
    ai_duration: float = 0.0
    total_duration: float = 0.0
    screenshot_used: bool = False


def normalize_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        url = "https://" + url
    return url


async def acquire_page(url: str) -> AcquiredPage:
    """Fetch markup and screenshot together. Only the markup is required."""
    start = time.time()
    content, shot = await asyncio.gather(
        fetch_page_content(url, PAGE_OPTIONS),
        fetch_screenshot(url, PAGE_OPTIONS),
        return_exceptions=True,
    )
    duration = time.time() - start

    if isinstance(content, BaseException):
        return AcquiredPage(success=False, error=str(content) or type(content).__name__, duration=duration)
    if not content.success:
        return AcquiredPage(success=False, error=content.error, duration=duration)

    screenshot_url = None
    if isinstance(shot, BaseException):
        print(f"[pipeline] Screenshot failed, continuing without it: {shot}")
    elif not shot.success or not shot.screenshot_url:
        print(f"[pipeline] No screenshot, continuing without it: {shot.error or 'empty response'}")
    else:
        screenshot_url = shot.screenshot_url

    data = content.data
    html = data if isinstance(data, str) else json.dumps(data)
    print(f"[pipeline] Acquired {len(html)} chars in {duration:.1f}s (screenshot: {screenshot_url is not None})")
    return AcquiredPage(success=True, html=html, screenshot_url=screenshot_url, duration=duration)


async def _run_pipeline(url: str, buffer=None) -> AsyncIterator[tuple[str, dict]]:
    """Yield (event, data) steps; the last one is always ("done", PipelineResult dump)."""
    start = time.time()
    url = normalize_url(url)

    yield "status", {"step": "scraping", "message": f"Scraping {url}..."}
    page = await acquire_page(url)
    if not page.success:
        result = PipelineResult(
            success=False,
            error=f"Scrape failed: {page.error}",
            scrape_duration=page.duration,
            total_duration=time.time() - start,
        )
        yield "error", {"message": result.error}
        yield "done", result.model_dump()
        return

    yield "scraped", {
        "chars": len(page.html),
        "screenshot": page.screenshot_url is not None,
        "duration": page.duration,
    }

    yield "status", {"step": "generating", "message": "Generating component..."}
    gen_start = time.time()
    generated = await generate_component_source(url, page.html, page.screenshot_url, start_time=gen_start)
    ai_duration = time.time() - gen_start

    if not generated.success:
        result = PipelineResult(
            success=False,
            error=f"Generation failed: {generated.error}",
            scrape_duration=page.duration,
            ai_duration=ai_duration,
            total_duration=time.time() - start,
            screenshot_used=page.screenshot_url is not None,
        )
        yield "error", {"message": result.error}
        yield "done", result.model_dump()
        return

    yield "generated", {"code": generated.code, "warnings": generated.warnings, "duration": ai_duration}

    if buffer is not None:
        yield "status", {"step": "rendering", "message": "Loading code into the preview..."}
        await buffer.set(generated.code)

    result = PipelineResult(
        success=True,
        code=generated.code,
        warnings=generated.warnings,
        scrape_duration=page.duration,
        ai_duration=ai_duration,
        total_duration=time.time() - start,
        screenshot_used=page.screenshot_url is not None,
    )
    print(
        f"[pipeline] Done in {result.total_duration:.1f}s "
        f"(scrape {result.scrape_duration:.1f}s, ai {result.ai_duration:.1f}s)"
    )
    yield "done", result.model_dump()


async def generate_from_url(url: str, buffer=None) -> PipelineResult:
    final = None
    async for event, data in _run_pipeline(url, buffer):
        if event == "done":
            final = data
    return PipelineResult(**final)


async def generate_from_url_streaming(url: str, buffer=None) -> AsyncIterator[str]:
    try:
        async for event, data in _run_pipeline(url, buffer):
            yield sse_event(event, data)
    except Exception as e:
        print(f"[pipeline] Stream failed: {type(e).__name__}: {e}")
        yield sse_event("error", {"message": str(e)})
        yield sse_event("done", {"success": False, "error": str(e)})
