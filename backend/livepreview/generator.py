"""
Turn scraped markup (+ optional screenshot) into a preview snippet.

One model call, no agent loop. Gemini through google-genai by default,
Claude through anthropic when GENERATION_PROVIDER=anthropic. The output is
not compiled here; snippet_validator findings are attached as warnings and
the preview engine is the real check.
"""

import asyncio
import base64
import re
import time

import anthropic
import httpx
from google import genai
from google.genai import types
from pydantic import BaseModel

from livepreview.capabilities import default_capabilities
from livepreview.config import get_settings
from livepreview.harness import ENTRY_POINT
from livepreview.image_utils import decode_data_url
from livepreview.snippet_validator import validate_snippet


PROMPT_TEMPLATE = """You are a web developer converting a scraped website into a React component built from shadcn/ui-style components.

The website to convert is: {url}

Here is the HTML content of the page:
```html
{html}
```

Write a single React component that:
1. Is declared as `function {entry}() {{ ... }}` and returns JSX
2. Uses only these components (already in scope, do not import them): {components}
3. May use these React hooks (already in scope): {hooks}
4. May use any lucide-react icon as `LucideIcons.Name` (for example {icons})
5. May use `cn(...classes)` to merge class names and `mockData` ({mock_keys}) for placeholder content
6. Recreates the main content, layout and functionality as a clean, modern page
7. Includes the page's text content, styled with Tailwind CSS classes

Rules:
- No import or export statements, no "use client" directive
- Everything lives in the one snippet; helper components are fine if {entry} renders them
- TypeScript annotations are allowed

Return ONLY the code, no explanations."""


class GenerationResult(BaseModel):
    success: bool
    code: str | None = None
    error: str | None = None
    processing_time: float = 0.0
    warnings: list[str] = []


def build_prompt(url: str, html: str, capabilities=None) -> str:
    capabilities = capabilities or default_capabilities()
    settings = get_settings()
    return PROMPT_TEMPLATE.format(
        url=url,
        html=(html or "")[:settings.prompt_html_chars],
        entry=ENTRY_POINT,
        components=", ".join(capabilities.names),
        hooks=", ".join(capabilities.hooks),
        icons=", ".join(capabilities.icon_names),
        mock_keys=", ".join(capabilities.mock_data.keys()),
    )


_FENCE = re.compile(r"```[\w+-]*[ \t]*\n(.*?)\n?```", re.S)


def strip_code_block_markers(text: str) -> str:
    """Return the code inside the first ``` fence, or the text with stray fences trimmed."""
    if not text:
        return ""
    m = _FENCE.search(text)
    if m:
        return m.group(1).strip()
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _get_gemini_client():
    api_key = get_settings().gemini_api_key
    if not api_key:
        raise RuntimeError("GEMINI_API_KEY not configured")
    return genai.Client(api_key=api_key)


def _get_anthropic_client():
    api_key = get_settings().anthropic_api_key
    if not api_key:
        raise RuntimeError("ANTHROPIC_API_KEY not configured")
    return anthropic.AsyncAnthropic(api_key=api_key)


async def _load_image(screenshot_url: str) -> tuple[bytes, str]:
    if screenshot_url.startswith("data:"):
        return decode_data_url(screenshot_url)
    async with httpx.AsyncClient(timeout=30, follow_redirects=True) as client:
        resp = await client.get(screenshot_url)
        resp.raise_for_status()
    mime = resp.headers.get("content-type", "image/png").split(";", 1)[0].strip()
    return resp.content, mime


async def _generate_with_gemini(prompt: str, image: tuple[bytes, str] | None) -> str:
    settings = get_settings()
    client = _get_gemini_client()
    contents = [prompt]
    if image:
        data, mime = image
        contents = [types.Part.from_bytes(data=data, mime_type=mime), prompt]

    response = await client.aio.models.generate_content(
        model=settings.gemini_model,
        contents=contents,
        config=types.GenerateContentConfig(temperature=0.2),
    )
    return response.text or ""


async def _generate_with_claude(prompt: str, image: tuple[bytes, str] | None) -> str:
    settings = get_settings()
    client = _get_anthropic_client()
    content = [{"type": "text", "text": prompt}]
    if image:
        data, mime = image
        content.insert(0, {
            "type": "image",
            "source": {"type": "base64", "media_type": mime, "data": base64.b64encode(data).decode()},
        })

    response = await client.messages.create(
        model=settings.claude_model,
        max_tokens=8192,
        messages=[{"role": "user", "content": content}],
    )
    return "".join(block.text for block in response.content if block.type == "text")


async def generate_component_source(
    url: str,
    html: str,
    screenshot_url: str | None = None,
    start_time: float | None = None,
) -> GenerationResult:
    """Ask the configured model for a snippet. Never raises."""
    start = start_time if start_time is not None else time.time()
    settings = get_settings()
    provider = settings.generation_provider

    try:
        prompt = build_prompt(url, html)

        image = None
        if screenshot_url:
            try:
                image = await _load_image(screenshot_url)
                print(f"[generate] Multimodal request ({image[1]}, {len(image[0])} bytes)")
            except Exception as e:
                print(f"[generate] Screenshot unusable, text-only request: {e}")
        else:
            print("[generate] Text-only request")

        if provider == "anthropic":
            call = _generate_with_claude(prompt, image)
        elif provider == "gemini":
            call = _generate_with_gemini(prompt, image)
        else:
            raise ValueError(f"Unknown generation provider: {provider}")

        text = await asyncio.wait_for(call, timeout=settings.generation_timeout)
        code = strip_code_block_markers(text)
        if not code:
            raise RuntimeError("Model returned an empty response")

        validation = validate_snippet(code)
        warnings = [
            f"[{item['type']}] {item['message']}"
            for item in validation["errors"] + validation["warnings"]
        ]
        elapsed = time.time() - start
        print(f"[generate] {provider} returned {len(code)} chars in {elapsed:.1f}s, {len(warnings)} lint findings")
        return GenerationResult(success=True, code=code, processing_time=elapsed, warnings=warnings)

    except asyncio.TimeoutError:
        message = f"Generation timed out after {settings.generation_timeout}s"
        print(f"[generate] {message}")
        return GenerationResult(success=False, error=message, processing_time=time.time() - start)
    except Exception as e:
        print(f"[generate] {provider} failed: {type(e).__name__}: {e}")
        return GenerationResult(
            success=False,
            error=str(e) or type(e).__name__,
            processing_time=time.time() - start,
        )
