"""Tests for the model call that turns scraped markup into a snippet."""

from __future__ import annotations

import base64
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.genai import types

from livepreview.config import Settings
from livepreview.generator import build_prompt, generate_component_source, strip_code_block_markers

SNIPPET = """function Preview() {
  return <Button>Hello</Button>;
}"""

DATA_URL = "data:image/png;base64," + base64.b64encode(b"png-bytes").decode()


def _settings(**overrides) -> Settings:
    values = {"gemini_api_key": "g-key", "anthropic_api_key": "a-key", "prompt_html_chars": 20}
    values.update(overrides)
    return Settings(**values)


def _gemini(text: str = f"```tsx\n{SNIPPET}\n```"):
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text=text))
    return client


def _claude(text: str = SNIPPET):
    client = MagicMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])
    )
    return client


# ---------------------------------------------------------------------------
# Prompt + fence stripping
# ---------------------------------------------------------------------------

def test_strip_fenced_block():
    assert strip_code_block_markers(f"```tsx\n{SNIPPET}\n```") == SNIPPET
    assert strip_code_block_markers(f"```\n{SNIPPET}```") == SNIPPET


def test_strip_takes_code_from_surrounding_prose():
    text = f"Here is your component:\n\n```jsx\n{SNIPPET}\n```\n\nEnjoy!"

    assert strip_code_block_markers(text) == SNIPPET


def test_strip_plain_text_untouched():
    assert strip_code_block_markers(f"  {SNIPPET}\n") == SNIPPET
    assert strip_code_block_markers("") == ""


def test_strip_unterminated_fence():
    assert strip_code_block_markers(f"```tsx\n{SNIPPET}") == SNIPPET


def test_build_prompt_contents():
    with patch("livepreview.generator.get_settings", return_value=_settings()):
        prompt = build_prompt("https://example.com", "<html><body>" + "x" * 100)

    assert "https://example.com" in prompt
    assert "<html><body>" + "x" * 8 + "\n```" in prompt
    assert "function Preview()" in prompt
    assert "Button, " in prompt or "Button," in prompt
    assert "useState" in prompt
    assert "LucideIcons.Name" in prompt
    assert "No import or export statements" in prompt


# ---------------------------------------------------------------------------
# generate_component_source
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_gemini_text_only():
    client = _gemini()
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=client):
        result = await generate_component_source("https://example.com", "<html></html>")

    assert result.success is True
    assert result.code == SNIPPET
    assert result.warnings == []
    assert result.processing_time >= 0
    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.0-flash"
    assert len(kwargs["contents"]) == 1
    assert isinstance(kwargs["contents"][0], str)


@pytest.mark.asyncio
async def test_gemini_multimodal_with_data_url():
    client = _gemini()
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=client):
        result = await generate_component_source("https://example.com", "<html></html>", DATA_URL)

    assert result.success is True
    contents = client.aio.models.generate_content.call_args.kwargs["contents"]
    assert len(contents) == 2
    assert isinstance(contents[0], types.Part)
    assert contents[0].inline_data.mime_type == "image/png"


@pytest.mark.asyncio
async def test_bad_screenshot_falls_back_to_text_only():
    client = _gemini()
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=client):
        result = await generate_component_source("https://example.com", "<p/>", "data:image/png,not-base64")

    assert result.success is True
    assert len(client.aio.models.generate_content.call_args.kwargs["contents"]) == 1


@pytest.mark.asyncio
async def test_claude_provider_sends_image_block():
    client = _claude()
    with patch("livepreview.generator.get_settings", return_value=_settings(generation_provider="anthropic")), \
         patch("livepreview.generator._get_anthropic_client", return_value=client):
        result = await generate_component_source("https://example.com", "<p/>", DATA_URL)

    assert result.success is True
    assert result.code == SNIPPET
    kwargs = client.messages.create.call_args.kwargs
    content = kwargs["messages"][0]["content"]
    assert content[0]["type"] == "image"
    assert content[0]["source"]["media_type"] == "image/png"
    assert content[1]["type"] == "text"


@pytest.mark.asyncio
async def test_lint_findings_become_warnings():
    code = "import { Button } from '@/components/ui/button';\n" + SNIPPET
    client = _gemini(text=code)
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=client):
        result = await generate_component_source("https://example.com", "<p/>")

    assert result.success is True
    assert result.code == code
    assert any(w.startswith("[import_statement]") for w in result.warnings)


@pytest.mark.asyncio
async def test_model_failure_is_reported():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("quota exceeded"))
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=client):
        result = await generate_component_source("https://example.com", "<p/>")

    assert result.success is False
    assert result.error == "quota exceeded"
    assert result.code is None


@pytest.mark.asyncio
async def test_empty_response_is_a_failure():
    with patch("livepreview.generator.get_settings", return_value=_settings()), \
         patch("livepreview.generator._get_gemini_client", return_value=_gemini(text="```\n```")):
        result = await generate_component_source("https://example.com", "<p/>")

    assert result.success is False
    assert "empty" in result.error


@pytest.mark.asyncio
async def test_missing_key_is_reported():
    with patch("livepreview.generator.get_settings", return_value=_settings(gemini_api_key="")):
        result = await generate_component_source("https://example.com", "<p/>")

    assert result.success is False
    assert "GEMINI_API_KEY" in result.error


@pytest.mark.asyncio
async def test_unknown_provider():
    with patch("livepreview.generator.get_settings", return_value=_settings(generation_provider="llama")):
        result = await generate_component_source("https://example.com", "<p/>")

    assert result.success is False
    assert "Unknown generation provider" in result.error
