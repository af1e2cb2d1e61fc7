"""
Pytest configuration and fixtures for the live preview backend.
"""

from __future__ import annotations

import inspect
import os

import pytest
import pytest_asyncio

# Set test environment variables before anything reads settings
os.environ.setdefault("SCRAPER_API_KEY", "test-scraper-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")
os.environ.setdefault("GENERATION_PROVIDER", "gemini")

from livepreview.engine import PreviewEngine  # noqa: E402


async def _resolve(value, *args):
    if callable(value):
        value = value(*args)
    if inspect.isawaitable(value):
        value = await value
    return value


class FakeHost:
    """
    In-process stand-in for PreviewHost.

    transform() echoes the text it was given as the compiled code unless
    `transform_result` says otherwise; `instantiate_result` and `mount_result`
    program the later stages. Each of the three may be a dict or a (possibly
    async) callable taking the text/code.
    """

    def __init__(self, ready_after: int = 0):
        self.ready = True
        self.ready_after = ready_after
        self.ready_checks = 0

        self.transform_result = None
        self.instantiate_result = {"ok": True}
        self.mount_result = {"ok": True, "html": "<button>Hi</button>"}
        self.show_error_raises = None

        self.started = False
        self.stopped = False
        self.capabilities = None
        self.create_root_calls = 0
        self.root_created = False

        self.transformed: list[str] = []
        self.instantiated: list[str] = []
        self.mounted: list[str] = []
        self.panels: list[tuple[str, str]] = []
        self.html = ""
        self._pending = None

    async def start(self, capabilities) -> None:
        self.started = True
        self.capabilities = capabilities

    async def stop(self) -> None:
        self.stopped = True

    async def create_root(self) -> bool:
        self.create_root_calls += 1
        if self.root_created:
            return False
        self.root_created = True
        return True

    async def compiler_ready(self) -> bool:
        self.ready_checks += 1
        return self.ready and self.ready_checks > self.ready_after

    async def transform(self, text: str) -> dict:
        self.transformed.append(text)
        if self.transform_result is None:
            return {"ok": True, "code": text}
        return await _resolve(self.transform_result, text)

    async def instantiate(self, code: str) -> dict:
        self.instantiated.append(code)
        result = await _resolve(self.instantiate_result, code)
        self._pending = code if result.get("ok") else None
        return result

    async def mount(self) -> dict:
        code, self._pending = self._pending, None
        result = await _resolve(self.mount_result, code)
        if result.get("ok"):
            self.mounted.append(code)
            self.html = result.get("html", "")
        return result

    async def show_error(self, stage: str, message: str) -> bool:
        if self.show_error_raises is not None:
            raise self.show_error_raises
        self.panels.append((stage, message))
        self.html = f'<div role="alert" data-preview-error="{stage}">{message}</div>'
        return True

    async def mounted_html(self) -> str:
        return self.html

    async def screenshot(self) -> bytes:
        return b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest_asyncio.fixture
async def engine(fake_host):
    """Initialized engine over a fake host, no polling delay."""
    engine = PreviewEngine(fake_host, retry_delay=0)
    await engine.initialize()
    return engine
