"""
One running preview: browser host + engine + source buffer.

Every buffer change is rendered. The FastAPI lifespan owns the single
session; tests build their own with a fake host.
"""

import asyncio

from livepreview.buffer import MemorySurface, SourceBuffer
from livepreview.capabilities import default_capabilities
from livepreview.config import get_settings
from livepreview.engine import PreviewEngine
from livepreview.examples import get_example
from livepreview.host import PreviewHost


class PreviewSession:
    def __init__(self, settings=None, host=None, capabilities=None, retry_delay=None):
        self.settings = settings or get_settings()
        self.capabilities = capabilities or default_capabilities()
        self.host = host or PreviewHost(self.settings)
        self.engine = PreviewEngine(self.host, self.capabilities, retry_delay=retry_delay)
        self.buffer = SourceBuffer(MemorySurface(get_example(self.settings.default_example)))

        self.started = False
        self._unsubscribe = None
        self._initial_render = None

    async def start(self) -> None:
        if self.started:
            return
        await self.host.start(self.capabilities)
        await self.engine.initialize()
        self._unsubscribe = self.buffer.on_change(self.engine.render)
        # First render waits on Babel; don't hold up startup for it
        self._initial_render = asyncio.create_task(self.engine.render(self.buffer.get()))
        self.started = True
        print(f"[session] Started with example '{self.settings.default_example}'")

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._initial_render is not None and not self._initial_render.done():
            self._initial_render.cancel()
            try:
                await self._initial_render
            except asyncio.CancelledError:
                pass
        self._initial_render = None
        await self.engine.shutdown()
        self.started = False
        print("[session] Stopped")

    async def wait_until_rendered(self) -> None:
        """Block until the startup render has finished."""
        if self._initial_render is not None:
            await self._initial_render

    async def load_example(self, name: str) -> bool:
        """Put a canned example in the buffer. Raises KeyError for unknown names."""
        return await self.buffer.set(get_example(name))

    def snapshot(self) -> dict:
        return {"source": self.buffer.get(), **self.engine.status()}
