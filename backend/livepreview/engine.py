"""
Dynamic preview engine.

render(source) runs three stages against the host page:

    compile      snippet -> executable text (Babel, behind the compile seam)
    instantiate  evaluate that text with the capability bundle as arguments
    render       mount the resulting element into the one React root

Every stage boundary is a catch boundary. A failure becomes an ErrorState plus
the inline error panel in the mount node; nothing raised by user code reaches
the caller.

Calls may overlap (each stage awaits the page), so every call takes a version
number and any result that belongs to a superseded version is dropped.
Instantiate + mount run under one lock so two calls never interleave on the
mount node.
"""

import asyncio

from livepreview.capabilities import default_capabilities
from livepreview.compiler import BabelCompiler
from livepreview.config import get_settings
from livepreview.diagnostics import is_reference_error, runtime_message
from livepreview.errors import (
    CompileError,
    DependencyNotReadyError,
    EngineNotInitializedError,
    ErrorState,
    InstantiateError,
    PreviewError,
    RenderError,
)


class PreviewEngine:
    def __init__(self, host, capabilities=None, compiler=None, retry_delay: float | None = None):
        self.host = host
        self.capabilities = capabilities or default_capabilities()
        self.compiler = compiler or BabelCompiler(host)
        self.retry_delay = get_settings().compiler_retry_delay if retry_delay is None else retry_delay

        self.error: ErrorState | None = None
        self.source: str | None = None  # last requested
        self.last_rendered_source: str | None = None  # last successfully mounted
        self.renders = 0

        self._initialized = False
        self._version = 0
        self._mount_lock = asyncio.Lock()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, *exc):
        await self.shutdown()

    async def initialize(self) -> None:
        """Create the mount root. Call once the host page exists."""
        if self._initialized:
            print("[preview] Already initialized, keeping the existing root")
            return
        created = await self.host.create_root()
        if not created:
            print("[preview] Host already had a root, reusing it")
        self._initialized = True
        print("[preview] Mount root ready")

    async def shutdown(self) -> None:
        self._initialized = False
        self._version += 1  # anything still in flight is now superseded
        await self.host.stop()

    # ── Public operations ───────────────────────────────────────────────────

    async def render(self, source: str) -> None:
        """Compile, instantiate and mount `source`. Errors end up in self.error."""
        self._require_initialized("render")
        version = self._next_version()
        self.source = source
        await self._run(version, source)

    async def refresh(self) -> None:
        """Re-run the pipeline for the last requested source."""
        self._require_initialized("refresh")
        if self.source is None:
            print("[preview] Nothing to refresh yet")
            return
        version = self._next_version()
        if self.source == self.last_rendered_source:
            print("[preview] Refresh: source unchanged, re-running")
        else:
            print("[preview] Refresh: retrying source that has not rendered yet")
        await self._run(version, self.source)

    def status(self) -> dict:
        return {
            "initialized": self._initialized,
            "version": self._version,
            "source": self.source,
            "last_rendered_source": self.last_rendered_source,
            "error": self.error.to_dict() if self.error else None,
            "renders": self.renders,
        }

    async def mounted_html(self) -> str:
        self._require_initialized("mounted_html")
        return await self.host.mounted_html()

    async def screenshot(self) -> bytes:
        self._require_initialized("screenshot")
        return await self.host.screenshot()

    # ── Stages ──────────────────────────────────────────────────────────────

    async def _run(self, version: int, source: str) -> None:
        artifact = await self._compile(version, source)
        if artifact is None:
            return

        async with self._mount_lock:
            if self._superseded(version):
                return

            try:
                outcome = await self.host.instantiate(artifact.code)
            except Exception as e:
                await self._fail(version, InstantiateError(f"{type(e).__name__}: {e}"))
                return
            if not outcome.get("ok"):
                await self._fail(version, InstantiateError(runtime_message(outcome.get("error"))))
                return

            if self._superseded(version):
                return

            try:
                mounted = await self.host.mount()
            except Exception as e:
                await self._fail(version, RenderError(f"{type(e).__name__}: {e}"))
                return
            if not mounted.get("ok"):
                error = mounted.get("error")
                # Component bodies run lazily inside React, so an unknown identifier
                # surfaces here; it is still an instantiate-class failure.
                kind = InstantiateError if is_reference_error(error) else RenderError
                await self._fail(version, kind(runtime_message(error)))
                return

            self.last_rendered_source = source
            self.renders += 1

    async def _compile(self, version: int, source: str):
        waiting = False
        while True:
            if self._superseded(version):
                return None

            self.error = None
            try:
                return await self.compiler.compile(source, self.capabilities)
            except DependencyNotReadyError as e:
                if not waiting:
                    print(f"[preview] {e}, polling every {self.retry_delay}s")
                    waiting = True
                await asyncio.sleep(self.retry_delay)
            except CompileError as e:
                async with self._mount_lock:
                    await self._fail(version, e)
                return None
            except Exception as e:
                async with self._mount_lock:
                    await self._fail(version, CompileError(f"{type(e).__name__}: {e}"))
                return None

    async def _fail(self, version: int, error: PreviewError) -> None:
        """Record `error` and show the panel. Caller holds the mount lock."""
        if self._superseded(version):
            print(f"[preview] Dropping {error.stage} error from a superseded render")
            return

        self.error = error.to_state()
        print(f"[preview:{error.stage}] {error.message}")
        try:
            await self.host.show_error(error.stage, error.message)
        except Exception as e:
            print(f"[preview] Could not show the error panel: {e}")

    # ── Helpers ─────────────────────────────────────────────────────────────

    def _next_version(self) -> int:
        self._version += 1
        return self._version

    def _superseded(self, version: int) -> bool:
        return version != self._version

    def _require_initialized(self, operation: str) -> None:
        if not self._initialized:
            raise EngineNotInitializedError(f"PreviewEngine.{operation}() called before initialize()")
