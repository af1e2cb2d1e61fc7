"""
Headless Chromium host for the preview.

One browser, one page, one mount node for the lifetime of the host. The
page is the display surface the engine renders into; everything else in the
backend talks to it only through the PreviewHost methods below.
"""

from playwright.async_api import async_playwright

from livepreview.config import get_settings
from livepreview.runtime import MOUNT_ID, build_host_document


class HostNotStartedError(RuntimeError):
    pass


class PreviewHost:
    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self._playwright = None
        self._browser = None
        self.page = None

    @property
    def started(self) -> bool:
        return self.page is not None

    async def start(self, capabilities) -> None:
        """Launch Chromium, load the host document and install capabilities."""
        if self.started:
            print("[host] Already started, skipping")
            return

        settings = self.settings
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=settings.headless)
            page = await self._browser.new_page(
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
            )
            page.on("console", _log_console)
            page.on("pageerror", lambda err: print(f"[host] Page error: {err}"))

            # React, ReactDOM and lucide-react are blocking scripts, ready at DOMContentLoaded
            await page.set_content(build_host_document(settings), wait_until="domcontentloaded")

            installed = await page.evaluate(
                "(payload) => window.__preview.install(payload)",
                capabilities.to_payload(),
            )
            if tuple(installed) != capabilities.names:
                raise RuntimeError(
                    f"Host installed {len(installed)} components, expected {len(capabilities.names)}"
                )

            # Babel and tailwind-merge load in the background; render() polls compiler_ready()
            await page.evaluate("(src) => window.__preview.loadCompiler(src)", settings.babel_url)
        except Exception:
            await self.stop()
            raise

        self.page = page
        print(f"[host] Preview page ready ({len(installed)} components installed)")

    async def stop(self) -> None:
        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                print(f"[host] Browser close failed: {e}")
        if self._playwright is not None:
            await self._playwright.stop()
        self._browser = None
        self._playwright = None
        self.page = None

    def _require_page(self):
        if self.page is None:
            raise HostNotStartedError("PreviewHost.start() has not completed")
        return self.page

    # ── Runtime bridge ──────────────────────────────────────────────────────

    async def create_root(self) -> bool:
        """Create the React root. False if it already existed."""
        return await self._require_page().evaluate("() => window.__preview.createRoot()")

    async def compiler_ready(self) -> bool:
        return await self._require_page().evaluate("() => window.__preview.compilerReady()")

    async def transform(self, text: str) -> dict:
        return await self._require_page().evaluate("(text) => window.__preview.transform(text)", text)

    async def instantiate(self, code: str) -> dict:
        return await self._require_page().evaluate("(code) => window.__preview.instantiate(code)", code)

    async def mount(self) -> dict:
        return await self._require_page().evaluate("() => window.__preview.mount()")

    async def show_error(self, stage: str, message: str) -> bool:
        return await self._require_page().evaluate(
            "([stage, message]) => window.__preview.showError(stage, message)",
            [stage, message],
        )

    async def mounted_html(self) -> str:
        return await self._require_page().evaluate("() => window.__preview.html()")

    async def screenshot(self) -> bytes:
        """PNG of the mount node."""
        return await self._require_page().locator(f"#{MOUNT_ID}").screenshot(type="png")


def _log_console(msg) -> None:
    if msg.type in ("error", "warning"):
        print(f"[host] console.{msg.type}: {msg.text}")
