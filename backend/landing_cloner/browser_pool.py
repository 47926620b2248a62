"""
Shared headless Chromium for all clone requests.

One browser process is started lazily on first use and kept alive across
requests. Each request gets its own browser context (cookies and storage are
not shared) which is always closed when the request is done, and a semaphore
bounds how many pages are open at once.
"""
import asyncio
from contextlib import asynccontextmanager

from playwright.async_api import async_playwright, Browser, Page, Playwright
from playwright_stealth import Stealth

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

_stealth = Stealth()


class BrowserPool:
    def __init__(self, max_concurrent: int = 3, viewport_width: int = 1920,
                 viewport_height: int = 1080, headless: bool = True):
        self.max_concurrent = max_concurrent
        self.viewport = {"width": viewport_width, "height": viewport_height}
        self.headless = headless
        self.lock = asyncio.Lock()
        self._slots = asyncio.Semaphore(max_concurrent)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._active = 0

    @classmethod
    def from_settings(cls, settings) -> "BrowserPool":
        return cls(
            max_concurrent=settings.max_concurrent_scrapes,
            viewport_width=settings.viewport_width,
            viewport_height=settings.viewport_height,
        )

    async def _get_browser(self) -> Browser:
        """Launch Chromium on first use; relaunch if the process died."""
        async with self.lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser
            if self._playwright is None:
                self._playwright = await async_playwright().start()
            print("[browser-pool] Launching headless Chromium...")
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            return self._browser

    @asynccontextmanager
    async def page(self):
        """
        Scoped page in a fresh, isolated browser context.
        Waits for a free slot when max_concurrent pages are already open.
        The context is closed on exit, including on errors and cancellation.
        """
        async with self._slots:
            browser = await self._get_browser()
            context = await browser.new_context(
                viewport=self.viewport,
                user_agent=USER_AGENT,
            )
            self._active += 1
            try:
                page: Page = await context.new_page()
                await _stealth.apply_stealth_async(page)
                yield page
            finally:
                self._active -= 1
                try:
                    await context.close()
                except Exception as e:
                    print(f"[browser-pool] Context close failed: {e}")

    async def shutdown(self):
        """Close the browser process. Safe to call more than once."""
        async with self.lock:
            if self._browser is not None:
                try:
                    await self._browser.close()
                except Exception as e:
                    print(f"[browser-pool] Browser close failed: {e}")
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        print("[browser-pool] Shut down")

    @property
    def active(self) -> int:
        return self._active
