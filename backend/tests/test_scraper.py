from contextlib import asynccontextmanager

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from conftest import make_png
from landing_cloner.errors import AcquisitionError, NavigationError
from landing_cloner.scraper import META_JS, STYLE_SAMPLE_JS, _build_styles, scrape_website

HTML = """
<html><head><title>Acme</title></head><body>
<header><nav><a href="/docs">Docs</a></nav></header>
<section><h1>Welcome to Acme</h1><p>Build faster.</p><a href="/start">Start</a><img src="/hero.png"></section>
</body></html>
"""

RAW_STYLES = {
    "primary": "rgb(225, 29, 72)",
    "accent": "rgb(37, 99, 235)",
    "background": "rgb(255, 255, 255)",
    "foreground": "rgb(17, 24, 39)",
    "muted": None,
    "border": "rgba(0, 0, 0, 0)",
    "font_family": "Roboto",
    "heading_family": "Poppins",
    "h1": "56px",
    "h2": "2.5rem",
    "h3": "28px",
    "body": "16px",
    "radius": "12px",
}


class FakePage:
    def __init__(self, goto_errors=(), screenshot=None, style_error=None):
        self.goto_errors = list(goto_errors)
        self.goto_calls = []
        self._screenshot = make_png() if screenshot is None else screenshot
        self.style_error = style_error

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append(wait_until)
        if self.goto_errors:
            raise self.goto_errors.pop(0)

    async def wait_for_timeout(self, ms):
        pass

    async def evaluate(self, script):
        if script == STYLE_SAMPLE_JS:
            if self.style_error:
                raise self.style_error
            return RAW_STYLES
        if script == META_JS:
            return "  The Acme platform.  "
        if "scrollHeight" in script:
            return 2400
        return None

    async def screenshot(self, full_page=False, type="png"):
        return self._screenshot

    async def content(self):
        return HTML

    async def title(self):
        return " Acme "


class FakePool:
    def __init__(self, page):
        self._page = page
        self.released = 0

    @asynccontextmanager
    async def page(self):
        try:
            yield self._page
        finally:
            self.released += 1


def test_build_styles_normalizes_computed_values():
    styles = _build_styles(RAW_STYLES)

    assert styles.colors.primary == "#e11d48"
    assert styles.colors.accent == "#2563eb"
    assert styles.colors.foreground == "#111827"
    assert styles.colors.muted == "#6b7280"
    assert styles.colors.border == "#e5e7eb"
    assert styles.typography.font_family == "Roboto"
    assert styles.typography.heading_family == "Poppins"
    assert styles.typography.sizes.h1 == "56px"
    assert styles.typography.sizes.h2 == "36px"
    assert styles.borders.radius == "12px"


def test_build_styles_defaults_for_empty_sample():
    styles = _build_styles({})
    assert styles.colors.primary == "#3b82f6"
    assert styles.colors.background == "#ffffff"
    assert styles.typography.font_family == "Inter"
    assert styles.borders.radius == "8px"


def test_build_styles_uses_link_color_without_button():
    styles = _build_styles({"accent": "#00ff00"})
    assert styles.colors.primary == "#00ff00"


async def test_scrape_website(settings):
    page = FakePage()
    pool = FakePool(page)

    scraped = await scrape_website("https://acme.test", pool, settings)

    assert scraped.html == HTML
    assert len(scraped.screenshot) > 0
    assert scraped.title == "Acme"
    assert scraped.description == "The Acme platform."
    assert scraped.styles.colors.primary == "#e11d48"
    assert scraped.content.hero.title == "Welcome to Acme"
    assert scraped.content.header.nav_items[0].href == "https://acme.test/docs"
    assert scraped.assets.images[0].src == "https://acme.test/hero.png"
    assert page.goto_calls == ["networkidle"]
    assert pool.released == 1


async def test_networkidle_timeout_retries_with_domcontentloaded(settings):
    page = FakePage(goto_errors=[PlaywrightTimeoutError("Timeout 30000ms exceeded")])

    scraped = await scrape_website("https://acme.test", FakePool(page), settings)

    assert page.goto_calls == ["networkidle", "domcontentloaded"]
    assert scraped.content.hero.title == "Welcome to Acme"


async def test_unreachable_host_raises_navigation_error(settings):
    page = FakePage(goto_errors=[PlaywrightError("net::ERR_NAME_NOT_RESOLVED")])
    pool = FakePool(page)

    with pytest.raises(NavigationError) as exc:
        await scrape_website("https://nope.invalid", pool, settings)

    assert exc.value.url == "https://nope.invalid"
    assert pool.released == 1


async def test_second_timeout_raises_navigation_error(settings):
    page = FakePage(goto_errors=[
        PlaywrightTimeoutError("Timeout 30000ms exceeded"),
        PlaywrightTimeoutError("Timeout 10000ms exceeded"),
    ])
    with pytest.raises(NavigationError):
        await scrape_website("https://slow.test", FakePool(page), settings)


async def test_style_sampling_failure_uses_defaults(settings):
    page = FakePage(style_error=PlaywrightError("Execution context was destroyed"))
    scraped = await scrape_website("https://acme.test", FakePool(page), settings)
    assert scraped.styles.colors.primary == "#3b82f6"


async def test_empty_screenshot_is_an_acquisition_error(settings):
    page = FakePage(screenshot=b"")
    with pytest.raises(AcquisitionError):
        await scrape_website("https://acme.test", FakePool(page), settings)
