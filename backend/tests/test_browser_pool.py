import asyncio

import pytest

from landing_cloner import browser_pool
from landing_cloner.browser_pool import BrowserPool


class FakeContext:
    def __init__(self, fail_close=False):
        self.closed = False
        self.fail_close = fail_close

    async def new_page(self):
        return object()

    async def close(self):
        self.closed = True
        if self.fail_close:
            raise RuntimeError("Target closed")


class FakeBrowser:
    def __init__(self, connected=True, fail_close=False):
        self.connected = connected
        self.contexts = []
        self.close_calls = 0
        self.fail_close = fail_close

    def is_connected(self):
        return self.connected

    async def new_context(self, **kwargs):
        context = FakeContext(fail_close=self.fail_close)
        self.contexts.append(context)
        return context

    async def close(self):
        self.close_calls += 1


class FakeChromium:
    def __init__(self):
        self.launched = []

    async def launch(self, **kwargs):
        browser = FakeBrowser()
        self.launched.append(browser)
        return browser


class FakePlaywright:
    def __init__(self):
        self.chromium = FakeChromium()
        self.stop_calls = 0

    async def stop(self):
        self.stop_calls += 1


class FakeStealth:
    async def apply_stealth_async(self, page):
        pass


@pytest.fixture(autouse=True)
def no_stealth(monkeypatch):
    monkeypatch.setattr(browser_pool, "_stealth", FakeStealth())


def pool_with(browser, max_concurrent=3) -> BrowserPool:
    pool = BrowserPool(max_concurrent=max_concurrent)
    pool._browser = browser
    return pool


async def test_context_closed_after_normal_use():
    browser = FakeBrowser()
    pool = pool_with(browser)

    async with pool.page() as page:
        assert page is not None
        assert pool.active == 1

    assert browser.contexts[0].closed
    assert pool.active == 0


async def test_context_closed_when_body_raises():
    browser = FakeBrowser()
    pool = pool_with(browser)

    with pytest.raises(RuntimeError):
        async with pool.page():
            raise RuntimeError("page crashed")

    assert browser.contexts[0].closed
    assert pool.active == 0


async def test_context_closed_when_task_cancelled():
    browser = FakeBrowser()
    pool = pool_with(browser)
    entered = asyncio.Event()

    async def hold_page():
        async with pool.page():
            entered.set()
            await asyncio.Event().wait()

    task = asyncio.create_task(hold_page())
    await entered.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert browser.contexts[0].closed
    assert pool.active == 0


async def test_close_failure_does_not_mask_result():
    pool = pool_with(FakeBrowser(fail_close=True))
    async with pool.page():
        pass
    assert pool.active == 0


async def test_semaphore_bounds_open_pages():
    browser = FakeBrowser()
    pool = pool_with(browser, max_concurrent=2)
    release = asyncio.Event()
    peak = 0

    async def use_page():
        nonlocal peak
        async with pool.page():
            peak = max(peak, pool.active)
            await release.wait()

    tasks = [asyncio.create_task(use_page()) for _ in range(5)]
    for _ in range(10):
        await asyncio.sleep(0)

    assert pool.active == 2
    assert len(browser.contexts) == 2

    release.set()
    await asyncio.gather(*tasks)

    assert peak == 2
    assert len(browser.contexts) == 5
    assert all(c.closed for c in browser.contexts)
    assert pool.active == 0


async def test_disconnected_browser_is_relaunched():
    pool = pool_with(FakeBrowser(connected=False))
    pool._playwright = FakePlaywright()

    async with pool.page():
        pass

    assert len(pool._playwright.chromium.launched) == 1
    assert pool._browser is pool._playwright.chromium.launched[0]


async def test_shutdown_is_idempotent():
    browser = FakeBrowser()
    playwright = FakePlaywright()
    pool = pool_with(browser)
    pool._playwright = playwright

    await pool.shutdown()
    await pool.shutdown()

    assert browser.close_calls == 1
    assert playwright.stop_calls == 1
    assert pool._browser is None


async def test_shutdown_before_first_use():
    pool = BrowserPool()
    await pool.shutdown()
    assert pool.active == 0


def test_from_settings(settings):
    pool = BrowserPool.from_settings(settings.model_copy(update={"max_concurrent_scrapes": 5}))
    assert pool.max_concurrent == 5
    assert pool.viewport == {"width": settings.viewport_width, "height": settings.viewport_height}
