"""
Page acquisition: load a URL in the shared headless browser and capture a
full-page screenshot, the rendered HTML, title/description, and a small sample
of computed styles. Content and asset extraction run over the captured HTML
after the browser context has been released.
"""

import re

from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from landing_cloner.asset_extractor import extract_assets
from landing_cloner.browser_pool import BrowserPool
from landing_cloner.config import get_settings
from landing_cloner.content_extractor import extract_content
from landing_cloner.errors import AcquisitionError, NavigationError
from landing_cloner.models import (
    Borders, ColorRoles, ExtractedStyles, ScrapedWebsite, Typography, TypographySizes,
)

_PX_RE = re.compile(r"^\d+(?:\.\d+)?px$")

# Reads computed styles off a representative button/link and the body.
# Returns raw CSS strings; normalization happens in _build_styles().
STYLE_SAMPLE_JS = r'''() => {
    const visible = el => el && el.offsetWidth > 0 && el.offsetHeight > 0;
    const opaque = c => c && c !== 'transparent' && !/rgba\([^)]*,\s*0\)$/.test(c);
    const firstFamily = f => f ? f.split(',')[0].replace(/['"]/g, '').trim() : null;
    const styleOf = sel => {
        const el = document.querySelector(sel);
        return el ? getComputedStyle(el) : null;
    };

    // Primary: first visible button-like element with a painted background
    let primary = null, radius = null;
    const buttons = [...document.querySelectorAll(
        'button, .btn, [class*="primary"], a[class*="btn"], a[class*="button"], [role="button"]'
    )].slice(0, 40);
    for (const el of buttons) {
        if (!visible(el)) continue;
        const s = getComputedStyle(el);
        if (opaque(s.backgroundColor)) {
            primary = s.backgroundColor;
            radius = s.borderTopLeftRadius;
            break;
        }
    }

    const link = [...document.querySelectorAll('a[href]')].slice(0, 60).find(visible);
    const linkColor = link ? getComputedStyle(link).color : null;

    const body = document.body;
    const bs = getComputedStyle(body);
    const htmlBg = getComputedStyle(document.documentElement).backgroundColor;

    // Muted: first paragraph color that differs from the body text color
    let muted = null;
    for (const p of [...document.querySelectorAll('p')].slice(0, 40)) {
        if (!visible(p)) continue;
        const c = getComputedStyle(p).color;
        if (c && c !== bs.color) { muted = c; break; }
    }

    let border = null;
    for (const el of [...document.querySelectorAll('[class*="card"], [class*="border"], hr')].slice(0, 40)) {
        if (!visible(el)) continue;
        const s = getComputedStyle(el);
        if (s.borderTopWidth !== '0px' && s.borderTopStyle !== 'none') { border = s.borderTopColor; break; }
    }

    const h1 = styleOf('h1'), h2 = styleOf('h2'), h3 = styleOf('h3');
    return {
        primary: primary,
        accent: linkColor,
        background: opaque(bs.backgroundColor) ? bs.backgroundColor : htmlBg,
        foreground: bs.color,
        muted: muted,
        border: border,
        font_family: firstFamily(bs.fontFamily),
        heading_family: h1 ? firstFamily(h1.fontFamily) : null,
        h1: h1 ? h1.fontSize : null,
        h2: h2 ? h2.fontSize : null,
        h3: h3 ? h3.fontSize : null,
        body: bs.fontSize,
        radius: radius,
    };
}'''

META_JS = '''() => {
    const el = document.querySelector('meta[name="description"]')
        || document.querySelector('meta[property="og:description"]');
    return el ? (el.getAttribute('content') || '') : '';
}'''


def _build_styles(raw: dict) -> ExtractedStyles:
    """Turn raw computed-style samples into validated styles; unknowns fall back to neutral defaults."""
    raw = raw or {}
    primary = raw.get("primary") or raw.get("accent")
    colors = ColorRoles(
        primary=primary,
        secondary=raw.get("background"),
        accent=raw.get("accent") or primary,
        background=raw.get("background"),
        foreground=raw.get("foreground"),
        muted=raw.get("muted"),
        border=raw.get("border"),
    )
    defaults = TypographySizes()
    sizes = TypographySizes(**{
        key: raw[key] if _PX_RE.match(str(raw.get(key) or "")) else getattr(defaults, key)
        for key in ("h1", "h2", "h3", "body")
    })
    body_family = raw.get("font_family") or "Inter"
    typography = Typography(
        font_family=body_family,
        heading_family=raw.get("heading_family") or body_family,
        sizes=sizes,
    )
    radius = raw.get("radius")
    borders = Borders(radius=radius) if _PX_RE.match(str(radius or "")) else Borders()
    return ExtractedStyles(colors=colors, typography=typography, borders=borders)


async def _navigate(page, url: str, settings):
    """Wait for network idle; on timeout retry once waiting only for DOM content."""
    try:
        await page.goto(url, wait_until="networkidle", timeout=settings.page_load_timeout)
        return
    except PlaywrightTimeoutError as e:
        print(f"  [scrape] networkidle timed out, retrying with domcontentloaded: {e}")
    except PlaywrightError as e:
        raise NavigationError(url, str(e)) from e

    try:
        await page.goto(url, wait_until="domcontentloaded", timeout=settings.fallback_load_timeout)
    except PlaywrightError as e:
        raise NavigationError(url, str(e)) from e


async def _full_page_screenshot(page, max_height: int) -> bytes:
    page_height = await page.evaluate("document.body ? document.body.scrollHeight : 0")
    # Cap page height to avoid OOM on very tall pages
    capped = page_height > max_height
    if capped:
        await page.evaluate(
            f"document.body.style.maxHeight = '{max_height}px'; document.body.style.overflow = 'hidden'"
        )
    screenshot = await page.screenshot(full_page=True, type="png")
    if capped:
        await page.evaluate("document.body.style.maxHeight = ''; document.body.style.overflow = ''")
    return screenshot


async def scrape_website(url: str, pool: BrowserPool, settings=None) -> ScrapedWebsite:
    """
    Load a URL and capture everything later stages need.
    Raises NavigationError when the page cannot be loaded and
    AcquisitionError when the browser fails mid-capture.
    """
    settings = settings or get_settings()
    print(f"[scrape] Loading {url}")

    try:
        async with pool.page() as page:
            await _navigate(page, url, settings)
            # Let late-loading content render before capture
            await page.wait_for_timeout(settings.settle_delay)

            screenshot = await _full_page_screenshot(page, settings.max_full_page_height)
            html = await page.content()
            title = await page.title()
            description = await page.evaluate(META_JS)

            try:
                raw_styles = await page.evaluate(STYLE_SAMPLE_JS)
            except PlaywrightError as e:
                print(f"  [scrape] Style sampling failed (using defaults): {e}")
                raw_styles = {}
    except PlaywrightError as e:
        # Browser launch failure or crash mid-capture
        raise AcquisitionError(url, str(e)) from e

    if not screenshot:
        raise AcquisitionError(url, "empty screenshot")

    styles = _build_styles(raw_styles)
    content = extract_content(html, base_url=url)
    assets = extract_assets(html, base_url=url)

    print(f"  [scrape] Captured {len(html)} chars of HTML, {len(screenshot)} byte screenshot, "
          f"{len(assets.images)} images, {len(assets.fonts)} fonts, primary={styles.colors.primary}")

    return ScrapedWebsite(
        url=url,
        screenshot=screenshot,
        html=html,
        title=(title or "").strip(),
        description=(description or "").strip(),
        styles=styles,
        content=content,
        assets=assets,
    )
