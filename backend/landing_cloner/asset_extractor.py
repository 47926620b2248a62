"""Image and web-font references found in the rendered HTML."""

import re
from urllib.parse import parse_qs, urlparse

from landing_cloner.content_extractor import parse_html, resolve_url
from landing_cloner.models import ImageAsset, SiteAssets

MAX_IMAGES = 20

BG_URL_RE = re.compile(r"""url\(\s*['"]?([^'")\s]+)['"]?\s*\)""")


def _is_logo(img) -> bool:
    for parent in img.parents:
        if parent.name in ("header", "nav"):
            return True
        if any("logo" in c.lower() for c in parent.get("class", []) or []):
            return True
    return False


def extract_font_families(href: str) -> list[str]:
    """
    Family names from a Google Fonts stylesheet URL.
    Handles both css (family=Open+Sans:400|Roboto) and css2
    (family=Inter:wght@400;700&family=Roboto) query styles.
    """
    families = []
    for value in parse_qs(urlparse(href).query).get("family", []):
        for part in value.split("|"):
            name = part.split(":", 1)[0].strip()
            if name:
                families.append(name)
    return families


def extract_assets(html: str, base_url: str | None = None) -> SiteAssets:
    soup = parse_html(html)
    images: list[ImageAsset] = []
    seen = set()

    def add(src, alt, kind):
        src = resolve_url(src, base_url)
        if not src or src.startswith("data:") or src in seen:
            return
        seen.add(src)
        images.append(ImageAsset(src=src, alt=alt, type=kind))

    for img in soup.find_all("img"):
        src = img.get("src") or img.get("data-src")
        add(src, (img.get("alt") or "").strip(), "logo" if _is_logo(img) else "img")

    for el in soup.select('[style*="background" i]'):
        match = BG_URL_RE.search(el.get("style", ""))
        if match:
            add(match.group(1), "", "background")

    fonts: list[str] = []
    for link in soup.select('link[href*="fonts.googleapis.com"]'):
        for family in extract_font_families(link.get("href", "")):
            if family not in fonts:
                fonts.append(family)

    return SiteAssets(images=images[:MAX_IMAGES], fonts=fonts)
