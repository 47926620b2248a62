import io
import json

import pytest
from PIL import Image

from landing_cloner.asset_extractor import extract_assets
from landing_cloner.config import Settings
from landing_cloner.content_extractor import extract_content
from landing_cloner.models import ScrapedWebsite
from landing_cloner.visual_analyzer import default_analysis

SOURCE_URL = "https://acme.test"


def make_png(width: int = 64, height: int = 48, color=(255, 255, 255)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="PNG")
    return buf.getvalue()


def make_scraped(html: str = "<html><body></body></html>", url: str = SOURCE_URL,
                 title: str = "Acme | Home", description: str = "", styles=None) -> ScrapedWebsite:
    data = dict(
        url=url,
        screenshot=make_png(),
        html=html,
        title=title,
        description=description,
        content=extract_content(html, base_url=url),
        assets=extract_assets(html, base_url=url),
    )
    if styles is not None:
        data["styles"] = styles
    return ScrapedWebsite(**data)


def scraper_for(html: str, **kwargs):
    """A scraper stand-in that returns the given page without a browser."""
    calls = []

    async def scrape(url, pool, settings=None):
        calls.append((url, pool))
        return make_scraped(html, url=url, **kwargs)

    scrape.calls = calls
    return scrape


async def fallback_analyzer(screenshot_b64, media_type="image/jpeg", settings=None):
    return default_analysis()


def analyzer_returning(analysis):
    async def analyze(screenshot_b64, media_type="image/jpeg", settings=None):
        return analysis
    return analyze


def model_reply(payload: dict) -> str:
    return json.dumps(payload)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        anthropic_api_key="test-key",
        vision_timeout=1.0,
        settle_delay=0,
    )


@pytest.fixture
def png_bytes():
    return make_png()
