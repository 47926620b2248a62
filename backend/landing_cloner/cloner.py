"""
Clone orchestrator: runs scrape → visual analysis → reconcile → map → assemble
strictly in order and returns a CloneResult.

Acquisition failures (and anything unexpected) produce success=False; the visual
analyzer absorbs its own failures and hands back the default analysis instead.
"""

from landing_cloner.browser_pool import BrowserPool
from landing_cloner.config import get_settings
from landing_cloner.config_assembler import assemble_landing_config
from landing_cloner.image_utils import screenshot_to_b64
from landing_cloner.models import AnalysisDetails, CloneResult
from landing_cloner.reconciler import merge_analysis
from landing_cloner.scraper import scrape_website
from landing_cloner.section_mapper import map_section
from landing_cloner.visual_analyzer import analyze_screenshot


async def clone_website(url: str, user_message: str | None = None, *, pool: BrowserPool | None = None,
                        settings=None, scraper=scrape_website, analyzer=analyze_screenshot) -> CloneResult:
    """
    Clone one landing page into a LandingConfig.

    `pool` is the shared browser pool; when omitted a private one is started and
    shut down around this call. `scraper` and `analyzer` default to the real
    stages and are swapped out in tests. `user_message` is only logged.
    """
    settings = settings or get_settings()
    print(f"[cloner] Cloning {url}")
    if user_message:
        print(f"  [cloner] Request: {user_message[:120]}")

    owns_pool = pool is None
    if owns_pool:
        pool = BrowserPool.from_settings(settings)

    try:
        # Step 1: acquisition (fatal on failure)
        scraped = await scraper(url, pool, settings)

        # Step 2: visual analysis on the compressed screenshot
        image_b64, media_type = screenshot_to_b64(
            scraped.screenshot,
            max_width=settings.screenshot_max_width,
            quality=settings.screenshot_quality,
            max_dim=settings.screenshot_max_dim,
        )
        # The raw capture is not needed past this point
        scraped = scraped.model_copy(update={"screenshot": b""})
        visual = await analyzer(image_b64, media_type, settings=settings)
        del image_b64

        # Step 3: reconcile, map, assemble
        merged = merge_analysis(visual, scraped)
        mapped = []
        for section in merged.sections:
            config = map_section(section, merged, scraped)
            if config is None:
                print(f"  [cloner] Skipping unmapped section type {section.type!r}")
                continue
            mapped.append(config)
        landing_config = assemble_landing_config(mapped, merged, scraped)

    except Exception as e:
        print(f"[cloner] Clone failed for {url}: {e}")
        return CloneResult(success=False, source_url=url, error=str(e))
    finally:
        if owns_pool:
            await pool.shutdown()

    colors = landing_config.theme.colors
    details = AnalysisDetails(
        sections_detected=len(visual.sections),
        colors_extracted=[colors.primary, colors.secondary, colors.accent],
        fonts_detected=list(scraped.assets.fonts),
        visual_fallback=visual.is_fallback,
    )
    print(f"[cloner] Done: {len(landing_config.sections)} sections, "
          f"{details.sections_detected} detected, fallback={details.visual_fallback}")

    return CloneResult(
        success=True,
        source_url=url,
        landing_config=landing_config,
        analysis_details=details,
    )
