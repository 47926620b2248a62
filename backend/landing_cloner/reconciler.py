"""
Reconciler: combines the screenshot analysis with the HTML capture into one MergedView.

Precedence, per field group:
  - colors, font families, spacing, radius: visual analysis wins, computed styles
    fill whatever the analysis left out
  - section existence, order, variant: visual analysis only
  - copy (titles, subtitles, CTA labels, items): HTML wins, visual section content
    fills gaps

A fallback analysis carries no information about the page, so none of its style
values override the computed ones.
"""

from landing_cloner.color_utils import is_dark
from landing_cloner.models import (
    DEFAULT_PRIMARY, CtaContent, DetectedContent, ExtractedContent, ExtractedStyles,
    FeatureItem, HeroContent, Link, MergedView, ScrapedWebsite, VisualAnalysis,
)

SPACING_TO_PADDING = {
    "spacious": "120px",
    "compact": "60px",
}
DEFAULT_PADDING = "80px"

WIDTH_TO_CONTAINER = {
    "wide": "1400px",
    "narrow": "1000px",
}
DEFAULT_CONTAINER = "1280px"

RADIUS_TO_CSS = {
    "none": "0px",
    "small": "4px",
    "medium": "8px",
    "large": "16px",
    "full": "9999px",
}

GENERIC_FONTS = {"serif", "sans-serif", "sans serif", "monospace", "cursive", "system-ui"}

# Text shorter than this is treated as a failed extraction
MIN_HERO_TITLE = 5
MIN_HERO_SUBTITLE = 10
MAX_FEATURES = 6


def _font(name: str | None) -> str | None:
    """A concrete family name from the analysis, or None for generic classes."""
    if not name or name.strip().lower() in GENERIC_FONTS:
        return None
    return name.strip()


def _visual_palette(visual: VisualAnalysis) -> dict:
    palette = visual.color_palette.model_dump(exclude_none=True)
    # The default primary is what the model reports when it did not look closely
    if palette.get("primary") == DEFAULT_PRIMARY:
        palette.pop("primary")
    return palette


def merge_styles(visual: VisualAnalysis, styles: ExtractedStyles) -> ExtractedStyles:
    if visual.is_fallback:
        return styles

    colors = styles.colors.model_copy(update=_visual_palette(visual))

    typography = styles.typography.model_copy(update={
        "heading_family": _font(visual.typography.heading_font) or styles.typography.heading_family,
        "font_family": _font(visual.typography.body_font) or styles.typography.font_family,
    })

    layout = visual.layout
    spacing = styles.spacing.model_copy(update={
        "section_padding": (
            SPACING_TO_PADDING.get(layout.spacing, DEFAULT_PADDING)
            if layout.spacing else styles.spacing.section_padding
        ),
        "container_max_width": (
            WIDTH_TO_CONTAINER.get(layout.container_width, DEFAULT_CONTAINER)
            if layout.container_width else styles.spacing.container_max_width
        ),
    })

    radius = RADIUS_TO_CSS.get(visual.style.border_radius) or styles.borders.radius
    borders = styles.borders.model_copy(update={"radius": radius})

    return styles.model_copy(update={
        "colors": colors,
        "typography": typography,
        "spacing": spacing,
        "borders": borders,
    })


def _section_content(visual: VisualAnalysis, section_type: str) -> DetectedContent | None:
    """Content of the first detected section of a type that carries any."""
    for section in visual.sections:
        if section.type == section_type and section.content is not None:
            return section.content
    return None


def _long_enough(text: str | None, minimum: int) -> bool:
    return bool(text) and len(text.strip()) >= minimum


def _cta_link(visual: DetectedContent | None, index: int) -> Link | None:
    if visual is None:
        return None
    labels = [c for c in visual.ctas if c.text.strip()]
    if index < len(labels):
        return Link(text=labels[index].text.strip())
    return None


def _merge_hero(hero: HeroContent | None, visual: DetectedContent | None) -> HeroContent | None:
    if visual is None:
        return hero
    hero = hero or HeroContent()
    update = {}
    if not _long_enough(hero.title, MIN_HERO_TITLE) and visual.title:
        update["title"] = visual.title.strip()
    if not _long_enough(hero.subtitle, MIN_HERO_SUBTITLE) and visual.subtitle:
        update["subtitle"] = visual.subtitle.strip()
    if hero.primary_cta is None:
        update["primary_cta"] = _cta_link(visual, 0)
    if hero.secondary_cta is None:
        update["secondary_cta"] = _cta_link(visual, 1)
    merged = hero.model_copy(update=update)
    if not any((merged.title, merged.subtitle, merged.primary_cta, merged.image)):
        return None
    return merged


def _merge_features(features: list[FeatureItem] | None,
                    visual: DetectedContent | None) -> list[FeatureItem] | None:
    if features or visual is None:
        return features
    items = [
        FeatureItem(title=item.title.strip(), description=item.description.strip())
        for item in visual.items
        if item.title.strip()
    ]
    return items[:MAX_FEATURES] or features


def _merge_cta(cta: CtaContent | None, visual: DetectedContent | None) -> CtaContent | None:
    if visual is None:
        return cta
    cta = cta or CtaContent()
    button = _cta_link(visual, 0)
    merged = cta.model_copy(update={
        "title": cta.title or visual.title,
        "subtitle": cta.subtitle or visual.subtitle,
        "button_text": cta.button_text or (button.text if button else None),
    })
    if not (merged.title or merged.button_text):
        return None
    return merged


def merge_content(visual: VisualAnalysis, content: ExtractedContent) -> ExtractedContent:
    if visual.is_fallback:
        return content
    return content.model_copy(update={
        "hero": _merge_hero(content.hero, _section_content(visual, "hero")),
        "features": _merge_features(content.features, _section_content(visual, "features")),
        "cta": _merge_cta(content.cta, _section_content(visual, "cta")),
    })


def merge_analysis(visual: VisualAnalysis, scraped: ScrapedWebsite) -> MergedView:
    styles = merge_styles(visual, scraped.styles)
    content = merge_content(visual, scraped.content)
    sections = sorted(visual.sections, key=lambda s: s.position)

    if visual.style.dark_mode is not None and not visual.is_fallback:
        dark_mode = visual.style.dark_mode
    else:
        dark_mode = is_dark(styles.colors.background)

    source = "default analysis" if visual.is_fallback else "visual analysis"
    print(f"[reconciler] {len(sections)} sections from {source}, primary={styles.colors.primary}, "
          f"fonts={styles.typography.heading_family}/{styles.typography.font_family}, dark={dark_mode}")

    return MergedView(styles=styles, sections=sections, content=content, dark_mode=dark_mode)
