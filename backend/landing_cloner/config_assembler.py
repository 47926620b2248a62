"""
Config assembler: repairs the mapped section list (synthetic header, features,
FAQ and footer where the page has content for them), renumbers it to 0..n-1 and
wraps it with the theme and metadata into the final LandingConfig.
"""

import uuid
from datetime import datetime, timezone

from landing_cloner.models import (
    DetectedSection, LandingConfig, LandingMetadata, MergedView, ScrapedWebsite,
    SectionConfig, Theme, ThemeColors, ThemeFonts,
)
from landing_cloner.section_mapper import map_section

# Used when the analysis produced no mappable section at all
DEFAULT_STRUCTURE = [
    ("header", "default"),
    ("hero", "centered"),
    ("features", "grid-3"),
    ("cta", "centered"),
    ("footer", "simple"),
]

# At most one of each
SINGLETON_TYPES = ("header", "footer")


def _synthesize(section_type: str, merged: MergedView, scraped: ScrapedWebsite,
                variant: str | None = None, position: int = 0) -> SectionConfig:
    detected = DetectedSection(type=section_type, position=position, variant=variant)
    return map_section(detected, merged, scraped)


def default_sections(merged: MergedView, scraped: ScrapedWebsite) -> list[SectionConfig]:
    return [
        _synthesize(section_type, merged, scraped, variant=variant, position=i)
        for i, (section_type, variant) in enumerate(DEFAULT_STRUCTURE)
    ]


def _insert_index(sections: list[SectionConfig], after: tuple[str, ...]) -> int:
    """Index just past the first section whose type is in `after`, tried in order."""
    for section_type in after:
        for i, section in enumerate(sections):
            if section.type == section_type:
                return i + 1
    return 0


def ensure_required_sections(sections: list[SectionConfig], merged: MergedView,
                             scraped: ScrapedWebsite) -> list[SectionConfig]:
    """
    Sort by order, keep one header and one footer, and insert the sections the
    page has content for but the analysis missed. The footer always ends up last.
    """
    result = []
    seen = set()
    for section in sorted(sections, key=lambda s: s.order):
        if section.type in SINGLETON_TYPES:
            if section.type in seen:
                print(f"  [assembler] Dropping duplicate {section.type}")
                continue
            seen.add(section.type)
        result.append(section)

    types = {s.type for s in result}
    content = merged.content

    if "header" not in types and content.header is not None:
        print("  [assembler] Adding header from page navigation")
        result.insert(0, _synthesize("header", merged, scraped))

    if "features" not in types and content.features:
        print(f"  [assembler] Adding features section ({len(content.features)} items)")
        result.insert(_insert_index(result, ("hero", "header")), _synthesize("features", merged, scraped))

    if "faq" not in types and content.faq:
        print(f"  [assembler] Adding FAQ section ({len(content.faq)} items)")
        footer_at = next((i for i, s in enumerate(result) if s.type == "footer"), len(result))
        result.insert(footer_at, _synthesize("faq", merged, scraped))

    footer = next((s for s in result if s.type == "footer"), None)
    if footer is None:
        print("  [assembler] Adding footer")
        footer = _synthesize("footer", merged, scraped)
    else:
        result.remove(footer)
    result.append(footer)

    return result


def renumber_sections(sections: list[SectionConfig]) -> list[SectionConfig]:
    return [s.model_copy(update={"id": f"section-{i}", "order": i}) for i, s in enumerate(sections)]


def build_theme(merged: MergedView) -> Theme:
    styles = merged.styles
    return Theme(
        colors=ThemeColors(**styles.colors.model_dump()),
        fonts=ThemeFonts(
            heading=styles.typography.heading_family,
            body=styles.typography.font_family,
        ),
        border_radius=styles.borders.radius,
        dark_mode=merged.dark_mode,
    )


def assemble_landing_config(sections: list[SectionConfig], merged: MergedView,
                            scraped: ScrapedWebsite) -> LandingConfig:
    if not sections:
        print("  [assembler] No sections mapped, using default structure")
        sections = default_sections(merged, scraped)

    sections = renumber_sections(ensure_required_sections(sections, merged, scraped))
    print(f"[assembler] {len(sections)} sections: {', '.join(s.type for s in sections)}")

    return LandingConfig(
        id=f"cloned-{uuid.uuid4().hex[:12]}",
        name=scraped.title or "Cloned Landing",
        sections=sections,
        theme=build_theme(merged),
        metadata=LandingMetadata(
            source_url=scraped.url,
            cloned_at=datetime.now(timezone.utc).isoformat(),
            original_title=scraped.title,
        ),
    )
