"""
Typed records passed between pipeline stages.

Scrape-side records (ExtractedStyles, ExtractedContent) use None for "not found on
the page"; the section mapper turns absence into fallbacks. Vision-side records
(VisualAnalysis) are decoded strictly from the model's JSON reply, with free-text
enum fields folded onto closed sets. Renderer-facing records (SectionConfig,
LandingConfig, CloneResult) serialize with camelCase keys via model_dump(by_alias=True).
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from landing_cloner.color_utils import to_hex


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Scraped styles
# ---------------------------------------------------------------------------

DEFAULT_PRIMARY = "#3b82f6"


class ColorRoles(CamelModel):
    primary: str = DEFAULT_PRIMARY
    secondary: str = "#ffffff"
    accent: str = DEFAULT_PRIMARY
    background: str = "#ffffff"
    foreground: str = "#000000"
    muted: str = "#6b7280"
    border: str = "#e5e7eb"

    @field_validator("*", mode="before")
    @classmethod
    def _normalize(cls, value, info):
        return to_hex(value, cls.model_fields[info.field_name].default)


class TypographySizes(CamelModel):
    h1: str = "48px"
    h2: str = "36px"
    h3: str = "24px"
    body: str = "16px"


class Typography(CamelModel):
    font_family: str = "Inter"
    heading_family: str = "Inter"
    sizes: TypographySizes = Field(default_factory=TypographySizes)


class Spacing(CamelModel):
    section_padding: str = "80px"
    container_max_width: str = "1280px"


class Borders(CamelModel):
    radius: str = "8px"


class ExtractedStyles(CamelModel):
    colors: ColorRoles = Field(default_factory=ColorRoles)
    typography: Typography = Field(default_factory=Typography)
    spacing: Spacing = Field(default_factory=Spacing)
    borders: Borders = Field(default_factory=Borders)


# ---------------------------------------------------------------------------
# Scraped content
# ---------------------------------------------------------------------------

class Link(CamelModel):
    text: str
    href: str = "#"


class HeaderContent(CamelModel):
    logo: str | None = None
    nav_items: list[Link] = Field(default_factory=list)


class HeroContent(CamelModel):
    title: str | None = None
    subtitle: str | None = None
    primary_cta: Link | None = None
    secondary_cta: Link | None = None
    image: str | None = None


class FeatureItem(CamelModel):
    title: str
    description: str
    icon: str | None = None


class Testimonial(CamelModel):
    quote: str
    name: str = "Customer"
    role: str = ""
    avatar: str | None = None


class PricingPlan(CamelModel):
    name: str
    price: str
    period: str = ""
    features: list[str] = Field(default_factory=list)
    highlighted: bool = False


class FaqItem(CamelModel):
    question: str
    answer: str


class CtaContent(CamelModel):
    title: str | None = None
    subtitle: str | None = None
    button_text: str | None = None
    button_href: str = "#"


class FooterColumn(CamelModel):
    title: str = ""
    links: list[Link] = Field(default_factory=list)


class FooterContent(CamelModel):
    copyright: str
    columns: list[FooterColumn] = Field(default_factory=list)


class ExtractedContent(CamelModel):
    header: HeaderContent | None = None
    hero: HeroContent | None = None
    features: list[FeatureItem] | None = None
    testimonials: list[Testimonial] | None = None
    pricing: list[PricingPlan] | None = None
    faq: list[FaqItem] | None = None
    cta: CtaContent | None = None
    footer: FooterContent | None = None


class ImageAsset(CamelModel):
    src: str
    alt: str = ""
    type: Literal["img", "background", "logo"] = "img"


class SiteAssets(CamelModel):
    images: list[ImageAsset] = Field(default_factory=list)
    fonts: list[str] = Field(default_factory=list)


class ScrapedWebsite(CamelModel):
    url: str
    screenshot: bytes = b""
    html: str = ""
    title: str = ""
    description: str = ""
    styles: ExtractedStyles = Field(default_factory=ExtractedStyles)
    content: ExtractedContent = Field(default_factory=ExtractedContent)
    assets: SiteAssets = Field(default_factory=SiteAssets)


# ---------------------------------------------------------------------------
# Visual analysis
# ---------------------------------------------------------------------------

SectionType = Literal[
    "header", "hero", "features", "testimonials", "pricing", "faq", "cta",
    "footer", "gallery", "stats", "about", "form", "unknown",
]
SECTION_TYPES = SectionType.__args__

# Labels the vision model uses that mean one of the closed types
SECTION_ALIASES = {
    "navbar": "header",
    "nav": "header",
    "navigation": "header",
    "banner": "hero",
    "process": "features",
    "benefits": "features",
    "services": "features",
    "how-it-works": "features",
    "reviews": "testimonials",
    "plans": "pricing",
    "questions": "faq",
    "call-to-action": "cta",
    "newsletter": "cta",
    "logos": "gallery",
    "portfolio": "gallery",
    "numbers": "stats",
    "team": "about",
    "contact": "form",
}


def _text(value) -> str:
    """Model-supplied text; numbers are kept as their string form, anything else is empty."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _choice(value, choices) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in choices else None


class DetectedItem(CamelModel):
    title: str = ""
    description: str = ""

    @field_validator("title", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)


class DetectedCta(CamelModel):
    text: str = ""
    style: Literal["primary", "secondary"] = "primary"

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)

    @field_validator("style", mode="before")
    @classmethod
    def _style(cls, value):
        return _choice(value, ("primary", "secondary")) or "primary"


class DetectedContent(CamelModel):
    title: str | None = None
    subtitle: str | None = None
    items: list[DetectedItem] = Field(default_factory=list)
    ctas: list[DetectedCta] = Field(default_factory=list)

    @field_validator("items", "ctas", mode="before")
    @classmethod
    def _lists(cls, value):
        return [] if value is None else value


class DetectedSection(CamelModel):
    type: SectionType = "unknown"
    position: int
    variant: str | None = None
    description: str = ""
    content: DetectedContent | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _fold_type(cls, value):
        if not isinstance(value, str):
            return "unknown"
        label = value.strip().lower().replace("_", "-").replace(" ", "-")
        label = SECTION_ALIASES.get(label, label)
        return label if label in SECTION_TYPES else "unknown"

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value):
        return value if isinstance(value, str) else ""


class ColorPalette(CamelModel):
    primary: str | None = None
    secondary: str | None = None
    accent: str | None = None
    background: str | None = None
    foreground: str | None = None
    muted: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _normalize(cls, value):
        return to_hex(value)


TYPOGRAPHY_STYLES = ("modern", "classic", "playful", "elegant", "bold", "minimal")
CONTAINER_WIDTHS = ("narrow", "medium", "wide", "full")
SPACINGS = ("compact", "normal", "spacious")
ALIGNMENTS = ("left", "center", "mixed")
OVERALL_STYLES = ("minimal", "modern", "corporate", "creative", "elegant", "bold", "playful")
RADIUS_SCALE = ("none", "small", "medium", "large", "full")


class TypographyAnalysis(CamelModel):
    heading_font: str | None = None
    body_font: str | None = None
    heading_weight: str | None = None
    style: str | None = None

    @field_validator("style", mode="before")
    @classmethod
    def _style(cls, value):
        return _choice(value, TYPOGRAPHY_STYLES)


class LayoutAnalysis(CamelModel):
    container_width: str | None = None
    spacing: str | None = None
    alignment: str | None = None

    @field_validator("container_width", mode="before")
    @classmethod
    def _width(cls, value):
        return _choice(value, CONTAINER_WIDTHS)

    @field_validator("spacing", mode="before")
    @classmethod
    def _spacing(cls, value):
        return _choice(value, SPACINGS)

    @field_validator("alignment", mode="before")
    @classmethod
    def _alignment(cls, value):
        return _choice(value, ALIGNMENTS)


class StyleAnalysis(CamelModel):
    overall: str | None = None
    has_gradients: bool = False
    has_shadows: bool = False
    has_animations: bool = False
    border_radius: str | None = None
    dark_mode: bool | None = None

    @field_validator("has_gradients", "has_shadows", "has_animations", mode="before")
    @classmethod
    def _flag(cls, value):
        return False if value is None else value

    @field_validator("overall", mode="before")
    @classmethod
    def _overall(cls, value):
        return _choice(value, OVERALL_STYLES)

    @field_validator("border_radius", mode="before")
    @classmethod
    def _radius(cls, value):
        return _choice(value, RADIUS_SCALE)


class VisualAnalysis(CamelModel):
    sections: list[DetectedSection] = Field(default_factory=list)
    color_palette: ColorPalette = Field(default_factory=ColorPalette)
    typography: TypographyAnalysis = Field(default_factory=TypographyAnalysis)
    layout: LayoutAnalysis = Field(default_factory=LayoutAnalysis)
    style: StyleAnalysis = Field(default_factory=StyleAnalysis)
    # True when this is the built-in default rather than a model reply
    is_fallback: bool = False

    @model_validator(mode="before")
    @classmethod
    def _fill_positions(cls, data):
        if isinstance(data, dict) and isinstance(data.get("sections"), list):
            data = dict(data)
            data["sections"] = [
                {**s, "position": i} if isinstance(s, dict) and s.get("position") is None else s
                for i, s in enumerate(data["sections"])
            ]
        return data


class MergedView(CamelModel):
    styles: ExtractedStyles
    sections: list[DetectedSection]
    content: ExtractedContent
    dark_mode: bool = False


# ---------------------------------------------------------------------------
# Renderer-facing output
# ---------------------------------------------------------------------------

class SectionConfig(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: SectionType
    order: int
    data: dict = Field(default_factory=dict)


class ThemeColors(ColorRoles):
    pass


class ThemeFonts(CamelModel):
    heading: str = "Inter"
    body: str = "Inter"


class Theme(CamelModel):
    colors: ThemeColors = Field(default_factory=ThemeColors)
    fonts: ThemeFonts = Field(default_factory=ThemeFonts)
    border_radius: str = "8px"
    dark_mode: bool = False


class LandingMetadata(CamelModel):
    source_url: str
    cloned_at: str
    original_title: str = ""


class LandingConfig(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    sections: list[SectionConfig]
    theme: Theme
    metadata: LandingMetadata

    @model_validator(mode="after")
    def _contiguous_order(self):
        for i, section in enumerate(self.sections):
            if section.order != i:
                raise ValueError(f"section {section.id} has order {section.order}, expected {i}")
        return self


class AnalysisDetails(CamelModel):
    sections_detected: int
    colors_extracted: list[str] = Field(default_factory=list)
    fonts_detected: list[str] = Field(default_factory=list)
    visual_fallback: bool = False


class CloneResult(CamelModel):
    success: bool
    source_url: str
    landing_config: LandingConfig | None = None
    error: str | None = None
    analysis_details: AnalysisDetails | None = None
