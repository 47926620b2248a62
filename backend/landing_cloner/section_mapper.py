"""
Section mapper: turns one detected section plus the merged view into the
renderer-facing SectionConfig. Pure Python, no AI.

Every required field goes through a named resolve_* function with a fixed
fallback order (HTML value, then the visual section's content, then a
placeholder), so a mapped section never carries an empty title or label.
Free-text variant labels are folded onto the closed set each renderer
component supports.
"""

import re
from urllib.parse import urlparse

from landing_cloner.content_extractor import synthesized_copyright
from landing_cloner.models import (
    DetectedContent, DetectedSection, FooterContent, HeroContent, Link, MergedView,
    ScrapedWebsite, SectionConfig,
)

# ---------------------------------------------------------------------------
# Variant normalization
# ---------------------------------------------------------------------------

HERO_VARIANTS = {
    "centered": "centered",
    "center": "centered",
    "split-left": "split-left",
    "split": "split-left",
    "horizontal": "split-left",
    "image-right": "split-left",
    "text-left": "split-left",
    "split-right": "split-right",
    "image-left": "split-right",
    "text-right": "split-right",
    "video": "video",
    "background-video": "video",
    "gradient": "gradient",
    "full-image": "centered",
    "background-image": "centered",
    "full-width": "centered",
}

FEATURES_VARIANTS = {
    "grid-3": "grid-3",
    "three-column": "grid-3",
    "grid-4": "grid-4",
    "four-column": "grid-4",
    "grid": "grid",
    "grid-2": "grid",
    "cards": "cards",
    "card": "cards",
    "horizontal": "cards",
    "list": "list",
    "vertical": "list",
    "icons": "icons",
    "icon-grid": "icons",
    "alternating": "alternating",
    "zigzag": "alternating",
    "zig-zag": "alternating",
}

HEADER_VARIANTS = {
    "default": "default",
    "simple": "default",
    "standard": "default",
    "centered": "centered",
    "center": "centered",
    "transparent": "transparent",
    "overlay": "transparent",
    "sticky": "sticky",
    "fixed": "sticky",
}

TESTIMONIALS_VARIANTS = {
    "grid": "grid",
    "cards": "grid",
    "carousel": "carousel",
    "slider": "carousel",
    "single": "single",
    "quote": "single",
    "featured": "single",
}

PRICING_VARIANTS = {
    "cards": "cards",
    "grid": "cards",
    "columns": "cards",
    "table": "table",
    "comparison": "table",
    "simple": "simple",
    "list": "simple",
}

FAQ_VARIANTS = {
    "accordion": "accordion",
    "collapsible": "accordion",
    "expandable": "accordion",
    "grid": "grid",
    "two-column": "grid",
    "list": "list",
    "simple": "list",
}

CTA_VARIANTS = {
    "centered": "centered",
    "center": "centered",
    "split": "split",
    "split-left": "split",
    "split-right": "split",
    "banner": "banner",
    "full-width": "banner",
    "gradient": "banner",
}

FOOTER_VARIANTS = {
    "columns": "columns",
    "multi-column": "columns",
    "default": "columns",
    "simple": "simple",
    "minimal": "simple",
    "centered": "centered",
    "center": "centered",
}


def _normalize_label(label) -> str:
    if not isinstance(label, str):
        return ""
    return re.sub(r"[\s_]+", "-", label.strip().lower())


def _lookup(table: dict, label, default: str) -> str:
    return table.get(_normalize_label(label), default)


def map_hero_variant(label) -> str:
    return _lookup(HERO_VARIANTS, label, "centered")


def map_features_variant(label) -> str:
    return _lookup(FEATURES_VARIANTS, label, "grid")


def map_header_variant(label) -> str:
    return _lookup(HEADER_VARIANTS, label, "default")


def map_testimonials_variant(label) -> str:
    return _lookup(TESTIMONIALS_VARIANTS, label, "grid")


def map_pricing_variant(label) -> str:
    return _lookup(PRICING_VARIANTS, label, "cards")


def map_faq_variant(label) -> str:
    return _lookup(FAQ_VARIANTS, label, "accordion")


def map_cta_variant(label) -> str:
    return _lookup(CTA_VARIANTS, label, "centered")


def map_footer_variant(label, has_columns: bool = True) -> str:
    return _lookup(FOOTER_VARIANTS, label, "columns" if has_columns else "simple")


# ---------------------------------------------------------------------------
# Feature icons
# ---------------------------------------------------------------------------

# First matching row wins; keywords are matched as substrings of the lowercased title
ICON_KEYWORDS = [
    (("fast", "speed", "quick", "instant", "rapid", "performance"), "zap"),
    (("encrypt", "password", "private"), "lock"),
    (("secur", "safe", "protect", "privacy"), "shield"),
    (("cloud", "sync", "storage", "hosting"), "cloud"),
    (("analytic", "insight", "report", "metric", "dashboard"), "chart"),
    (("team", "collaborat", "people", "community", "member"), "users"),
    (("global", "world", "international", "language"), "globe"),
    (("24/7", "time", "schedule", "clock"), "clock"),
    (("support", "help", "care", "love"), "heart"),
    (("launch", "deploy", "start"), "rocket"),
    (("smart", "intelligen", "automat", "magic"), "sparkles"),
    (("award", "quality", "best", "premium"), "award"),
    (("target", "goal", "focus", "precision"), "target"),
    (("integrat", "developer", "code", "api"), "cpu"),
    (("growth", "grow", "scale", "trend"), "trending"),
    (("easy", "simple", "reliab", "check"), "check"),
]

DEFAULT_ICONS = ["zap", "shield", "star", "rocket", "heart", "globe"]


def get_icon_for_feature(title: str | None, index: int) -> str:
    """Icon name for a feature title; unmatched titles cycle DEFAULT_ICONS by index."""
    lowered = (title or "").lower()
    for keywords, icon in ICON_KEYWORDS:
        if any(k in lowered for k in keywords):
            return icon
    return DEFAULT_ICONS[index % len(DEFAULT_ICONS)]


def feature_columns(count: int) -> int:
    return count if count in (2, 4) else 3


# ---------------------------------------------------------------------------
# Precedence resolution
# ---------------------------------------------------------------------------

def _first_text(*candidates) -> str | None:
    for value in candidates:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _link_dict(link: Link) -> dict:
    return {"text": link.text, "href": link.href}


def _visual_cta(visual: DetectedContent | None, index: int) -> dict | None:
    if visual is None:
        return None
    labels = [c.text.strip() for c in visual.ctas if c.text.strip()]
    if index < len(labels):
        return {"text": labels[index], "href": "#"}
    return None


def resolve_hero_title(hero: HeroContent | None, visual: DetectedContent | None,
                       page_title: str) -> str:
    """HTML <h1> → visual hero title → page <title> → "Welcome"."""
    return _first_text(
        hero.title if hero else None,
        visual.title if visual else None,
        page_title,
    ) or "Welcome"


def resolve_hero_subtitle(hero: HeroContent | None, visual: DetectedContent | None,
                          description: str) -> str:
    """HTML subtitle → visual subtitle → meta description → placeholder."""
    return _first_text(
        hero.subtitle if hero else None,
        visual.subtitle if visual else None,
        description,
    ) or "Everything you need, all in one place."


def resolve_primary_cta(hero: HeroContent | None, visual: DetectedContent | None) -> dict:
    """HTML first CTA → visual first CTA → "Get Started"."""
    if hero and hero.primary_cta:
        return _link_dict(hero.primary_cta)
    return _visual_cta(visual, 0) or {"text": "Get Started", "href": "#"}


def resolve_secondary_cta(hero: HeroContent | None, visual: DetectedContent | None) -> dict | None:
    if hero and hero.secondary_cta:
        return _link_dict(hero.secondary_cta)
    return _visual_cta(visual, 1)


def resolve_section_heading(visual: DetectedContent | None, default: str) -> str:
    return _first_text(visual.title if visual else None) or default


def resolve_section_subtitle(visual: DetectedContent | None, default: str) -> str:
    return _first_text(visual.subtitle if visual else None) or default


def resolve_brand_name(page_title: str, url: str) -> str:
    """
    First segment of the page title ("Acme | Home" → "Acme"), else the
    domain name ("www.acme.io" → "Acme"), else "Brand".
    """
    if page_title and page_title.strip():
        name = re.split(r"\s+[|\-–—·:]\s+", page_title.strip())[0].strip()
        if name:
            return name
    host = urlparse(url or "").hostname or ""
    if host.startswith("www."):
        host = host[4:]
    label = host.split(".")[0]
    return label.capitalize() if label else "Brand"


def resolve_copyright(footer: FooterContent | None) -> str:
    if footer and footer.copyright.strip():
        return footer.copyright.strip()
    return synthesized_copyright()


def _content_images(scraped: ScrapedWebsite) -> list:
    return [img for img in scraped.assets.images if img.type != "logo"]


def _logo(merged: MergedView, scraped: ScrapedWebsite) -> str | None:
    header = merged.content.header
    if header and header.logo:
        return header.logo
    return next((img.src for img in scraped.assets.images if img.type == "logo"), None)


# ---------------------------------------------------------------------------
# Per-type mappers
# ---------------------------------------------------------------------------

def _map_header(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    header = merged.content.header
    nav_items = [_link_dict(link) for link in header.nav_items] if header else []
    if not nav_items and section.content:
        nav_items = [{"text": item.title.strip(), "href": "#"}
                     for item in section.content.items if item.title.strip()][:6]
    return {
        "logo": _logo(merged, scraped),
        "brandName": resolve_brand_name(scraped.title, scraped.url),
        "navItems": nav_items,
        "ctaButton": _visual_cta(section.content, 0),
        "variant": map_header_variant(section.variant),
    }


def _map_hero(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    hero = merged.content.hero
    visual = section.content
    images = _content_images(scraped)
    data = {
        "title": resolve_hero_title(hero, visual, scraped.title),
        "subtitle": resolve_hero_subtitle(hero, visual, scraped.description),
        "primaryCTA": resolve_primary_cta(hero, visual),
        "image": (hero.image if hero and hero.image else None) or (images[0].src if images else None),
        "variant": map_hero_variant(section.variant),
        "backgroundColor": "#0f172a" if merged.dark_mode else merged.styles.colors.background,
        "accentColor": merged.styles.colors.primary,
    }
    secondary = resolve_secondary_cta(hero, visual)
    if secondary:
        data["secondaryCTA"] = secondary
    return data


PLACEHOLDER_FEATURES = [
    ("Fast & Reliable", "Built for speed and dependability from day one.", "zap"),
    ("Secure by Default", "Your data is protected at every step.", "shield"),
    ("Loved by Users", "Thousands of happy customers rely on us every day.", "star"),
]


def _map_features(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    visual = section.content
    if merged.content.features:
        items = [
            {"title": f.title, "description": f.description,
             "icon": f.icon or get_icon_for_feature(f.title, i)}
            for i, f in enumerate(merged.content.features)
        ]
    elif visual and any(item.title.strip() for item in visual.items):
        items = [
            {"title": item.title.strip(), "description": item.description.strip(),
             "icon": get_icon_for_feature(item.title, i)}
            for i, item in enumerate(it for it in visual.items if it.title.strip())
        ][:6]
    else:
        items = [{"title": t, "description": d, "icon": icon} for t, d, icon in PLACEHOLDER_FEATURES]

    return {
        "title": resolve_section_heading(visual, "Features"),
        "subtitle": resolve_section_subtitle(visual, "What we offer"),
        "items": items,
        "variant": map_features_variant(section.variant),
        "columns": feature_columns(len(items)),
    }


PLACEHOLDER_TESTIMONIALS = [
    {"quote": "This product completely changed how our team works. Highly recommended!",
     "name": "Alex Johnson", "role": "Product Manager", "avatar": None},
    {"quote": "Setup took minutes and the results were immediate. We love it.",
     "name": "Sam Lee", "role": "Founder", "avatar": None},
]


def _map_testimonials(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    visual = section.content
    if merged.content.testimonials:
        items = [t.model_dump() for t in merged.content.testimonials]
    elif visual and any(item.description.strip() for item in visual.items):
        items = [
            {"quote": item.description.strip(), "name": item.title.strip() or "Customer",
             "role": "", "avatar": None}
            for item in visual.items if item.description.strip()
        ][:6]
    else:
        items = [dict(t) for t in PLACEHOLDER_TESTIMONIALS]
    return {
        "title": resolve_section_heading(visual, "What Our Customers Say"),
        "subtitle": resolve_section_subtitle(visual, "Trusted by thousands"),
        "items": items,
        "variant": map_testimonials_variant(section.variant),
    }


PLACEHOLDER_PLANS = [
    {"name": "Basic", "price": "$9", "period": "/month",
     "features": ["Core features", "Email support"], "highlighted": False},
    {"name": "Pro", "price": "$29", "period": "/month",
     "features": ["Everything in Basic", "Priority support", "Advanced analytics"], "highlighted": True},
]


def _map_pricing(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    if merged.content.pricing:
        plans = [p.model_dump() for p in merged.content.pricing]
    else:
        plans = [dict(p, features=list(p["features"])) for p in PLACEHOLDER_PLANS]
    return {
        "title": resolve_section_heading(section.content, "Pricing"),
        "subtitle": resolve_section_subtitle(section.content, "Choose your plan"),
        "plans": plans,
        "variant": map_pricing_variant(section.variant),
    }


PLACEHOLDER_FAQ = [
    {"question": "How do I get started?", "answer": "Sign up for an account and follow the setup guide."},
    {"question": "Can I cancel anytime?", "answer": "Yes, you can cancel your plan at any time."},
]


def _map_faq(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    visual = section.content
    if merged.content.faq:
        items = [f.model_dump() for f in merged.content.faq]
    elif visual and any(i.title.strip() and i.description.strip() for i in visual.items):
        items = [
            {"question": i.title.strip(), "answer": i.description.strip()}
            for i in visual.items if i.title.strip() and i.description.strip()
        ][:8]
    else:
        items = [dict(f) for f in PLACEHOLDER_FAQ]
    return {
        "title": resolve_section_heading(visual, "Frequently Asked Questions"),
        "items": items,
        "variant": map_faq_variant(section.variant),
    }


def _map_cta(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    cta = merged.content.cta
    visual = section.content
    visual_button = _visual_cta(visual, 0)
    return {
        "title": _first_text(cta.title if cta else None, visual.title if visual else None)
        or "Ready to get started?",
        "subtitle": _first_text(cta.subtitle if cta else None, visual.subtitle if visual else None)
        or "Join thousands of satisfied customers",
        "buttonText": _first_text(cta.button_text if cta else None,
                                  visual_button["text"] if visual_button else None)
        or "Get Started",
        "buttonHref": cta.button_href if cta else "#",
        "backgroundColor": merged.styles.colors.primary,
        "variant": map_cta_variant(section.variant),
    }


def _map_footer(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    footer = merged.content.footer
    columns = [
        {"title": col.title, "links": [_link_dict(link) for link in col.links]}
        for col in (footer.columns if footer else [])
    ]
    return {
        "logo": _logo(merged, scraped),
        "brandName": resolve_brand_name(scraped.title, scraped.url),
        "columns": columns,
        "copyright": resolve_copyright(footer),
        "variant": map_footer_variant(section.variant, has_columns=bool(columns)),
    }


PLACEHOLDER_STATS = [
    {"value": "100+", "label": "Happy Customers"},
    {"value": "50+", "label": "Countries"},
    {"value": "99%", "label": "Satisfaction"},
]


def _map_stats(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    visual = section.content
    items = []
    if visual:
        items = [
            {"value": item.title.strip(), "label": item.description.strip() or item.title.strip()}
            for item in visual.items if item.title.strip()
        ][:4]
    return {
        "title": resolve_section_heading(visual, "By the Numbers"),
        "items": items or [dict(s) for s in PLACEHOLDER_STATS],
    }


def _map_gallery(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    return {
        "title": resolve_section_heading(section.content, "Gallery"),
        "images": [{"src": img.src, "alt": img.alt} for img in _content_images(scraped)[:6]],
    }


def _map_about(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    visual = section.content
    images = _content_images(scraped)
    return {
        "title": resolve_section_heading(visual, "About Us"),
        "content": _first_text(
            visual.subtitle if visual else None,
            section.description,
            scraped.description,
        ) or "We are a team dedicated to building products people love.",
        "image": images[1].src if len(images) > 1 else None,
    }


def _map_form(section: DetectedSection, merged: MergedView, scraped: ScrapedWebsite) -> dict:
    return {
        "title": resolve_section_heading(section.content, "Contact Us"),
        "subtitle": resolve_section_subtitle(section.content, "We'd love to hear from you"),
        "fields": [
            {"name": "name", "label": "Name", "type": "text", "required": True},
            {"name": "email", "label": "Email", "type": "email", "required": True},
            {"name": "message", "label": "Message", "type": "textarea", "required": True},
        ],
        "submitText": _first_text(
            (_visual_cta(section.content, 0) or {}).get("text"),
        ) or "Send Message",
    }


_MAPPERS = {
    "header": _map_header,
    "hero": _map_hero,
    "features": _map_features,
    "testimonials": _map_testimonials,
    "pricing": _map_pricing,
    "faq": _map_faq,
    "cta": _map_cta,
    "footer": _map_footer,
    "stats": _map_stats,
    "gallery": _map_gallery,
    "about": _map_about,
    "form": _map_form,
}


def map_section(section: DetectedSection, merged: MergedView,
                scraped: ScrapedWebsite) -> SectionConfig | None:
    """SectionConfig for one detected section, or None for unknown types."""
    mapper = _MAPPERS.get(section.type)
    if mapper is None:
        return None
    return SectionConfig(
        id=f"section-{section.position}",
        type=section.type,
        order=section.position,
        data=mapper(section, merged, scraped),
    )
