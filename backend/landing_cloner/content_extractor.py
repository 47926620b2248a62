"""
HTML → structured page content, using bounded DOM-query heuristics.
Pure Python, no I/O. A heuristic that finds nothing leaves its field as None;
the section mapper decides what to show instead.
"""

import re
from datetime import datetime
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from landing_cloner.models import (
    CtaContent, ExtractedContent, FaqItem, FeatureItem, FooterColumn, FooterContent,
    HeaderContent, HeroContent, Link, PricingPlan, Testimonial,
)

MAX_NAV_ITEMS = 6
MAX_FEATURES = 6
MAX_TESTIMONIALS = 6
MAX_PRICING_PLANS = 4
MAX_FAQ = 8
MAX_FOOTER_COLUMNS = 4
MAX_CANDIDATES = 200  # elements inspected per heuristic

NAV_TEXT_LIMIT = 50
QUOTE_MIN, QUOTE_MAX = 20, 500

NOISE_TAGS = ["script", "style", "noscript", "template"]

FEATURE_SELECTOR = '[class*="feature" i], [class*="card" i], [class*="benefit" i]'
TESTIMONIAL_SELECTOR = '[class*="testimonial" i], [class*="review" i], [class*="quote" i], blockquote'
FAQ_SELECTOR = '[class*="faq" i], [class*="accordion" i], details, summary'
PRICING_SELECTOR = (
    '[class*="plan" i], [class*="tier" i], [class*="pricing-card" i], '
    '[class*="price-card" i], [class*="pricing-item" i]'
)
CTA_CLASS_RE = re.compile(r"(^|[-_])cta($|[-_])|call-to-action", re.IGNORECASE)

PRICE_RE = re.compile(r"[$€£¥]\s?\d[\d,.]*|\d[\d,.]*\s?[$€£¥]")
PERIOD_RE = re.compile(r"/\s?(?:mo|month|yr|year|user)\b|per\s+(?:month|year|user)", re.IGNORECASE)
HIGHLIGHT_RE = re.compile(r"popular|featured|highlight|recommended", re.IGNORECASE)
COPYRIGHT_RE = re.compile(r"(?:©|\(c\)|copyright).*?\d{4}.*?(?:\.|$)", re.IGNORECASE)

_URL_PASSTHROUGH = ("#", "mailto:", "tel:", "javascript:", "data:")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def parse_html(html: str) -> BeautifulSoup:
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(NOISE_TAGS):
        tag.decompose()
    return soup


def text_of(el) -> str:
    """Visible text with whitespace collapsed."""
    if el is None:
        return ""
    return re.sub(r"\s+", " ", el.get_text(" ", strip=True)).strip()


def resolve_url(value: str | None, base_url: str | None) -> str | None:
    if not value:
        return None
    value = value.strip()
    if not base_url or value.startswith(_URL_PASSTHROUGH):
        return value
    return urljoin(base_url, value)


def _img_src(img) -> str | None:
    if img is None:
        return None
    src = img.get("src") or img.get("data-src")
    if not src or src.startswith("data:"):
        return None
    return src


def _inside(el: Tag, container: Tag) -> bool:
    return any(parent is container for parent in el.parents)


def _candidates(root, selector: str) -> list[Tag]:
    return root.select(selector)[:MAX_CANDIDATES]


def _drop_wrappers(parsed: list[tuple[Tag, object]]) -> list[tuple[Tag, object]]:
    """Drop matches that contain two or more other matches (grid/list wrappers)."""
    ids = {id(el) for el, _ in parsed}
    kept = []
    for el, item in parsed:
        nested = sum(1 for d in el.find_all(True) if id(d) in ids)
        if nested < 2:
            kept.append((el, item))
    return kept


def _collect(elements: list[Tag], parse, key, limit: int) -> list:
    parsed = []
    for el in elements:
        item = parse(el)
        if item is not None:
            parsed.append((el, item))

    items = []
    seen = set()
    for _, item in _drop_wrappers(parsed):
        k = key(item)
        if k in seen:
            continue
        seen.add(k)
        items.append(item)
        if len(items) >= limit:
            break
    return items


# ---------------------------------------------------------------------------
# Per-section heuristics
# ---------------------------------------------------------------------------

def extract_header(soup: BeautifulSoup, base_url: str | None = None) -> HeaderContent | None:
    nav_items = []
    seen = set()
    for a in soup.select("nav a, header a"):
        text = text_of(a)
        if not text or len(text) >= NAV_TEXT_LIMIT:
            continue
        href = resolve_url(a.get("href"), base_url) or "#"
        if (text, href) in seen:
            continue
        seen.add((text, href))
        nav_items.append(Link(text=text, href=href))
        if len(nav_items) >= MAX_NAV_ITEMS:
            break

    logo = None
    for img in soup.select("header img, nav img, .logo img, [class*='logo' i] img"):
        logo = resolve_url(_img_src(img), base_url)
        if logo:
            break

    if not nav_items and not logo:
        return None
    return HeaderContent(logo=logo, nav_items=nav_items)


def _is_page_root(el) -> bool:
    return el is None or el.name in ("body", "html", "[document]")


def _hero_subtitle(h1: Tag, container: Tag) -> str | None:
    sibling = h1.find_next_sibling()
    if sibling is not None and sibling.name == "p" and text_of(sibling):
        return text_of(sibling)

    # Nearest paragraph after the heading that is still inside the container
    for p in h1.find_all_next("p", limit=10):
        if _inside(p, container) and text_of(p):
            return text_of(p)

    if not _is_page_root(container):
        nxt = container.find_next_sibling()
        if nxt is not None:
            p = nxt.find("p")
            if text_of(p):
                return text_of(p)
    return None


def _hero_ctas(h1: Tag, container: Tag, base_url: str | None) -> list[Link]:
    after = [el for el in h1.find_all_next(["a", "button"], limit=40) if _inside(el, container)]
    pool = after
    if not pool and not _is_page_root(container):
        pool = container.find_all(["a", "button"], limit=40)

    ctas = []
    seen = set()
    for el in pool:
        text = text_of(el)
        if not text or text in seen:
            continue
        seen.add(text)
        href = el.get("href")
        if el.name == "button":
            parent_link = el.find_parent("a")
            href = parent_link.get("href") if parent_link is not None else None
        ctas.append(Link(text=text, href=resolve_url(href, base_url) or "#"))
        if len(ctas) == 2:
            break
    return ctas


def extract_hero(soup: BeautifulSoup, base_url: str | None = None) -> HeroContent | None:
    h1 = soup.find("h1")
    title = text_of(h1)
    if not title:
        return None

    container = h1.parent
    ctas = _hero_ctas(h1, container, base_url)

    image = None
    if not _is_page_root(container):
        image = _img_src(container.find("img"))
    if image is None:
        section = h1.find_parent("section")
        if section is not None:
            image = _img_src(section.find("img"))

    return HeroContent(
        title=title,
        subtitle=_hero_subtitle(h1, container),
        primary_cta=ctas[0] if ctas else None,
        secondary_cta=ctas[1] if len(ctas) > 1 else None,
        image=resolve_url(image, base_url),
    )


def _parse_feature(el: Tag) -> FeatureItem | None:
    title = text_of(el.find(["h2", "h3", "h4"]))
    description = text_of(el.find("p"))
    if not title or not description or len(title) >= 100:
        return None
    return FeatureItem(title=title, description=description)


def extract_features(soup: BeautifulSoup) -> list[FeatureItem] | None:
    items = _collect(_candidates(soup, FEATURE_SELECTOR), _parse_feature,
                     key=lambda f: f.title, limit=MAX_FEATURES)
    return items or None


def _parse_testimonial(el: Tag, base_url: str | None = None) -> Testimonial | None:
    quote_el = el.find(["p", "blockquote"])
    quote = text_of(quote_el) or text_of(el)
    if not (QUOTE_MIN <= len(quote) <= QUOTE_MAX):
        return None
    name = text_of(el.select_one('[class*="name" i], [class*="author" i], cite, strong, b'))
    role = text_of(el.select_one('[class*="role" i], [class*="position" i], [class*="company" i]'))
    if name == quote:
        name = ""
    return Testimonial(
        quote=quote,
        name=name or "Customer",
        role=role if role != name else "",
        avatar=resolve_url(_img_src(el.find("img")), base_url),
    )


def extract_testimonials(soup: BeautifulSoup, base_url: str | None = None) -> list[Testimonial] | None:
    items = _collect(_candidates(soup, TESTIMONIAL_SELECTOR),
                     lambda el: _parse_testimonial(el, base_url),
                     key=lambda t: t.quote, limit=MAX_TESTIMONIALS)
    return items or None


def _parse_plan(el: Tag) -> PricingPlan | None:
    text = text_of(el)
    price = PRICE_RE.search(text)
    if not price:
        return None
    name = text_of(el.find(["h2", "h3", "h4", "h5"])) or text_of(el.find(["strong", "b"]))
    if not name or len(name) > 60:
        return None
    period = PERIOD_RE.search(text)
    features = [text_of(li) for li in el.find_all("li", limit=8) if text_of(li)]
    classes = " ".join(el.get("class", []))
    return PricingPlan(
        name=name,
        price=price.group(0).replace(" ", ""),
        period=period.group(0) if period else "",
        features=features,
        highlighted=bool(HIGHLIGHT_RE.search(classes) or HIGHLIGHT_RE.search(text[:200])),
    )


def extract_pricing(soup: BeautifulSoup) -> list[PricingPlan] | None:
    plans = _collect(_candidates(soup, PRICING_SELECTOR), _parse_plan,
                     key=lambda p: (p.name, p.price), limit=MAX_PRICING_PLANS)
    return plans or None


def _parse_faq(el: Tag) -> FaqItem | None:
    if el.name == "summary":
        question = text_of(el)
        nxt = el.find_next_sibling(["p", "div"])
        answer = text_of(nxt)
    elif el.name == "details":
        question = text_of(el.find("summary"))
        answer_el = el.select_one('p, [class*="answer" i]')
        answer = text_of(answer_el)
    else:
        question = text_of(el.select_one('h3, h4, h5, summary, [class*="question" i], button'))
        answer = text_of(el.select_one('p, [class*="answer" i]'))
        if not answer:
            answer = text_of(el.find_next_sibling(["div", "p"]))
    if len(question) <= 5 or not answer or answer == question:
        return None
    return FaqItem(question=question, answer=answer)


def extract_faq(soup: BeautifulSoup) -> list[FaqItem] | None:
    items = _collect(_candidates(soup, FAQ_SELECTOR), _parse_faq,
                     key=lambda f: f.question, limit=MAX_FAQ)
    return items or None


def extract_cta(soup: BeautifulSoup, base_url: str | None = None) -> CtaContent | None:
    for el in soup.find_all(class_=CTA_CLASS_RE, limit=20):
        if el.find("h1") is not None or el.find_parent(["header", "nav", "footer"]) is not None:
            continue
        title = text_of(el.find(["h2", "h3"]))
        if not title:
            continue
        button = el.find(["a", "button"])
        href = button.get("href") if button is not None else None
        return CtaContent(
            title=title,
            subtitle=text_of(el.find("p")) or None,
            button_text=text_of(button) or None,
            button_href=resolve_url(href, base_url) or "#",
        )
    return None


def _parse_footer_column(el: Tag, base_url: str | None) -> FooterColumn | None:
    title = text_of(el.find(["h3", "h4", "h5", "h6", "strong"]))
    links = []
    for a in el.find_all("a", limit=20):
        text = text_of(a)
        if text and len(text) < NAV_TEXT_LIMIT:
            links.append(Link(text=text, href=resolve_url(a.get("href"), base_url) or "#"))
    if not title and not links:
        return None
    return FooterColumn(title=title, links=links)


def synthesized_copyright(year: int | None = None) -> str:
    return f"© {year or datetime.now().year} All rights reserved."


def extract_footer(soup: BeautifulSoup, base_url: str | None = None) -> FooterContent | None:
    footer = soup.find("footer")
    if footer is None:
        return None

    elements = []
    seen = set()
    for el in footer.select('[class*="col" i]') + footer.select(":scope > div > div"):
        if id(el) not in seen:
            seen.add(id(el))
            elements.append(el)
    columns = _collect(elements[:MAX_CANDIDATES],
                       lambda el: _parse_footer_column(el, base_url),
                       key=lambda c: (c.title, tuple(l.text for l in c.links)),
                       limit=MAX_FOOTER_COLUMNS)

    match = COPYRIGHT_RE.search(text_of(footer))
    copyright = match.group(0).strip()[:200] if match else synthesized_copyright()
    return FooterContent(copyright=copyright, columns=columns)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def extract_content(html: str, base_url: str | None = None) -> ExtractedContent:
    """Run every heuristic over the rendered HTML."""
    soup = parse_html(html)
    return ExtractedContent(
        header=extract_header(soup, base_url),
        hero=extract_hero(soup, base_url),
        features=extract_features(soup),
        testimonials=extract_testimonials(soup, base_url),
        pricing=extract_pricing(soup),
        faq=extract_faq(soup),
        cta=extract_cta(soup, base_url),
        footer=extract_footer(soup, base_url),
    )
