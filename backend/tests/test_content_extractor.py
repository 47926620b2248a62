from datetime import datetime

from landing_cloner.content_extractor import (
    MAX_FAQ, MAX_FOOTER_COLUMNS, MAX_NAV_ITEMS, MAX_PRICING_PLANS, MAX_TESTIMONIALS, extract_content,
    resolve_url, synthesized_copyright,
)

BASE = "https://acme.test/landing"


def test_hero_title_and_button_from_same_container():
    html = """
    <body>
      <section class="hero">
        <div>
          <h1>Welcome to Acme</h1>
          <p>Build faster with the platform teams trust.</p>
          <button>Sign Up</button>
          <a href="/docs">Read the docs</a>
          <img src="/img/hero.png" alt="Product">
        </div>
      </section>
    </body>
    """
    hero = extract_content(html, base_url=BASE).hero

    assert hero.title == "Welcome to Acme"
    assert hero.subtitle == "Build faster with the platform teams trust."
    assert hero.primary_cta.text == "Sign Up"
    assert hero.primary_cta.href == "#"
    assert hero.secondary_cta.text == "Read the docs"
    assert hero.secondary_cta.href == "https://acme.test/docs"
    assert hero.image == "https://acme.test/img/hero.png"


def test_hero_ignores_links_before_heading():
    html = """
    <body>
      <a href="/login">Log in</a>
      <h1>Ship it</h1>
      <a href="/start">Start now</a>
    </body>
    """
    hero = extract_content(html).hero
    assert hero.primary_cta.text == "Start now"
    assert hero.secondary_cta is None


def test_no_h1_means_no_hero():
    assert extract_content("<body><h2>Just a heading</h2></body>").hero is None


def test_navigation_capped_and_filtered():
    links = "".join(f'<a href="/p{i}">Page {i}</a>' for i in range(9))
    long_text = "x" * 60
    html = f"<header><img src='/logo.svg'><nav>{links}<a href='/x'>{long_text}</a></nav></header>"

    header = extract_content(html, base_url=BASE).header

    assert len(header.nav_items) == MAX_NAV_ITEMS
    assert header.nav_items[0].text == "Page 0"
    assert header.nav_items[0].href == "https://acme.test/p0"
    assert all(len(item.text) < 50 for item in header.nav_items)
    assert header.logo == "https://acme.test/logo.svg"


def test_four_feature_cards_inside_wrapper():
    cards = "".join(
        f'<div class="feature"><h3>Feature {i}</h3><p>Description {i}</p></div>' for i in range(4)
    )
    html = f'<section class="features"><h2>Why us</h2><div class="features-grid">{cards}</div></section>'

    features = extract_content(html).features

    assert [f.title for f in features] == ["Feature 0", "Feature 1", "Feature 2", "Feature 3"]
    assert features[0].description == "Description 0"


def test_features_need_heading_and_paragraph():
    html = """
    <div class="card"><h3>Only a title</h3></div>
    <div class="card"><p>Only text</p></div>
    """
    assert extract_content(html).features is None


def test_features_capped_at_six():
    cards = "".join(f'<div class="benefit"><h4>B{i}</h4><p>text {i}</p></div>' for i in range(9))
    assert len(extract_content(f"<main>{cards}</main>").features) == 6


def test_testimonial_quote_length_bounds():
    html = """
    <div class="testimonial"><p>Too short.</p></div>
    <div class="testimonial">
      <p>Acme cut our release time in half and our team loves it.</p>
      <cite>Jordan Smith</cite><span class="role">CTO, Initech</span>
    </div>
    """
    testimonials = extract_content(html).testimonials

    assert len(testimonials) == 1
    assert testimonials[0].quote == "Acme cut our release time in half and our team loves it."
    assert testimonials[0].name == "Jordan Smith"
    assert testimonials[0].role == "CTO, Initech"


def test_faq_from_details_elements():
    html = """
    <details><summary>How does billing work?</summary><p>We bill monthly.</p></details>
    <details><summary>Can I cancel?</summary><p>Any time.</p></details>
    """
    faq = extract_content(html).faq

    assert [(f.question, f.answer) for f in faq] == [
        ("How does billing work?", "We bill monthly."),
        ("Can I cancel?", "Any time."),
    ]


def test_faq_requires_answer():
    html = '<div class="faq-item"><h4>What is this thing?</h4></div>'
    assert extract_content(html).faq is None


def test_pricing_plans():
    html = """
    <div class="pricing-card"><h3>Starter</h3><span>$9</span><span>/month</span>
      <ul><li>1 project</li><li>Email support</li></ul></div>
    <div class="pricing-card popular"><h3>Team</h3><span>$49</span><span>/month</span>
      <ul><li>Unlimited projects</li></ul></div>
    """
    plans = extract_content(html).pricing

    assert [p.name for p in plans] == ["Starter", "Team"]
    assert plans[0].price == "$9"
    assert plans[0].period == "/month"
    assert plans[0].features == ["1 project", "Email support"]
    assert not plans[0].highlighted
    assert plans[1].highlighted


def test_cta_block():
    html = """
    <section class="cta-banner">
      <h2>Start building today</h2>
      <p>No credit card required.</p>
      <a href="/signup">Try it free</a>
    </section>
    """
    cta = extract_content(html, base_url=BASE).cta

    assert cta.title == "Start building today"
    assert cta.subtitle == "No credit card required."
    assert cta.button_text == "Try it free"
    assert cta.button_href == "https://acme.test/signup"


def test_footer_columns_and_copyright():
    html = """
    <footer>
      <div>
        <div><h4>Product</h4><a href="/pricing">Pricing</a><a href="/docs">Docs</a></div>
        <div><h4>Company</h4><a href="/about">About</a></div>
      </div>
      <p>© 2023 Acme Inc. All rights reserved.</p>
    </footer>
    """
    footer = extract_content(html).footer

    assert [c.title for c in footer.columns] == ["Product", "Company"]
    assert [l.text for l in footer.columns[0].links] == ["Pricing", "Docs"]
    assert footer.copyright.startswith("© 2023 Acme Inc.")


def test_footer_without_copyright_gets_current_year():
    footer = extract_content("<footer><a href='/a'>About</a></footer>").footer
    assert str(datetime.now().year) in footer.copyright


def test_missing_footer_is_absent():
    assert extract_content("<body><p>hi</p></body>").footer is None


def test_script_and_style_text_ignored():
    html = """
    <section><script>var x = "<h1>Fake</h1>";</script><style>h1 {color: red}</style>
    <h1>Real   title
    </h1></section>
    """
    assert extract_content(html).hero.title == "Real title"


def test_empty_page_yields_all_absent():
    content = extract_content("<html><body></body></html>")
    assert content.model_dump() == {
        "header": None, "hero": None, "features": None, "testimonials": None,
        "pricing": None, "faq": None, "cta": None, "footer": None,
    }


def test_resolve_url():
    assert resolve_url("/a.png", BASE) == "https://acme.test/a.png"
    assert resolve_url("b.png", BASE) == "https://acme.test/b.png"
    assert resolve_url("#pricing", BASE) == "#pricing"
    assert resolve_url("mailto:hi@acme.test", BASE) == "mailto:hi@acme.test"
    assert resolve_url("/a.png", None) == "/a.png"
    assert resolve_url("", BASE) is None


def test_synthesized_copyright():
    assert synthesized_copyright(2031) == "© 2031 All rights reserved."


def test_testimonials_capped_at_six():
    html = "".join(
        f'<div class="testimonial"><p>Customer number {i} says this product is great.</p></div>'
        for i in range(9)
    )
    testimonials = extract_content(html).testimonials
    assert len(testimonials) == MAX_TESTIMONIALS
    assert testimonials[0].quote == "Customer number 0 says this product is great."


def test_faq_capped_at_eight():
    html = "".join(
        f"<details><summary>Question number {i}?</summary><p>Answer {i}.</p></details>"
        for i in range(11)
    )
    faq = extract_content(html).faq
    assert len(faq) == MAX_FAQ
    assert faq[-1].question == "Question number 7?"


def test_pricing_capped_at_four():
    html = "".join(
        f'<div class="plan"><h3>Plan {i}</h3><span>${10 * (i + 1)}</span><span>/month</span></div>'
        for i in range(6)
    )
    plans = extract_content(html).pricing
    assert [p.name for p in plans] == ["Plan 0", "Plan 1", "Plan 2", "Plan 3"]
    assert len(plans) == MAX_PRICING_PLANS


def test_footer_columns_capped_at_four():
    columns = "".join(
        f'<div class="col"><h4>Group {i}</h4><a href="/g{i}">Link {i}</a></div>' for i in range(6)
    )
    footer = extract_content(f'<footer><div class="cols">{columns}</div></footer>').footer
    assert len(footer.columns) == MAX_FOOTER_COLUMNS
    assert [c.title for c in footer.columns] == ["Group 0", "Group 1", "Group 2", "Group 3"]
