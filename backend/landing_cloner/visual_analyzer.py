"""
Visual analyzer: one vision-model call that reads the full-page screenshot and
describes the page structure: ordered sections with layout variants, a color
palette, typography, layout density, and overall style.

The reply is decoded strictly into a VisualAnalysis. A failed call or a reply that
does not decode falls back to default_analysis(); no retry is attempted.
"""

import asyncio
import json
import re

import anthropic
import httpx
from pydantic import ValidationError

from landing_cloner.config import get_settings
from landing_cloner.errors import AnalysisError
from landing_cloner.models import (
    ColorPalette, DetectedSection, LayoutAnalysis, StyleAnalysis, TypographyAnalysis,
    VisualAnalysis,
)

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"

# One client per (api key, timeout) pair
_clients: dict[tuple, anthropic.AsyncAnthropic] = {}


def _get_client(settings) -> anthropic.AsyncAnthropic:
    key = (settings.anthropic_api_key or None, settings.vision_timeout)
    if key not in _clients:
        _clients[key] = anthropic.AsyncAnthropic(
            api_key=key[0],
            timeout=key[1],
            max_retries=0,
        )
    return _clients[key]


VISUAL_ANALYSIS_PROMPT = """You are an expert web designer analyzing a full-page screenshot of a landing page. Describe what you SEE; do not invent anything.

RULES:
- Text: transcribe visible headlines, subheadlines and button labels EXACTLY, character by character. Never paraphrase or write generic copy.
- Colors: the main call-to-action button color is "primary". The page background is "background". The main heading text color is "foreground". Use precise hex codes read from the image, not framework defaults.
- Layout variants: "split-left" = text on the LEFT, image on the RIGHT. "split-right" = image on the LEFT, text on the RIGHT. "centered" = centered text with the image behind or below it. For feature grids use "grid-3", "grid-4", "cards", "list", "icons" or "alternating".
- Sections: list EVERY distinct section from top to bottom. Allowed types: header, hero, features, testimonials, pricing, faq, cta, footer, gallery, stats, about, form, unknown.

Output ONLY valid JSON (no markdown fences, no explanation). The schema:

{
  "sections": [
    {
      "type": "hero",
      "position": 0,
      "variant": "split-left | split-right | centered | ...",
      "description": "one short sentence describing the section",
      "content": {
        "title": "exact heading text",
        "subtitle": "exact subheading text",
        "items": [{"title": "exact item title", "description": "exact item text"}],
        "ctas": [{"text": "exact button label", "style": "primary | secondary"}]
      }
    }
  ],
  "colorPalette": {
    "primary": "#RRGGBB",
    "secondary": "#RRGGBB",
    "accent": "#RRGGBB",
    "background": "#RRGGBB",
    "foreground": "#RRGGBB",
    "muted": "#RRGGBB"
  },
  "typography": {
    "headingFont": "font name, or serif / sans-serif",
    "bodyFont": "font name, or serif / sans-serif",
    "headingWeight": "bold | semibold | normal",
    "style": "modern | classic | playful | elegant | bold | minimal"
  },
  "layout": {
    "containerWidth": "narrow | medium | wide | full",
    "spacing": "compact | normal | spacious",
    "alignment": "left | center | mixed"
  },
  "style": {
    "overall": "minimal | modern | corporate | creative | elegant | bold | playful",
    "hasGradients": true,
    "hasShadows": true,
    "hasAnimations": false,
    "borderRadius": "none | small | medium | large | full",
    "darkMode": false
  }
}

"position" is the 0-based order of the section on the page. Omit "content" fields you cannot read."""


# ---------------------------------------------------------------------------
# Vision providers
# ---------------------------------------------------------------------------

async def call_anthropic(prompt: str, image_b64: str, media_type: str, settings) -> str:
    client = _get_client(settings)
    text = ""
    async with client.messages.stream(
        model=settings.vision_model,
        max_tokens=settings.vision_max_tokens,
        messages=[{
            "role": "user",
            "content": [
                {
                    "type": "image",
                    "source": {"type": "base64", "media_type": media_type, "data": image_b64},
                },
                {"type": "text", "text": prompt},
            ],
        }],
    ) as stream:
        async for chunk in stream.text_stream:
            text += chunk
    return text


async def call_openrouter(prompt: str, image_b64: str, media_type: str, settings) -> str:
    """OpenAI-compatible chat completion with an inline data-URI image."""
    if not settings.openrouter_api_key:
        raise AnalysisError("OpenRouter API key not found. Set OPENROUTER_API_KEY in .env")

    headers = {
        "Authorization": f"Bearer {settings.openrouter_api_key}",
        "Content-Type": "application/json",
        "X-Title": "Landing Cloner",
    }
    body = {
        "model": settings.openrouter_model,
        "max_tokens": settings.vision_max_tokens,
        "temperature": 0.2,
        "messages": [{
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media_type};base64,{image_b64}", "detail": "high"},
                },
            ],
        }],
    }

    async with httpx.AsyncClient(timeout=settings.vision_timeout) as client:
        resp = await client.post(OPENROUTER_URL, headers=headers, json=body)

    if resp.status_code != 200:
        raise AnalysisError(f"OpenRouter API error ({resp.status_code}): {resp.text[:300]}")

    choices = resp.json().get("choices", [])
    if not choices:
        raise AnalysisError("No choices in OpenRouter response")
    return choices[0]["message"]["content"] or ""


PROVIDERS = {
    "anthropic": call_anthropic,
    "openrouter": call_openrouter,
}


# ---------------------------------------------------------------------------
# Reply decoding
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL)


def _strip_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    return match.group(1).strip() if match else text.strip()


def _extract_json_object(text: str) -> str | None:
    start, end = text.find("{"), text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start:end + 1]


def parse_visual_analysis(text: str) -> VisualAnalysis:
    """
    Decode a model reply into a VisualAnalysis.
    Raises AnalysisError when the reply is not a JSON object with a sections
    list, or when it does not match the VisualAnalysis shape.
    """
    if not isinstance(text, str) or not text.strip():
        raise AnalysisError("empty reply")

    candidate = _strip_fences(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        obj = _extract_json_object(candidate)
        if obj is None:
            raise AnalysisError("reply contains no JSON object")
        try:
            data = json.loads(obj)
        except json.JSONDecodeError as e:
            raise AnalysisError(f"reply JSON is malformed: {e}") from e

    if not isinstance(data, dict):
        raise AnalysisError("reply JSON is not an object")
    if not isinstance(data.get("sections"), list):
        raise AnalysisError("reply has no sections list")

    data.pop("is_fallback", None)
    data.pop("isFallback", None)
    try:
        return VisualAnalysis.model_validate(data)
    except ValidationError as e:
        raise AnalysisError(f"reply does not match the analysis schema ({e.error_count()} errors)") from e


def default_analysis() -> VisualAnalysis:
    """Canned analysis used whenever the vision call or decode fails."""
    return VisualAnalysis(
        sections=[
            DetectedSection(type="header", position=0, variant="default", description="Navigation header"),
            DetectedSection(type="hero", position=1, variant="centered", description="Hero section"),
            DetectedSection(type="features", position=2, variant="grid-3", description="Features grid"),
            DetectedSection(type="testimonials", position=3, variant="carousel", description="Testimonials"),
            DetectedSection(type="cta", position=4, variant="centered", description="Call to action"),
            DetectedSection(type="footer", position=5, variant="default", description="Footer"),
        ],
        color_palette=ColorPalette(
            primary="#3b82f6",
            secondary="#1e40af",
            accent="#8b5cf6",
            background="#ffffff",
            foreground="#1f2937",
            muted="#6b7280",
        ),
        typography=TypographyAnalysis(
            heading_font="Inter", body_font="Inter", heading_weight="bold", style="modern",
        ),
        layout=LayoutAnalysis(container_width="medium", spacing="normal", alignment="center"),
        style=StyleAnalysis(
            overall="modern",
            has_gradients=False,
            has_shadows=True,
            has_animations=False,
            border_radius="medium",
            dark_mode=False,
        ),
        is_fallback=True,
    )


async def _request_analysis(call_model, image_b64: str, media_type: str, settings) -> str:
    try:
        return await asyncio.wait_for(
            call_model(VISUAL_ANALYSIS_PROMPT, image_b64, media_type, settings),
            timeout=settings.vision_timeout,
        )
    except AnalysisError:
        raise
    except asyncio.TimeoutError as e:
        raise AnalysisError(f"vision call timed out after {settings.vision_timeout}s") from e
    except Exception as e:
        raise AnalysisError(f"vision call failed: {e}") from e


async def analyze_screenshot(screenshot_b64: str, media_type: str = "image/png",
                             settings=None, call_model=None) -> VisualAnalysis:
    """
    Analyze a base64 screenshot. Never raises for call or decode failures:
    those return default_analysis() with is_fallback=True.
    """
    settings = settings or get_settings()
    call_model = call_model or PROVIDERS.get(settings.vision_provider, call_anthropic)
    print(f"[visual-analyzer] Analyzing screenshot via {settings.vision_provider}...")

    try:
        raw = await _request_analysis(call_model, screenshot_b64, media_type, settings)
        analysis = parse_visual_analysis(raw)
    except AnalysisError as e:
        print(f"  [visual-analyzer] {e}; using default analysis")
        return default_analysis()

    hero = next((s for s in analysis.sections if s.type == "hero"), None)
    hero_title = hero.content.title if hero and hero.content and hero.content.title else "?"
    print(f"  [visual-analyzer] {len(analysis.sections)} sections, style={analysis.style.overall}, "
          f"primary={analysis.color_palette.primary}, hero={hero_title[:30]!r}")
    return analysis
