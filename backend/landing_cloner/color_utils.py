"""Color normalization. Every color that leaves the pipeline is #RGB or #RRGGBB."""

import re

HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_HEX8_RE = re.compile(r"^#([0-9a-fA-F]{6})[0-9a-fA-F]{2}$")
_RGB_RE = re.compile(
    r"rgba?\(\s*(\d+(?:\.\d+)?)[\s,]+(\d+(?:\.\d+)?)[\s,]+(\d+(?:\.\d+)?)(?:\s*[,/]\s*([\d.]+%?))?\s*\)",
    re.IGNORECASE,
)

NAMED_COLORS = {
    "white": "#ffffff",
    "black": "#000000",
    "red": "#ff0000",
    "green": "#008000",
    "blue": "#0000ff",
    "gray": "#808080",
    "grey": "#808080",
}


def is_hex_color(value) -> bool:
    return isinstance(value, str) and bool(HEX_RE.match(value))


def _parse(value: str) -> str | None:
    value = value.strip()
    if not value:
        return None
    if HEX_RE.match(value):
        return value.lower()
    m = _HEX8_RE.match(value)
    if m:
        return "#" + m.group(1).lower()
    m = _RGB_RE.search(value)
    if m:
        alpha = m.group(4)
        if alpha is not None:
            a = float(alpha[:-1]) / 100 if alpha.endswith("%") else float(alpha)
            if a == 0:
                return None  # fully transparent carries no color
        channels = [min(255, max(0, round(float(c)))) for c in m.groups()[:3]]
        return "#" + "".join(f"{c:02x}" for c in channels)
    return NAMED_COLORS.get(value.lower())


def to_hex(value, default: str | None = None) -> str | None:
    """Normalize a CSS color (hex, rgb(), rgba(), a few names) to hex, else default."""
    if not isinstance(value, str):
        return default
    parsed = _parse(value)
    return parsed if parsed is not None else default


def luminance(hex_color: str) -> float:
    """Perceived brightness in [0, 1]."""
    h = hex_color.lstrip("#")
    if len(h) == 3:
        h = "".join(c * 2 for c in h)
    r, g, b = (int(h[i:i + 2], 16) for i in (0, 2, 4))
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def is_dark(hex_color: str) -> bool:
    return luminance(hex_color) < 0.4
