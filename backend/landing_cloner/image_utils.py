"""Screenshot optimization: compress the full-page capture before the vision call."""
from PIL import Image
import io
import base64


def optimize_screenshot(screenshot_bytes: bytes, max_width: int = 1280, quality: int = 75,
                        max_dim: int = 7000) -> bytes:
    """
    Downscale and re-encode a full-page capture as JPEG.
    The width is capped at max_width first; pages that are still taller than
    max_dim are then shrunk so neither side exceeds it (vision APIs reject
    images beyond a fixed side length).
    """
    img = Image.open(io.BytesIO(screenshot_bytes))

    w, h = img.size
    scale = min(1.0, max_width / w, max_dim / max(w, h))
    if scale < 1.0:
        img = img.resize((max(1, round(w * scale)), max(1, round(h * scale))), Image.LANCZOS)

    # JPEG has no alpha channel
    if img.mode in ("RGBA", "LA", "P"):
        img = img.convert("RGBA")
        flat = Image.new("RGB", img.size, (255, 255, 255))
        flat.paste(img, mask=img.getchannel("A"))
        img = flat
    elif img.mode != "RGB":
        img = img.convert("RGB")

    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality, optimize=True)
    return buf.getvalue()


def screenshot_to_b64(screenshot_bytes: bytes, compress: bool = True, max_width: int = 1280,
                      quality: int = 75, max_dim: int = 7000) -> tuple[str, str]:
    """Returns (base64 payload, media type) for the vision request."""
    if not compress:
        return base64.b64encode(screenshot_bytes).decode(), "image/png"
    jpeg = optimize_screenshot(screenshot_bytes, max_width=max_width, quality=quality, max_dim=max_dim)
    return base64.b64encode(jpeg).decode(), "image/jpeg"
