"""Screenshot helpers: compress before handing images to the model."""
from PIL import Image
import io
import base64
import re


_DATA_URL = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[^;,]*)*?),(?P<data>.*)$", re.S)


def optimize_screenshot(screenshot_bytes: bytes, max_width: int = 1280, quality: int = 75) -> bytes:
    """
    Resize and compress a screenshot.
    Full-page PNGs from the scraper are several MB; a 1280px JPEG is plenty
    for the model and keeps the data URL small.
    """
    img = Image.open(io.BytesIO(screenshot_bytes))

    w, h = img.size
    if w > max_width:
        ratio = max_width / w
        img = img.resize((max_width, max(1, int(h * ratio))), Image.LANCZOS)

    # JPEG has no alpha channel
    if img.mode in ('RGBA', 'LA'):
        bg = Image.new('RGB', img.size, (255, 255, 255))
        bg.paste(img, mask=img.split()[-1])
        img = bg
    elif img.mode != 'RGB':
        img = img.convert('RGB')

    buf = io.BytesIO()
    img.save(buf, format='JPEG', quality=quality, optimize=True)
    return buf.getvalue()


def to_data_url(image_bytes: bytes, content_type: str = "image/png", compress: bool = True) -> str:
    """
    Encode image bytes as a `data:` URL.
    With compress=True the image is re-encoded as JPEG; if Pillow cannot read
    it the original bytes are kept.
    """
    if compress:
        try:
            image_bytes = optimize_screenshot(image_bytes)
            content_type = "image/jpeg"
        except Exception as e:
            print(f"[image] Could not compress screenshot, keeping original: {e}")
    return f"data:{content_type};base64,{base64.b64encode(image_bytes).decode()}"


def decode_data_url(url: str) -> tuple[bytes, str]:
    """Return (bytes, mime type) for a base64 `data:` URL."""
    m = _DATA_URL.match(url.strip())
    if not m:
        raise ValueError("Not a data: URL")
    mime = m.group("mime") or "text/plain"
    if ";base64" not in m.group("params"):
        raise ValueError("Only base64 data: URLs are supported")
    return base64.b64decode(m.group("data")), mime
