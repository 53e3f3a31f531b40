# storefront/utils/images.py
import io
from functools import lru_cache
from typing import Optional, Tuple
from urllib.parse import urlencode

from PIL import Image, ImageDraw

from storefront.models.product import Product

PLACEHOLDER_ROUTE = "/images/placeholder.png"
DEFAULT_SIZE = (300, 200)
BACKGROUND = (229, 231, 235)
FOREGROUND = (107, 114, 128)


def placeholder_url(size: Tuple[int, int] = DEFAULT_SIZE) -> str:
    w, h = size
    return f"{PLACEHOLDER_ROUTE}?{urlencode({'w': w, 'h': h})}"


def image_src(product: Optional[Product], size: Tuple[int, int] = DEFAULT_SIZE) -> str:
    """Product image URL, or the placeholder when the record has none."""
    if product is not None and product.image_url:
        return product.image_url
    return placeholder_url(size)


@lru_cache(maxsize=32)
def render_placeholder(width: int, height: int, text: str) -> bytes:
    """
    Grey PNG with `text` centred, served in place of product images
    that are missing or fail to load. Results are cached per size/text.
    """
    im = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(im)
    left, top, right, bottom = draw.textbbox((0, 0), text)
    x = max((width - (right - left)) // 2, 0)
    y = max((height - (bottom - top)) // 2, 0)
    draw.text((x, y), text, fill=FOREGROUND)
    bio = io.BytesIO()
    im.save(bio, format="PNG", optimize=True)
    return bio.getvalue()
