"""
assets.py — Static and remote images composited into the cards
===============================================================
Backgrounds are read once from the assets directory. Brand logos and
user avatars are fetched per request with httpx; a failed fetch leaves
the slot empty instead of failing the card.
"""
from __future__ import annotations

import base64
import binascii
import io
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional, Tuple

import httpx
from PIL import Image, ImageDraw, ImageOps, UnidentifiedImageError

from ..config import settings

logger = logging.getLogger("brnd.assets")

Size = Tuple[int, int]

BRAND_BACKGROUND = "share-miniapp.png"
PODIUM_BACKGROUND = "podium_base_layer.png"

# $BRND points glyph: seven parallelograms in a 29x25 viewBox.
POINTS_ICON_VIEWBOX = (29, 25)
POINTS_ICON_SHAPES = (
    ((11.1199, 8.16819), (2.94922, 8.16819), (4.4268, 0.0), (12.5975, 0.0)),
    ((8.17067, 24.5158), (0.0, 24.5158), (1.47758, 16.3477), (9.64826, 16.3477)),
    ((17.8149, 16.3342), (9.64844, 16.3342), (11.1218, 8.16602), (19.2925, 8.16602)),
    ((8.17067, 24.5158), (0.0, 24.5158), (1.47759, 16.3477), (9.64826, 16.3477)),
    ((27.4636, 8.16819), (19.293, 8.16819), (20.7706, 0.0), (28.9412, 0.0)),
    ((24.5144, 24.5158), (16.3438, 24.5158), (17.8213, 16.3477), (25.992, 16.3477)),
    ((24.5102, 24.5158), (16.3438, 24.5158), (17.8171, 16.3477), (25.9878, 16.3477)),
)


# ---------------------------------------------------------------------------
# Backgrounds
# ---------------------------------------------------------------------------

@lru_cache(maxsize=8)
def _read_background(path: Path) -> Optional[Image.Image]:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError) as exc:
        logger.warning("Background %s unavailable (%s), using solid canvas", path, exc)
        return None


def load_background(name: str, size: Size, fill: str = "#000000") -> Image.Image:
    """Background *name* cover-fitted to *size*, or a solid *fill* canvas."""
    canvas = Image.new("RGBA", size, fill)
    background = _read_background(Path(settings.assets_dir) / name)
    if background is not None:
        fitted = ImageOps.fit(background, size, method=Image.LANCZOS)
        canvas.alpha_composite(fitted)
    return canvas


# ---------------------------------------------------------------------------
# Remote images
# ---------------------------------------------------------------------------

def _decode_data_uri(uri: str) -> bytes:
    header, _, payload = uri.partition(",")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=False)
    return payload.encode()


def _download(url: str) -> bytes:
    limit = settings.remote_image_max_bytes
    with httpx.Client(timeout=settings.remote_image_timeout_seconds, follow_redirects=True) as client:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            chunks = []
            received = 0
            for chunk in response.iter_bytes():
                received += len(chunk)
                if received > limit:
                    raise ValueError(f"image larger than {limit} bytes")
                chunks.append(chunk)
    return b"".join(chunks)


def fetch_remote_image(url: Optional[str]) -> Optional[Image.Image]:
    """
    Fetch and decode an image referenced by the database.

    Accepts http(s) URLs and data: URIs. Returns None for an empty or
    unsupported URL and for any network or decoding failure.
    """
    if not url:
        return None
    try:
        if url.startswith("data:"):
            raw = _decode_data_uri(url)
        elif url.startswith(("http://", "https://")):
            raw = _download(url)
        else:
            logger.warning("Unsupported image URL scheme: %.80s", url)
            return None
        with Image.open(io.BytesIO(raw)) as img:
            return img.convert("RGBA")
    except (httpx.HTTPError, OSError, ValueError, binascii.Error, Image.DecompressionBombError) as exc:
        logger.warning("Could not load image %.120s: %s", url, exc)
        return None


# ---------------------------------------------------------------------------
# Compositing helpers
# ---------------------------------------------------------------------------

def rounded_mask(size: Size, radius: int) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).rounded_rectangle((0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255)
    return mask


def circle_mask(size: Size) -> Image.Image:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).ellipse((0, 0, size[0] - 1, size[1] - 1), fill=255)
    return mask


def _apply_mask(img: Image.Image, mask: Image.Image) -> Image.Image:
    alpha = img.getchannel("A")
    combined = Image.new("L", img.size, 0)
    combined.paste(alpha, (0, 0), mask)
    out = img.copy()
    out.putalpha(combined)
    return out


def contain_rounded(img: Image.Image, size: Size, radius: int) -> Image.Image:
    """Scale *img* to fit inside *size* (object-fit: contain) and round its corners."""
    fitted = ImageOps.contain(img, size, method=Image.LANCZOS)
    return _apply_mask(fitted, rounded_mask(fitted.size, radius))


def cover_rounded(img: Image.Image, size: Size, radius: int) -> Image.Image:
    """Scale and crop *img* to fill *size* (object-fit: cover) and round its corners."""
    fitted = ImageOps.fit(img, size, method=Image.LANCZOS)
    return _apply_mask(fitted, rounded_mask(size, radius))


def circular(img: Image.Image, size: Size) -> Image.Image:
    fitted = ImageOps.fit(img, size, method=Image.LANCZOS)
    return _apply_mask(fitted, circle_mask(size))


def points_icon(size: Size = (33, 28), fill: str = "white") -> Image.Image:
    """The $BRND points glyph rasterised at *size*."""
    icon = Image.new("RGBA", size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(icon)
    sx = size[0] / POINTS_ICON_VIEWBOX[0]
    sy = size[1] / POINTS_ICON_VIEWBOX[1]
    for shape in POINTS_ICON_SHAPES:
        draw.polygon([(x * sx, y * sy) for x, y in shape], fill=fill)
    return icon
