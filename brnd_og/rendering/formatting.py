"""Text formatting shared by the card templates."""
from __future__ import annotations

import math
import re
from typing import Optional, Union

from PIL import ImageFont

Number = Union[int, float]

_SUFFIXES = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)

# Share of the podium's vote cost credited to each place.
PODIUM_SHARES = {1: 0.6, 2: 0.3, 3: 0.1}

_WHITESPACE = re.compile(r"\s+")
_ELLIPSIS = "…"


def format_compact(value: Optional[Number]) -> str:
    """76065 -> '76.1K', 2_500_000 -> '2.5M'. Values below 1000 are printed as integers."""
    value = value or 0
    for threshold, suffix in _SUFFIXES:
        if value >= threshold:
            return f"{value / threshold:.1f}{suffix}"
    return str(int(value))


def format_brand_id(brand_id: int) -> str:
    return str(brand_id).zfill(4)


def brand_handle(name: str) -> str:
    return "@" + _WHITESPACE.sub("", name.lower())


def podium_share(vote_cost: Optional[Number], place: int) -> int:
    """Whole $BRND credited to *place* out of *vote_cost*."""
    return math.floor((vote_cost or 0) * PODIUM_SHARES[place])


def text_width(text: str, font: ImageFont.ImageFont) -> int:
    if not text:
        return 0
    return int(math.ceil(font.getlength(text)))


def truncate_to_width(text: str, font: ImageFont.ImageFont, max_width: int) -> str:
    """Shorten *text* with an ellipsis until it renders within *max_width* pixels."""
    if text_width(text, font) <= max_width:
        return text
    while text and text_width(text + _ELLIPSIS, font) > max_width:
        text = text[:-1]
    return (text.rstrip() + _ELLIPSIS) if text else ""
