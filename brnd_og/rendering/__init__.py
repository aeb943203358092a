"""Open Graph card rendering: fonts, assets, and the brand/podium templates."""
from __future__ import annotations

from functools import lru_cache

from ..config import settings
from .brand_card import BrandCardGenerator, render_brand_card
from .fonts import FontRegistry
from .podium_card import PodiumCardGenerator, render_podium_card


@lru_cache
def get_font_registry() -> FontRegistry:
    return FontRegistry(settings.assets_dir)


__all__ = [
    "BrandCardGenerator",
    "FontRegistry",
    "PodiumCardGenerator",
    "get_font_registry",
    "render_brand_card",
    "render_podium_card",
]
