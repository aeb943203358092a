"""
fonts.py — Font families used by the card templates
====================================================
Fonts are registered per (family, weight) and loaded from the assets
directory on first use. A request for an unregistered weight resolves
to the nearest registered one; a missing or unreadable file falls back
to Pillow's built-in scalable font so a card still renders.
"""
from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Set, Tuple

from PIL import ImageFont

logger = logging.getLogger("brnd.render")

FontLike = ImageFont.FreeTypeFont

# (family, weight) -> path relative to the assets directory
DEFAULT_FONT_FILES: Dict[Tuple[str, int], str] = {
    ("Inter", 500): "inter/Inter_18pt-Medium.ttf",
    ("Inter", 600): "inter/Inter_18pt-SemiBold.ttf",
    ("Geist", 400): "fonts/Geist-Regular.ttf",
    ("Geist", 700): "fonts/Geist-Bold.ttf",
    ("DrukWide", 500): "fonts/DrukWide.woff",
}


class FontRegistry:
    def __init__(self, assets_dir: Path, files: Optional[Dict[Tuple[str, int], str]] = None) -> None:
        self._assets_dir = Path(assets_dir)
        self._files = dict(files if files is not None else DEFAULT_FONT_FILES)
        self._cache: Dict[Tuple[str, int, int], FontLike] = {}
        self._missing: Set[Path] = set()
        self._lock = Lock()

    def families(self) -> Set[str]:
        return {family for family, _ in self._files}

    def resolve_weight(self, family: str, weight: int) -> Optional[int]:
        """Nearest registered weight for *family*, or None if the family is unknown."""
        weights = [w for f, w in self._files if f == family]
        if not weights:
            return None
        return min(weights, key=lambda w: (abs(w - weight), w))

    def path_for(self, family: str, weight: int) -> Optional[Path]:
        resolved = self.resolve_weight(family, weight)
        if resolved is None:
            return None
        return self._assets_dir / self._files[(family, resolved)]

    def get(self, family: str, weight: int, size: int) -> FontLike:
        key = (family, weight, size)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            font = self._load(family, weight, size)
            self._cache[key] = font
            return font

    def _load(self, family: str, weight: int, size: int) -> FontLike:
        path = self.path_for(family, weight)
        if path is None:
            logger.warning("Font family %s is not registered, using built-in font", family)
            return ImageFont.load_default(size=size)
        try:
            return ImageFont.truetype(str(path), size)
        except OSError as exc:
            if path not in self._missing:
                self._missing.add(path)
                logger.warning("Font %s unavailable (%s), using built-in font", path, exc)
            return ImageFont.load_default(size=size)
