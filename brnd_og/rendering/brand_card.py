"""Brand share card: name, logo, global and category standing, score and voters."""
from __future__ import annotations

from typing import Optional, Tuple

from ..schemas import BrandCard
from .assets import BRAND_BACKGROUND, contain_rounded, fetch_remote_image, load_background, points_icon
from .base import WHITE, CardTemplate, white
from .fonts import FontRegistry
from .formatting import brand_handle, format_brand_id, format_compact, truncate_to_width


Standing = Tuple[str, str, str]


def standing_blocks(brand: BrandCard, total_brands: int) -> Tuple[Standing, Standing]:
    """
    (label, value, "/total" suffix) for the two ranking blocks.

    The GLOBAL block carries the category ranking over the overall brand
    count; the category block carries the stored ``ranking`` over the
    category size. Without a category the global block reads N/A and
    the lower block is labelled BRAND over a total of 0.
    """
    category = brand.category
    upper = ("GLOBAL", str(category.ranking) if category and category.ranking else "N/A", str(total_brands))
    lower = (
        category.name.upper() if category else "BRAND",
        brand.ranking or "N/A",
        str(category.total_brands if category else 0),
    )
    return upper, lower


class BrandCardGenerator(CardTemplate):
    """Render a brand's Open Graph card over the share background."""

    MARGIN_X = 70
    HEADER_TOP = 125

    LOGO_BOX = (70, 200, 520)       # left, top, side
    LOGO_SIDE = 514
    LOGO_RADIUS = 40

    STATS_LEFT_COL = 634
    STATS_RIGHT_COL = 910
    STATS_TOP = 370
    STATS_BOTTOM = 100

    BADGE_PADDING = (4, 14)         # vertical, horizontal
    BADGE_BORDER = 2
    BADGE_RADIUS = 20

    ICON_SIZE = (33, 28)

    def render(self, brand: BrandCard, total_brands: int) -> bytes:
        """PNG bytes for *brand*; the logo is fetched from ``brand.image_url``."""
        self.begin(load_background(BRAND_BACKGROUND, (self.WIDTH, self.HEIGHT)))

        self._draw_header(brand)
        self._draw_logo(fetch_remote_image(brand.image_url))

        handle_font = self.font("Geist", 700, 20)
        self.text(self.MARGIN_X, self.from_bottom(30, self.measure("@", handle_font)[1]),
                  brand_handle(brand.name), handle_font)

        category = brand.category
        upper, lower = standing_blocks(brand, total_brands)
        self._stat_with_total(self.STATS_LEFT_COL, self.STATS_TOP, None, *upper)
        self._score_stat(self.STATS_RIGHT_COL, self.STATS_TOP, brand.score)
        self._stat_with_total(self.STATS_LEFT_COL, None, self.STATS_BOTTOM, *lower)
        self._plain_stat(self.STATS_RIGHT_COL, self.STATS_BOTTOM, "VOTERS",
                         format_compact(brand.unique_voters_count))

        if category:
            footer_font = self.font("Geist", 700, 24)
            self.text_from_right(self.MARGIN_X, self.from_bottom(30, self.measure(category.name, footer_font)[1]),
                                 category.name, footer_font)

        return self.finish()

    # -- sections ---------------------------------------------------------

    def _draw_header(self, brand: BrandCard) -> None:
        badge_font = self.font("Geist", 400, 30)
        badge_text = format_brand_id(brand.id)
        text_w, text_h = self.measure(badge_text, badge_font)
        pad_y, pad_x = self.BADGE_PADDING
        border = self.BADGE_BORDER
        badge_w = text_w + 2 * (pad_x + border)
        badge_h = text_h + 2 * (pad_y + border)
        badge_left = self.WIDTH - self.MARGIN_X - badge_w

        self.draw.rounded_rectangle(
            (badge_left, self.HEADER_TOP, badge_left + badge_w - 1, self.HEADER_TOP + badge_h - 1),
            radius=self.BADGE_RADIUS,
            outline=white(0.5),
            width=border,
        )
        self.text(badge_left + border + pad_x, self.HEADER_TOP + border + pad_y, badge_text, badge_font)

        name_font = self.font("Geist", 700, 48)
        name_room = badge_left - self.MARGIN_X - 24
        self.text(self.MARGIN_X, self.HEADER_TOP, truncate_to_width(brand.name, name_font, name_room), name_font)

    def _draw_logo(self, logo) -> None:
        if logo is None:
            return
        left, top, side = self.LOGO_BOX
        fitted = contain_rounded(logo, (self.LOGO_SIDE, self.LOGO_SIDE), self.LOGO_RADIUS)
        self.paste(fitted, left + (side - fitted.width) / 2, top + (side - fitted.height) / 2)

    def _label(self, left: float, top: float, label: str) -> float:
        """Draw a stat label; returns the top of the value row beneath it."""
        font = self.font("Geist", 400, 14)
        _, h = self.text(left, top, label, font, white(0.5))
        return top + h + 4

    def _block_top(self, top: Optional[float], bottom: Optional[float], value_h: int) -> float:
        if top is not None:
            return top
        label_h = self.measure("A", self.font("Geist", 400, 14))[1]
        return self.from_bottom(bottom, label_h + 4 + value_h)

    def _stat_with_total(self, left: float, top: Optional[float], bottom: Optional[float],
                         label: str, value: str, total: str) -> None:
        value_font = self.font("DrukWide", 500, 32)
        total_font = self.font("DrukWide", 400, 16)
        value_w, value_h = self.measure(value, value_font)
        _, total_h = self.measure("/" + total, total_font)

        row_top = self._label(left, self._block_top(top, bottom, value_h), label)
        self.text(left, row_top, value, value_font)
        # The total sits on the value's bottom edge, lifted by its margin.
        self.text(left + value_w + 4, row_top + value_h - total_h - 4, "/" + total, total_font, white(0.4))

    def _plain_stat(self, left: float, bottom: float, label: str, value: str) -> None:
        value_font = self.font("DrukWide", 500, 32)
        value_h = self.measure(value, value_font)[1]
        row_top = self._label(left, self._block_top(None, bottom, value_h), label)
        self.text(left, row_top, value, value_font)

    def _score_stat(self, left: float, top: float, score: int) -> None:
        value_font = self.font("DrukWide", 500, 32)
        row_top = self._label(left, top, "$BRND")
        value_w, value_h = self.text(left, row_top, format_compact(score), value_font, WHITE)
        icon = points_icon(self.ICON_SIZE)
        self.paste(icon, left + value_w + 10, row_top + 4 + max(0, (value_h - icon.height) / 2))


def render_brand_card(brand: BrandCard, total_brands: int, fonts: FontRegistry) -> bytes:
    return BrandCardGenerator(fonts).render(brand, total_brands)
