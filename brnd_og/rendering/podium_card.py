"""Podium share card: a voter's top-3 brands with their share of the vote cost."""
from __future__ import annotations

from dataclasses import dataclass

from ..schemas import Podium, Voter
from .assets import PODIUM_BACKGROUND, circular, cover_rounded, fetch_remote_image, load_background
from .base import WHITE, CardTemplate
from .fonts import FontRegistry
from .formatting import podium_share, truncate_to_width


@dataclass(frozen=True)
class Slot:
    place: int
    center_x: int
    top: int
    size: int


class PodiumCardGenerator(CardTemplate):
    """Render the three podium slots over the podium base layer."""

    # Second place on the left, first in the middle, third on the right.
    SLOTS = (
        Slot(place=2, center_x=344, top=244, size=220),
        Slot(place=1, center_x=600, top=164, size=220),
        Slot(place=3, center_x=856, top=324, size=220),
    )
    SLOT_RADIUS = 16

    CAPTION_WIDTH = 200
    CAPTION_FROM_BOTTOM = 85

    HEADER_TOP = 20
    HEADER_RIGHT = 28
    HEADER_GAP = 16
    AVATAR_SIZE = 62
    LEVEL_COLOR = (0xCC, 0xCC, 0xCC, 255)

    def render(self, podium: Podium) -> bytes:
        self.begin(load_background(PODIUM_BACKGROUND, (self.WIDTH, self.HEIGHT), fill="#000000"))

        self._draw_header(podium.user)

        vote_cost = podium.brnd_paid_when_creating_podium
        for slot in self.SLOTS:
            brand = podium.brand_at(slot.place)
            if brand is not None:
                self._draw_slot_image(slot, fetch_remote_image(brand.image_url))
            self._draw_caption(slot, brand.name if brand else "", podium_share(vote_cost, slot.place))

        return self.finish()

    def _draw_header(self, user: Voter) -> None:
        name_font = self.font("Geist", 700, 20)
        level_font = self.font("Geist", 400, 16)
        username = f"by @{user.username or ''}"
        level = f"LEVEL {user.brnd_power_level or 0}"

        name_w, name_h = self.measure(username, name_font)
        level_w, level_h = self.measure(level, level_font)
        column_w = max(name_w, level_w + 3)
        column_h = name_h + 4 + level_h

        right_edge = self.WIDTH - self.HEADER_RIGHT
        avatar = fetch_remote_image(user.photo_url) if user.photo_url else None
        row_h = column_h
        if avatar is not None:
            row_h = max(column_h, self.AVATAR_SIZE)
            avatar_left = right_edge - self.AVATAR_SIZE
            self.paste(
                circular(avatar, (self.AVATAR_SIZE, self.AVATAR_SIZE)),
                avatar_left,
                self.HEADER_TOP + (row_h - self.AVATAR_SIZE) / 2,
            )
            right_edge = avatar_left - self.HEADER_GAP

        column_top = self.HEADER_TOP + (row_h - column_h) / 2
        column_left = right_edge - column_w
        self.text(column_left + column_w - name_w, column_top, username, name_font)
        self.text(column_left + column_w - 3 - level_w, column_top + name_h + 4, level, level_font, self.LEVEL_COLOR)

    def _draw_slot_image(self, slot: Slot, image) -> None:
        if image is None:
            return
        tile = cover_rounded(image, (slot.size, slot.size), self.SLOT_RADIUS)
        self.paste(tile, slot.center_x - slot.size / 2, slot.top)

    def _draw_caption(self, slot: Slot, name: str, share: int) -> None:
        name_font = self.font("Geist", 700, 25)
        amount_font = self.font("Geist", 400, 20)
        top = self.HEIGHT - self.CAPTION_FROM_BOTTOM

        name = truncate_to_width(name, name_font, self.CAPTION_WIDTH)
        _, name_h = self.text_centered(slot.center_x, top, name, name_font, WHITE)
        self.text_centered(slot.center_x, top + name_h + 8, f"{share} $BRND", amount_font, WHITE)


def render_podium_card(podium: Podium, fonts: FontRegistry) -> bytes:
    return PodiumCardGenerator(fonts).render(podium)
