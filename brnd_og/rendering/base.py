"""Shared canvas plumbing for the card templates."""
from __future__ import annotations

import io
from typing import Optional, Tuple

from PIL import Image, ImageDraw

from .fonts import FontLike, FontRegistry
from .formatting import text_width

Color = Tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)


def white(alpha: float) -> Color:
    """rgba(255,255,255,alpha) as a Pillow fill."""
    return (255, 255, 255, round(255 * alpha))


def line_height(font: FontLike) -> int:
    try:
        ascent, descent = font.getmetrics()
    except AttributeError:
        left, top, right, bottom = font.getbbox("Ag")
        return bottom - top
    return ascent + descent


class CardTemplate:
    """
    Absolute-positioned drawing over a fixed canvas.

    Coordinates follow the browser box model the card designs were made
    in: a text's (left, top) is the top-left corner of its line box, and
    ``right``/``bottom`` offsets are measured from the canvas edges.
    """

    WIDTH = 1200
    HEIGHT = 800

    def __init__(self, fonts: FontRegistry) -> None:
        self.fonts = fonts
        self.img: Optional[Image.Image] = None
        self.draw: Optional[ImageDraw.ImageDraw] = None

    # -- canvas -----------------------------------------------------------

    def begin(self, background: Image.Image) -> None:
        self.img = background.convert("RGBA")
        if self.img.size != (self.WIDTH, self.HEIGHT):
            self.img = self.img.resize((self.WIDTH, self.HEIGHT))
        self.draw = ImageDraw.Draw(self.img, "RGBA")

    def finish(self) -> bytes:
        buf = io.BytesIO()
        self.img.convert("RGB").save(buf, format="PNG", optimize=True)
        self.img = None
        self.draw = None
        return buf.getvalue()

    # -- primitives -------------------------------------------------------

    def font(self, family: str, weight: int, size: int) -> FontLike:
        return self.fonts.get(family, weight, size)

    def measure(self, text: str, font: FontLike) -> Tuple[int, int]:
        return text_width(text, font), line_height(font)

    def text(self, left: float, top: float, text: str, font: FontLike, fill: Color = WHITE) -> Tuple[int, int]:
        """Draw *text* with its line box at (left, top); returns the box size."""
        if text:
            self.draw.text((left, top), text, font=font, fill=fill)
        return self.measure(text, font)

    def text_from_right(self, right: float, top: float, text: str, font: FontLike, fill: Color = WHITE) -> Tuple[int, int]:
        w, h = self.measure(text, font)
        if text:
            self.draw.text((self.WIDTH - right - w, top), text, font=font, fill=fill)
        return w, h

    def text_centered(self, center_x: float, top: float, text: str, font: FontLike, fill: Color = WHITE) -> Tuple[int, int]:
        w, h = self.measure(text, font)
        if text:
            self.draw.text((center_x - w / 2, top), text, font=font, fill=fill)
        return w, h

    def paste(self, overlay: Image.Image, left: float, top: float) -> None:
        self.img.alpha_composite(overlay, (int(round(left)), int(round(top))))

    def from_bottom(self, bottom: float, height: float) -> float:
        """Top coordinate of a box of *height* placed *bottom* px above the canvas edge."""
        return self.HEIGHT - bottom - height
