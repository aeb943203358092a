"""
Tests for font resolution, asset helpers and the two card templates.

Run with: pytest tests/test_rendering.py -v
"""
from __future__ import annotations

import base64
import io

import httpx
import pytest
from PIL import Image

from brnd_og.rendering import assets
from brnd_og.rendering.brand_card import BrandCardGenerator, render_brand_card, standing_blocks
from brnd_og.rendering.fonts import FontRegistry
from brnd_og.rendering.podium_card import PodiumCardGenerator, render_podium_card
from brnd_og.schemas import BrandCard, CategoryStanding, Podium, PodiumBrand, Voter

# Colour of the stand-in image served for every remote URL (see conftest).
LOGO_COLOR = (255, 0, 0, 255)


def _png_bytes(color=(0, 128, 255, 255), size=(40, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


def _open(png: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(png))
    img.load()
    return img


@pytest.fixture
def fonts(tmp_path) -> FontRegistry:
    # Empty assets directory: every family falls back to the built-in font.
    return FontRegistry(tmp_path)


def _brand(**overrides) -> BrandCard:
    data = dict(
        id=7,
        name="Uniswap Labs",
        image_url="https://img.test/uni.png",
        score=76065,
        ranking="3",
        unique_voters_count=1520,
        category=CategoryStanding(name="DeFi", total_brands=2, ranking=2),
    )
    data.update(overrides)
    return BrandCard(**data)


def _podium(**overrides) -> Podium:
    data = dict(
        transaction_hash="0xabc123",
        brnd_paid_when_creating_podium=1000,
        user=Voter(id=1, username="alice", brnd_power_level=4, photo_url="https://img.test/alice.png"),
        brands=[
            PodiumBrand(id=1, name="Uniswap Labs", image_url="https://img.test/1.png", place=1),
            PodiumBrand(id=2, name="Aave", image_url="https://img.test/2.png", place=2),
            PodiumBrand(id=3, name="Farcaster", image_url="https://img.test/3.png", place=3),
        ],
    )
    data.update(overrides)
    return Podium(**data)


# ---------------------------------------------------------------------------
# Fonts
# ---------------------------------------------------------------------------

class TestFontRegistry:
    def test_nearest_weight(self, fonts):
        assert fonts.resolve_weight("DrukWide", 400) == 500
        assert fonts.resolve_weight("Geist", 600) == 700
        assert fonts.resolve_weight("Geist", 300) == 400

    def test_equal_distance_prefers_lighter_weight(self, fonts):
        assert fonts.resolve_weight("Inter", 550) == 500

    def test_unknown_family(self, fonts):
        assert fonts.resolve_weight("Comic", 400) is None
        assert fonts.path_for("Comic", 400) is None

    def test_paths_are_under_assets_dir(self, fonts, tmp_path):
        assert fonts.path_for("Geist", 700) == tmp_path / "fonts/Geist-Bold.ttf"
        assert fonts.path_for("Inter", 600) == tmp_path / "inter/Inter_18pt-SemiBold.ttf"

    def test_missing_file_falls_back_and_is_cached(self, fonts):
        first = fonts.get("Geist", 700, 24)
        second = fonts.get("Geist", 700, 24)
        assert first is second
        assert first.getlength("BRND") > 0

    def test_unknown_family_still_returns_a_font(self, fonts):
        assert fonts.get("Comic", 400, 18).getlength("x") > 0

    def test_families(self, fonts):
        assert fonts.families() == {"Inter", "Geist", "DrukWide"}


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class TestAssets:
    def test_points_icon_size_and_ink(self):
        icon = assets.points_icon((33, 28))
        assert icon.size == (33, 28)
        assert icon.getbbox() is not None

    def test_missing_background_gives_solid_canvas(self, tmp_path, monkeypatch):
        monkeypatch.setattr(assets.settings, "assets_dir", tmp_path)
        canvas = assets.load_background("nope.png", (120, 80), fill="#000000")
        assert canvas.size == (120, 80)
        assert canvas.getpixel((60, 40)) == (0, 0, 0, 255)

    def test_background_is_cover_fitted(self, tmp_path, monkeypatch):
        (tmp_path / "bg.png").write_bytes(_png_bytes(color=(10, 20, 30, 255), size=(60, 40)))
        monkeypatch.setattr(assets.settings, "assets_dir", tmp_path)
        canvas = assets.load_background("bg.png", (120, 80))
        assert canvas.getpixel((5, 5)) == (10, 20, 30, 255)

    def test_contain_keeps_aspect_ratio(self):
        img = Image.new("RGBA", (300, 150), (255, 0, 0, 255))
        fitted = assets.contain_rounded(img, (100, 100), 10)
        assert fitted.size == (100, 50)
        # corners are cut away
        assert fitted.getpixel((0, 0))[3] == 0
        assert fitted.getpixel((50, 25))[3] == 255

    def test_cover_fills_the_box(self):
        img = Image.new("RGBA", (300, 150), (255, 0, 0, 255))
        tile = assets.cover_rounded(img, (100, 100), 16)
        assert tile.size == (100, 100)
        assert tile.getpixel((50, 50)) == (255, 0, 0, 255)

    def test_circular_avatar(self):
        avatar = assets.circular(Image.new("RGBA", (80, 80), (0, 255, 0, 255)), (62, 62))
        assert avatar.getpixel((0, 0))[3] == 0
        assert avatar.getpixel((31, 31))[3] == 255


class TestFetchRemoteImage:
    def test_empty_url(self):
        assert assets.fetch_remote_image(None) is None
        assert assets.fetch_remote_image("") is None

    def test_unsupported_scheme(self):
        assert assets.fetch_remote_image("ftp://img.test/logo.png") is None

    def test_data_uri(self):
        uri = "data:image/png;base64," + base64.b64encode(_png_bytes()).decode()
        img = assets.fetch_remote_image(uri)
        assert img is not None
        assert img.size == (40, 30)
        assert img.mode == "RGBA"

    def _patch_transport(self, monkeypatch, handler):
        real_client = httpx.Client

        def _client(**kwargs):
            return real_client(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr(assets.httpx, "Client", _client)

    def test_http_download(self, monkeypatch):
        payload = _png_bytes(size=(64, 64))
        self._patch_transport(monkeypatch, lambda request: httpx.Response(200, content=payload))
        img = assets.fetch_remote_image("https://img.test/logo.png")
        assert img is not None
        assert img.size == (64, 64)

    def test_http_error_status(self, monkeypatch):
        self._patch_transport(monkeypatch, lambda request: httpx.Response(404))
        assert assets.fetch_remote_image("https://img.test/missing.png") is None

    def test_not_an_image(self, monkeypatch):
        self._patch_transport(monkeypatch, lambda request: httpx.Response(200, content=b"<html></html>"))
        assert assets.fetch_remote_image("https://img.test/page.html") is None

    def test_oversized_download(self, monkeypatch):
        monkeypatch.setattr(assets.settings, "remote_image_max_bytes", 16)
        self._patch_transport(monkeypatch, lambda request: httpx.Response(200, content=_png_bytes()))
        assert assets.fetch_remote_image("https://img.test/huge.png") is None


# ---------------------------------------------------------------------------
# Brand card
# ---------------------------------------------------------------------------

class TestBrandCard:
    def test_renders_png_canvas(self, fonts):
        img = _open(render_brand_card(_brand(), 4, fonts))
        assert img.format == "PNG"
        assert img.size == (BrandCardGenerator.WIDTH, BrandCardGenerator.HEIGHT)

    def test_logo_is_centred_in_its_box(self, fonts, fake_remote_images):
        img = _open(render_brand_card(_brand(), 4, fonts)).convert("RGBA")
        left, top, side = BrandCardGenerator.LOGO_BOX
        assert img.getpixel((left + side // 2, top + side // 2)) == LOGO_COLOR
        assert fake_remote_images == ["https://img.test/uni.png"]

    def test_renders_without_logo_or_category(self, fonts, fake_remote_images):
        brand = _brand(image_url=None, category=None, ranking=None, unique_voters_count=0)
        img = _open(render_brand_card(brand, 4, fonts))
        assert img.size == (1200, 800)
        assert fake_remote_images == []

    def test_global_block_shows_category_ranking_over_all_brands(self):
        upper, lower = standing_blocks(_brand(), 4)
        assert upper == ("GLOBAL", "2", "4")
        assert lower == ("DEFI", "3", "2")

    def test_blocks_without_category(self):
        upper, lower = standing_blocks(_brand(category=None), 4)
        assert upper == ("GLOBAL", "N/A", "4")
        assert lower == ("BRAND", "3", "0")

    def test_blocks_without_stored_ranking(self):
        _, lower = standing_blocks(_brand(ranking=None), 4)
        assert lower == ("DEFI", "N/A", "2")

    def test_render_draws_the_standing_blocks(self, fonts, monkeypatch):
        drawn = []
        original = BrandCardGenerator._stat_with_total

        def spy(self, left, top, bottom, label, value, total):
            drawn.append((label, value, total))
            return original(self, left, top, bottom, label, value, total)

        monkeypatch.setattr(BrandCardGenerator, "_stat_with_total", spy)
        render_brand_card(_brand(), 4, fonts)
        assert drawn == [("GLOBAL", "2", "4"), ("DEFI", "3", "2")]

    def test_long_names_and_big_numbers(self, fonts):
        brand = _brand(name="A Brand With An Exceptionally Long Name " * 3, score=3_200_000_000,
                       unique_voters_count=12_000_000)
        assert _open(render_brand_card(brand, 1234, fonts)).size == (1200, 800)


# ---------------------------------------------------------------------------
# Podium card
# ---------------------------------------------------------------------------

class TestPodiumCard:
    def test_renders_png_canvas(self, fonts):
        img = _open(render_podium_card(_podium(), fonts))
        assert img.size == (PodiumCardGenerator.WIDTH, PodiumCardGenerator.HEIGHT)

    def test_slots_follow_podium_places(self, fonts):
        img = _open(render_podium_card(_podium(), fonts)).convert("RGBA")
        for slot in PodiumCardGenerator.SLOTS:
            assert img.getpixel((slot.center_x, slot.top + slot.size // 2)) == LOGO_COLOR

    def test_fetches_avatar_and_all_brand_images(self, fonts, fake_remote_images):
        render_podium_card(_podium(), fonts)
        assert "https://img.test/alice.png" in fake_remote_images
        assert len(fake_remote_images) == 4

    def test_missing_brand_leaves_slot_empty(self, fonts):
        podium = _podium(brands=[PodiumBrand(id=2, name="Aave", image_url="https://img.test/2.png", place=1)])
        img = _open(render_podium_card(podium, fonts)).convert("RGBA")
        second = PodiumCardGenerator.SLOTS[0]
        assert second.place == 2
        assert img.getpixel((second.center_x, second.top + second.size // 2)) != LOGO_COLOR

    def test_user_without_photo(self, fonts, fake_remote_images):
        podium = _podium(user=Voter(username="bob"), brands=[])
        assert _open(render_podium_card(podium, fonts)).size == (1200, 800)
        assert fake_remote_images == []
