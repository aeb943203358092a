"""
pytest configuration – point the service at a throwaway SQLite database,
create the voting app's tables, and seed a small ranking.
Remote logo/avatar fetching is replaced with an in-memory image.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="brnd-og-tests-")
os.environ.setdefault("BRND_DATABASE_URL", f"sqlite:///{_TMP_DIR}/brnd.db")
os.environ.setdefault("BRND_LOG_FORMAT", "text")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from PIL import Image  # noqa: E402

from brnd_og.database import Base, db_session, engine  # noqa: E402
from brnd_og.models import Brand, Category, User, UserBrandVote  # noqa: E402
from brnd_og.rate_limit import limiter  # noqa: E402
from brnd_og.rendering import brand_card, podium_card  # noqa: E402

LOGO_COLOR = (255, 0, 0, 255)


def _seed() -> None:
    with db_session() as session:
        session.add_all([
            Category(id=1, name="DeFi"),
            Category(id=2, name="Social"),
        ])
        session.add_all([
            Brand(id=1, name="Uniswap Labs", description="DEX", image_url="https://img.test/uni.png",
                  score=76065, ranking="3", current_ranking=3, unique_voters_count=1520, category_id=1),
            Brand(id=2, name="Aave", description="Lending", image_url="https://img.test/aave.png",
                  score=120000, ranking="1", current_ranking=1, unique_voters_count=2048, category_id=1),
            Brand(id=3, name="Farcaster", description="Social protocol", image_url="https://img.test/fc.png",
                  score=500, ranking="10", current_ranking=10, unique_voters_count=12, category_id=2),
            Brand(id=4, name="Orphan Brand", description=None, image_url=None,
                  score=10, ranking=None, current_ranking=None, unique_voters_count=None, category_id=None),
        ])
        session.add(User(id=1, username="alice", points=900, brnd_power_level=4,
                         photo_url="https://img.test/alice.png"))
        session.add_all([
            UserBrandVote(id=1, transaction_hash="0xabc123", date=datetime(2025, 5, 1, 12, 0),
                          user_id=1, brand1_id=1, brand2_id=2, brand3_id=3,
                          podium_image_url=None, brnd_paid_when_creating_podium=1000),
            UserBrandVote(id=2, transaction_hash="partial-podium", date=None,
                          user_id=None, brand1_id=2, brand2_id=None, brand3_id=4,
                          podium_image_url=None, brnd_paid_when_creating_podium=None),
        ])


@pytest.fixture(autouse=True, scope="session")
def create_tables():
    Base.metadata.create_all(bind=engine)
    _seed()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def reset_rate_limits():
    limiter.reset()
    yield
    limiter.reset()


@pytest.fixture(autouse=True)
def fake_remote_images(monkeypatch):
    """Serve every non-empty image URL as a solid red picture; record what was asked for."""
    requested = []

    def _fetch(url):
        if not url:
            return None
        requested.append(url)
        return Image.new("RGBA", (300, 200), LOGO_COLOR)

    monkeypatch.setattr(brand_card, "fetch_remote_image", _fetch)
    monkeypatch.setattr(podium_card, "fetch_remote_image", _fetch)
    return requested
