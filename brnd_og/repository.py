"""
repository.py — Lookups behind the brand and podium cards
==========================================================
Straight SELECTs against the voting application's schema. Every
function returns its "missing" value (None / 0) when the row does not
exist or the database is unreachable; the failure is logged so a card
request can fall back instead of erroring.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from .database import db_session
from .models import Brand, Category, User, UserBrandVote
from .schemas import BrandCard, CategoryStanding, Podium, PodiumBrand, Voter

logger = logging.getLogger("brnd.db")


def get_total_brands() -> int:
    """Number of brands in the ranking. Returns 0 on any database error."""
    try:
        with db_session() as session:
            total = session.execute(select(func.count(Brand.id))).scalar_one()
    except SQLAlchemyError:
        logger.exception("Error fetching total brands")
        return 0
    return int(total or 0)


def get_brand(brand_id: int) -> Optional[BrandCard]:
    """
    Load a brand with its category standing.

    The category standing is computed in the same query: the number of
    brands sharing the category, and 1 + the number of those with a
    strictly higher score.
    """
    peers = aliased(Brand)
    ahead = aliased(Brand)

    category_total = (
        select(func.count(peers.id))
        .where(peers.category_id == Brand.category_id)
        .correlate(Brand)
        .scalar_subquery()
    )
    category_ranking = (
        select(func.count(ahead.id) + 1)
        .where(ahead.category_id == Brand.category_id)
        .where(ahead.score > Brand.score)
        .correlate(Brand)
        .scalar_subquery()
    )
    stmt = (
        select(
            Brand,
            Category.name.label("category_name"),
            category_total.label("category_total_brands"),
            category_ranking.label("category_ranking"),
        )
        .outerjoin(Category, Brand.category_id == Category.id)
        .where(Brand.id == brand_id)
    )

    try:
        with db_session() as session:
            row = session.execute(stmt).first()
    except SQLAlchemyError:
        logger.exception("Error fetching brand %s", brand_id)
        return None

    if row is None:
        return None

    brand = row.Brand
    category = None
    if row.category_name:
        category = CategoryStanding(
            name=row.category_name,
            total_brands=int(row.category_total_brands or 0),
            ranking=int(row.category_ranking or 1),
        )

    return BrandCard(
        id=brand.id,
        name=brand.name,
        description=brand.description,
        image_url=brand.image_url,
        score=brand.score or 0,
        ranking=brand.ranking,
        current_ranking=brand.current_ranking,
        unique_voters_count=brand.unique_voters_count or 0,
        category=category,
    )


def get_podium(transaction_hash: str) -> Optional[Podium]:
    """Load the vote recorded under *transaction_hash* with its voter and three brands."""
    b1 = aliased(Brand)
    b2 = aliased(Brand)
    b3 = aliased(Brand)

    stmt = (
        select(UserBrandVote, User, b1, b2, b3)
        .outerjoin(User, UserBrandVote.user_id == User.id)
        .outerjoin(b1, UserBrandVote.brand1_id == b1.id)
        .outerjoin(b2, UserBrandVote.brand2_id == b2.id)
        .outerjoin(b3, UserBrandVote.brand3_id == b3.id)
        .where(UserBrandVote.transaction_hash == transaction_hash)
    )

    try:
        with db_session() as session:
            row = session.execute(stmt).first()
    except SQLAlchemyError:
        logger.exception("Error fetching podium %s", transaction_hash)
        return None

    if row is None:
        return None

    vote, user, *brands = row

    voter = Voter()
    if user is not None:
        voter = Voter(
            id=user.id,
            username=user.username,
            points=user.points,
            brnd_power_level=user.brnd_power_level,
            photo_url=user.photo_url,
        )

    podium_brands = [
        PodiumBrand(
            id=brand.id,
            name=brand.name,
            image_url=brand.image_url,
            score=brand.score or 0,
            place=place,
        )
        for place, brand in enumerate(brands, start=1)
        if brand is not None
    ]

    return Podium(
        transaction_hash=vote.transaction_hash,
        date=vote.date,
        podium_image_url=vote.podium_image_url,
        brnd_paid_when_creating_podium=float(vote.brnd_paid_when_creating_podium or 0),
        user=voter,
        brands=podium_brands,
    )
