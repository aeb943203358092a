"""
models.py — Read-only mappings of the BRND voting application's tables
=======================================================================
The schema is owned by the voting application; column names keep its
camelCase spelling and are exposed here as snake_case attributes.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Brand(Base):
    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column("imageUrl", String(1024), nullable=True)
    score: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True, default=0)
    ranking: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    current_ranking: Mapped[Optional[int]] = mapped_column("currentRanking", Integer, nullable=True)
    unique_voters_count: Mapped[Optional[int]] = mapped_column(
        "uniqueVotersCount", Integer, nullable=True, default=0
    )
    category_id: Mapped[Optional[int]] = mapped_column(
        "categoryId", ForeignKey("categories.id"), nullable=True, index=True
    )


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String(255))
    points: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    brnd_power_level: Mapped[Optional[int]] = mapped_column("brndPowerLevel", Integer, nullable=True)
    photo_url: Mapped[Optional[str]] = mapped_column("photoUrl", String(1024), nullable=True)


class UserBrandVote(Base):
    """One podium: the three brands a user voted for in a single transaction."""

    __tablename__ = "user_brand_votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    transaction_hash: Mapped[str] = mapped_column("transactionHash", String(128), unique=True, index=True)
    date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    user_id: Mapped[Optional[int]] = mapped_column("userId", ForeignKey("users.id"), nullable=True)
    brand1_id: Mapped[Optional[int]] = mapped_column("brand1Id", ForeignKey("brands.id"), nullable=True)
    brand2_id: Mapped[Optional[int]] = mapped_column("brand2Id", ForeignKey("brands.id"), nullable=True)
    brand3_id: Mapped[Optional[int]] = mapped_column("brand3Id", ForeignKey("brands.id"), nullable=True)
    podium_image_url: Mapped[Optional[str]] = mapped_column("podiumImageUrl", String(1024), nullable=True)
    brnd_paid_when_creating_podium: Mapped[Optional[int]] = mapped_column(
        "brndPaidWhenCreatingPodium", BigInteger, nullable=True
    )
