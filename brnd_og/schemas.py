from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Brand card
# ---------------------------------------------------------------------------

class CategoryStanding(BaseModel):
    """A brand's category and its position inside it."""

    name: str
    total_brands: int = Field(default=0, description="Number of brands sharing this category.")
    ranking: int = Field(default=1, description="1 + brands in the category with a higher score.")


class BrandCard(BaseModel):
    """Everything the brand card template draws."""

    id: int
    name: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    score: int = 0
    ranking: Optional[str] = Field(default=None, description="Global ranking as stored by the voting app.")
    current_ranking: Optional[int] = None
    unique_voters_count: int = 0
    category: Optional[CategoryStanding] = None


# ---------------------------------------------------------------------------
# Podium card
# ---------------------------------------------------------------------------

class Voter(BaseModel):
    id: Optional[int] = None
    username: Optional[str] = None
    points: Optional[int] = None
    brnd_power_level: Optional[int] = None
    photo_url: Optional[str] = None


class PodiumBrand(BaseModel):
    id: int
    name: str
    image_url: Optional[str] = None
    score: int = 0
    place: int = Field(..., ge=1, le=3, description="Podium place: 1, 2 or 3.")


class Podium(BaseModel):
    """A user's top-3 vote recorded under one transaction hash."""

    transaction_hash: str
    date: Optional[datetime] = None
    podium_image_url: Optional[str] = None
    brnd_paid_when_creating_podium: float = Field(default=0, description="$BRND spent to create the podium.")
    user: Voter = Field(default_factory=Voter)
    brands: List[PodiumBrand] = Field(default_factory=list)

    def brand_at(self, place: int) -> Optional[PodiumBrand]:
        for brand in self.brands:
            if brand.place == place:
                return brand
        return None
