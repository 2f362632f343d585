"""
Pydantic schemas for product reviews.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from shop_wallet.models.enums import ReviewStatus
from shop_wallet.schemas.ledger import Pagination

MAX_POINT_LENGTH = 200


def _clean_points(points: list[str] | None) -> list[str] | None:
    """Strip pros/cons, drop blank ones and reject overlong ones."""
    if points is None:
        return None
    cleaned = [p.strip() for p in points if p and p.strip()]
    for point in cleaned:
        if len(point) > MAX_POINT_LENGTH:
            raise ValueError(f"each point must be at most {MAX_POINT_LENGTH} characters")
    return cleaned


# --- Request Schemas ---

class ReviewCreate(BaseModel):
    product_id: int
    order_id: int
    rating: int = Field(ge=1, le=5)
    title: str = Field(min_length=1, max_length=100)
    comment: str = Field(min_length=10, max_length=1000)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)

    model_config = {"str_strip_whitespace": True}

    @field_validator("pros", "cons")
    @classmethod
    def clean_points(cls, v: list[str]) -> list[str]:
        return _clean_points(v)


class ReviewUpdate(BaseModel):
    """Partial update: only fields that are set are applied."""
    rating: int | None = Field(default=None, ge=1, le=5)
    title: str | None = Field(default=None, min_length=1, max_length=100)
    comment: str | None = Field(default=None, min_length=10, max_length=1000)
    pros: list[str] | None = None
    cons: list[str] | None = None

    model_config = {"str_strip_whitespace": True}

    @field_validator("pros", "cons")
    @classmethod
    def clean_points(cls, v: list[str] | None) -> list[str] | None:
        return _clean_points(v)


class ModerationRequest(BaseModel):
    status: ReviewStatus
    moderator_note: str = Field(default="", max_length=500)


# --- Response Schemas ---

class ReviewResponse(BaseModel):
    id: int
    user_id: int
    product_id: int
    order_id: int
    rating: int
    title: str
    comment: str
    pros: list[str]
    cons: list[str]
    helpful_votes: int
    verified_purchase: bool
    status: ReviewStatus
    moderator_note: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RatingBucket(BaseModel):
    stars: int
    count: int
    percentage: int


class ReviewStats(BaseModel):
    average_rating: float
    total_reviews: int
    distribution: list[RatingBucket]


class ProductReviewsResponse(BaseModel):
    reviews: list[ReviewResponse]
    stats: ReviewStats | None
    pagination: Pagination


class ReviewListResponse(BaseModel):
    reviews: list[ReviewResponse]
    pagination: Pagination


class ProductToReview(BaseModel):
    """A delivered purchase the user has not reviewed yet."""
    order_id: int
    order_number: str
    order_date: datetime
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
