"""
Product review model.

A review is written by a user who received the product in a
delivered order. Each user reviews a product at most once, and
new or edited reviews wait for moderation before they are shown.
"""

from datetime import datetime

from sqlalchemy import (
    Integer, String, Boolean, DateTime, Text, ForeignKey, JSON,
    Enum as SAEnum, CheckConstraint, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_wallet.models.base import Base
from shop_wallet.models.enums import ReviewStatus


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_review_user_product"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_review_rating_range"),
        CheckConstraint("helpful_votes >= 0", name="ck_review_helpful_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"), nullable=False, index=True
    )
    order_id: Mapped[int] = mapped_column(
        ForeignKey("orders.id"), nullable=False
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    pros: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cons: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    helpful_votes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    verified_purchase: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    status: Mapped[ReviewStatus] = mapped_column(
        SAEnum(ReviewStatus, name="review_status_enum", create_constraint=True),
        nullable=False,
        default=ReviewStatus.PENDING,
        index=True,
    )
    moderator_note: Mapped[str | None] = mapped_column(String(500), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    product: Mapped["Product"] = relationship()

    def __repr__(self) -> str:
        return f"<Review {self.id} product={self.product_id} {self.rating}/5 ({self.status.value})>"
