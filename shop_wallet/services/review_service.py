"""
Review service — product reviews from verified buyers.

Rules:
1. Only the buyer of a delivered order may review a product
   from that order
2. A user reviews a product at most once
3. New and edited reviews are pending until a moderator
   approves or rejects them; only approved reviews are shown
   and counted in a product's rating stats
"""

import logging
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shop_wallet.errors import (
    AlreadyReviewedError,
    ReviewNotAllowedError,
    ReviewNotFoundError,
    ReviewOwnershipError,
    ValidationError,
)
from shop_wallet.models.enums import OrderStatus, ReviewStatus
from shop_wallet.models.order import Order
from shop_wallet.models.review import Review
from shop_wallet.schemas.review import ReviewCreate, ReviewUpdate
from shop_wallet.services.product_service import ProductService

logger = logging.getLogger(__name__)


def _round_half_up(value: Decimal, places: str = "1") -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


class ReviewService:

    def __init__(self, db: Session):
        self.db = db
        self.products = ProductService(db)

    def _get_own_review(self, user_id: int, review_id: int) -> Review:
        review = self.get_review(review_id)
        if review.user_id != user_id:
            raise ReviewOwnershipError(review_id)
        return review

    def _page(self, query, page: int, limit: int):
        return self.db.execute(
            query.limit(limit).offset((page - 1) * limit)
        ).scalars().all()

    def create_review(self, user_id: int, request: ReviewCreate) -> Review:
        """
        Write a review for a product the user received.

        The order must belong to the user, be delivered and
        contain the product.
        """
        order = self.db.execute(
            select(Order).where(Order.id == request.order_id, Order.user_id == user_id)
        ).scalar_one_or_none()
        if (
            not order
            or order.status != OrderStatus.DELIVERED
            or not any(item.product_id == request.product_id for item in order.items)
        ):
            raise ReviewNotAllowedError(request.product_id)

        if self.find_user_review(user_id, request.product_id):
            raise AlreadyReviewedError(request.product_id)

        self.products.get_product(request.product_id)

        review = Review(
            user_id=user_id,
            product_id=request.product_id,
            order_id=order.id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
            pros=request.pros,
            cons=request.cons,
            verified_purchase=True,
            status=ReviewStatus.PENDING,
        )
        # A concurrent request may have inserted the same
        # (user, product) pair since the check above.
        try:
            with self.db.begin_nested():
                self.db.add(review)
        except IntegrityError as exc:
            raise AlreadyReviewedError(request.product_id) from exc

        logger.info(
            "Review %s created user=%s product=%s rating=%s",
            review.id, user_id, request.product_id, request.rating,
        )
        return review

    def get_review(self, review_id: int) -> Review:
        review = self.db.get(Review, review_id)
        if not review:
            raise ReviewNotFoundError(review_id)
        return review

    def find_user_review(self, user_id: int, product_id: int) -> Review | None:
        return self.db.execute(
            select(Review).where(Review.user_id == user_id, Review.product_id == product_id)
        ).scalar_one_or_none()

    def get_product_reviews(self, product_id: int, page: int = 1, limit: int = 10) -> dict:
        """Approved reviews of a product, newest first, with rating stats."""
        self.products.get_product(product_id)
        conditions = [
            Review.product_id == product_id,
            Review.status == ReviewStatus.APPROVED,
        ]
        total = self.db.execute(
            select(func.count(Review.id)).where(*conditions)
        ).scalar_one()
        reviews = self._page(
            select(Review)
            .where(*conditions)
            .order_by(Review.created_at.desc(), Review.id.desc()),
            page, limit,
        )
        return {
            "reviews": list(reviews),
            "total": total,
            "stats": self.rating_stats(product_id),
        }

    def rating_stats(self, product_id: int) -> dict | None:
        """
        Average rating (one decimal) and 1-5 star distribution
        of approved reviews, or None when there are none.
        """
        rows = self.db.execute(
            select(Review.rating, func.count(Review.id))
            .where(
                Review.product_id == product_id,
                Review.status == ReviewStatus.APPROVED,
            )
            .group_by(Review.rating)
        ).all()
        counts = {rating: n for rating, n in rows}
        total = sum(counts.values())
        if not total:
            return None

        average = Decimal(sum(r * n for r, n in counts.items())) / total
        return {
            "average_rating": float(_round_half_up(average, "0.1")),
            "total_reviews": total,
            "distribution": [
                {
                    "stars": stars,
                    "count": counts.get(stars, 0),
                    "percentage": int(
                        _round_half_up(Decimal(counts.get(stars, 0) * 100) / total)
                    ),
                }
                for stars in range(1, 6)
            ],
        }

    def get_user_reviews(self, user_id: int, page: int = 1, limit: int = 10) -> dict:
        """All of a user's reviews in any moderation state, newest first."""
        total = self.db.execute(
            select(func.count(Review.id)).where(Review.user_id == user_id)
        ).scalar_one()
        reviews = self._page(
            select(Review)
            .where(Review.user_id == user_id)
            .order_by(Review.created_at.desc(), Review.id.desc()),
            page, limit,
        )
        return {"reviews": list(reviews), "total": total}

    def update_review(self, user_id: int, review_id: int, request: ReviewUpdate) -> Review:
        """Edit an own review. The edit goes back to moderation."""
        review = self._get_own_review(user_id, review_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(review, field, value)
        review.status = ReviewStatus.PENDING
        self.db.flush()
        return review

    def delete_review(self, user_id: int, review_id: int) -> None:
        review = self._get_own_review(user_id, review_id)
        self.db.delete(review)
        self.db.flush()
        logger.info("Review %s deleted by user %s", review_id, user_id)

    def mark_helpful(self, review_id: int) -> Review:
        review = self.get_review(review_id)
        # Increment in SQL so concurrent votes are not lost
        self.db.execute(
            update(Review)
            .where(Review.id == review_id)
            .values(helpful_votes=Review.helpful_votes + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.refresh(review)
        return review

    def get_products_to_review(self, user_id: int) -> list[dict]:
        """
        Products from the user's delivered orders that have no
        review from the user yet. Each product is listed once,
        from its most recent delivered order.
        """
        reviewed = set(self.db.execute(
            select(Review.product_id).where(Review.user_id == user_id)
        ).scalars().all())

        orders = self.db.execute(
            select(Order)
            .where(Order.user_id == user_id, Order.status == OrderStatus.DELIVERED)
            .order_by(Order.created_at.desc(), Order.id.desc())
        ).scalars().all()

        pending = []
        for order in orders:
            for item in order.items:
                if item.product_id in reviewed:
                    continue
                reviewed.add(item.product_id)
                pending.append({
                    "order_id": order.id,
                    "order_number": order.order_number,
                    "order_date": order.created_at,
                    "product_id": item.product_id,
                    "product_name": item.product.name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                })
        return pending

    def moderate_review(
        self, review_id: int, status: ReviewStatus, moderator_note: str = ""
    ) -> Review:
        if status not in (ReviewStatus.APPROVED, ReviewStatus.REJECTED):
            raise ValidationError("Moderation status must be approved or rejected")
        review = self.get_review(review_id)
        review.status = status
        review.moderator_note = moderator_note
        self.db.flush()
        logger.info("Review %s moderated: %s", review_id, status.value)
        return review

    def get_pending_reviews(self, page: int = 1, limit: int = 20) -> dict:
        """The moderation queue, newest first."""
        condition = Review.status == ReviewStatus.PENDING
        total = self.db.execute(
            select(func.count(Review.id)).where(condition)
        ).scalar_one()
        reviews = self._page(
            select(Review)
            .where(condition)
            .order_by(Review.created_at.desc(), Review.id.desc()),
            page, limit,
        )
        return {"reviews": list(reviews), "total": total}
