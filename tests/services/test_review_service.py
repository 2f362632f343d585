"""
Tests for the ReviewService.
"""

import pytest
from pydantic import ValidationError as SchemaValidationError

from shop_wallet.errors import (
    AlreadyReviewedError,
    ReviewNotAllowedError,
    ReviewNotFoundError,
    ReviewOwnershipError,
    ValidationError,
)
from shop_wallet.models.enums import ReviewStatus
from shop_wallet.schemas.review import ReviewCreate, ReviewUpdate
from shop_wallet.services.review_service import ReviewService

from conftest import buy, create_product, deliver, open_wallet


def delivered_purchase(db_session, user_id=1, *lines):
    open_wallet(db_session, user_id=user_id, deposit="500.00")
    order = buy(db_session, user_id, *lines).order
    deliver(db_session, order)
    return order


def review_request(product, order, rating=5, **overrides):
    data = {
        "product_id": product.id,
        "order_id": order.id,
        "rating": rating,
        "title": "Great mug",
        "comment": "Keeps the coffee hot for ages.",
    }
    data.update(overrides)
    return ReviewCreate(**data)


def write_review(db_session, product, order, user_id=1, rating=5, approve=False):
    service = ReviewService(db_session)
    review = service.create_review(user_id, review_request(product, order, rating))
    if approve:
        service.moderate_review(review.id, ReviewStatus.APPROVED)
    db_session.commit()
    return review


class TestCreateReview:

    def test_review_of_delivered_product(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))

        review = write_review(db_session, product, order)

        assert review.id is not None
        assert review.status == ReviewStatus.PENDING
        assert review.verified_purchase is True
        assert review.helpful_votes == 0

    def test_undelivered_order_rejected(self, db_session):
        product = create_product(db_session)
        open_wallet(db_session, deposit="100.00")
        order = buy(db_session, 1, (product, 1)).order

        with pytest.raises(ReviewNotAllowedError):
            ReviewService(db_session).create_review(1, review_request(product, order))

    def test_product_not_in_order_rejected(self, db_session):
        bought = create_product(db_session, name="Mug")
        other = create_product(db_session, name="Lamp")
        order = delivered_purchase(db_session, 1, (bought, 1))

        with pytest.raises(ReviewNotAllowedError):
            ReviewService(db_session).create_review(1, review_request(other, order))

    def test_someone_elses_order_rejected(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))

        with pytest.raises(ReviewNotAllowedError):
            ReviewService(db_session).create_review(2, review_request(product, order))

    def test_second_review_of_same_product_rejected(self, db_session):
        product = create_product(db_session)
        first = delivered_purchase(db_session, 1, (product, 1))
        second = buy(db_session, 1, (product, 1)).order
        deliver(db_session, second)
        write_review(db_session, product, first)

        with pytest.raises(AlreadyReviewedError):
            ReviewService(db_session).create_review(1, review_request(product, second))

    def test_blank_pros_and_cons_dropped(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))

        review = ReviewService(db_session).create_review(1, review_request(
            product, order, pros=[" Sturdy ", "  "], cons=[""],
        ))
        assert review.pros == ["Sturdy"]
        assert review.cons == []

    @pytest.mark.parametrize("overrides", [
        {"rating": 0},
        {"rating": 6},
        {"title": "   "},
        {"comment": "Too short"},
        {"pros": ["x" * 201]},
    ])
    def test_invalid_review_rejected_by_schema(self, db_session, overrides):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        with pytest.raises(SchemaValidationError):
            review_request(product, order, **overrides)


class TestProductReviews:

    def test_only_approved_reviews_listed(self, db_session):
        product = create_product(db_session)
        o1 = delivered_purchase(db_session, 1, (product, 1))
        o2 = delivered_purchase(db_session, 2, (product, 1))
        write_review(db_session, product, o1, user_id=1, approve=True)
        write_review(db_session, product, o2, user_id=2)

        result = ReviewService(db_session).get_product_reviews(product.id)
        assert result["total"] == 1
        assert [r.user_id for r in result["reviews"]] == [1]

    def test_stats(self, db_session):
        product = create_product(db_session)
        ratings = {1: 5, 2: 4, 3: 4}
        for user_id, rating in ratings.items():
            order = delivered_purchase(db_session, user_id, (product, 1))
            write_review(db_session, product, order, user_id=user_id, rating=rating, approve=True)

        stats = ReviewService(db_session).get_product_reviews(product.id)["stats"]
        assert stats["average_rating"] == 4.3
        assert stats["total_reviews"] == 3
        buckets = {b["stars"]: b for b in stats["distribution"]}
        assert buckets[4]["count"] == 2
        assert buckets[4]["percentage"] == 67
        assert buckets[5]["percentage"] == 33
        assert buckets[1]["count"] == 0

    def test_no_stats_without_approved_reviews(self, db_session):
        product = create_product(db_session)
        result = ReviewService(db_session).get_product_reviews(product.id)
        assert result["stats"] is None
        assert result["reviews"] == []


class TestEditAndDelete:

    def test_edit_sends_review_back_to_moderation(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order, approve=True)

        ReviewService(db_session).update_review(1, review.id, ReviewUpdate(rating=3))
        db_session.commit()

        assert review.rating == 3
        assert review.title == "Great mug"
        assert review.status == ReviewStatus.PENDING

    def test_edit_by_other_user_rejected(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)

        with pytest.raises(ReviewOwnershipError):
            ReviewService(db_session).update_review(2, review.id, ReviewUpdate(rating=1))

    def test_delete_own_review(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)
        review_id = review.id

        service = ReviewService(db_session)
        service.delete_review(1, review_id)
        db_session.commit()

        with pytest.raises(ReviewNotFoundError):
            service.get_review(review_id)

    def test_delete_by_other_user_rejected(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)

        with pytest.raises(ReviewOwnershipError):
            ReviewService(db_session).delete_review(2, review.id)


class TestHelpfulAndModeration:

    def test_mark_helpful_increments(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)
        service = ReviewService(db_session)

        service.mark_helpful(review.id)
        service.mark_helpful(review.id)
        db_session.commit()

        assert service.get_review(review.id).helpful_votes == 2

    def test_mark_helpful_unknown_review(self, db_session):
        with pytest.raises(ReviewNotFoundError):
            ReviewService(db_session).mark_helpful(999)

    def test_moderation_to_pending_rejected(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)

        with pytest.raises(ValidationError):
            ReviewService(db_session).moderate_review(review.id, ReviewStatus.PENDING)

    def test_reject_with_note(self, db_session):
        product = create_product(db_session)
        order = delivered_purchase(db_session, 1, (product, 1))
        review = write_review(db_session, product, order)

        ReviewService(db_session).moderate_review(
            review.id, ReviewStatus.REJECTED, "Off topic"
        )
        db_session.commit()
        assert review.status == ReviewStatus.REJECTED
        assert review.moderator_note == "Off topic"

    def test_pending_queue(self, db_session):
        product = create_product(db_session)
        o1 = delivered_purchase(db_session, 1, (product, 1))
        o2 = delivered_purchase(db_session, 2, (product, 1))
        write_review(db_session, product, o1, user_id=1, approve=True)
        pending = write_review(db_session, product, o2, user_id=2)

        result = ReviewService(db_session).get_pending_reviews()
        assert result["total"] == 1
        assert result["reviews"][0].id == pending.id


class TestProductsToReview:

    def test_lists_unreviewed_delivered_products_once(self, db_session):
        mug = create_product(db_session, name="Mug")
        lamp = create_product(db_session, name="Lamp", price="50.00")
        first = delivered_purchase(db_session, 1, (mug, 1), (lamp, 2))
        second = buy(db_session, 1, (lamp, 1)).order
        deliver(db_session, second)
        write_review(db_session, mug, first)

        pending = ReviewService(db_session).get_products_to_review(1)
        assert [p["product_name"] for p in pending] == ["Lamp"]
        assert pending[0]["order_id"] == second.id
        assert pending[0]["quantity"] == 1

    def test_undelivered_orders_ignored(self, db_session):
        mug = create_product(db_session)
        open_wallet(db_session, deposit="100.00")
        buy(db_session, 1, (mug, 1))

        assert ReviewService(db_session).get_products_to_review(1) == []
