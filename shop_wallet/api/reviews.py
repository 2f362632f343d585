"""
Review API endpoints.

Buyers write and manage their own reviews; the moderation
routes are used by the back office and are not scoped to the
caller.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from shop_wallet.api.deps import get_current_user_id
from shop_wallet.config import get_settings
from shop_wallet.models.base import get_db
from shop_wallet.schemas.ledger import Pagination
from shop_wallet.schemas.review import (
    ModerationRequest,
    ProductReviewsResponse,
    ProductToReview,
    ReviewCreate,
    ReviewListResponse,
    ReviewResponse,
    ReviewUpdate,
)
from shop_wallet.services.review_service import ReviewService

settings = get_settings()

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResponse, status_code=201)
def create_review(
    request: ReviewCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Review a product from one of the caller's delivered orders."""
    service = ReviewService(db)
    try:
        review = service.create_review(user_id, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return review


@router.get("/product/{product_id}", response_model=ProductReviewsResponse)
def get_product_reviews(
    product_id: int,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    result = ReviewService(db).get_product_reviews(product_id, page, limit)
    return ProductReviewsResponse(
        reviews=[ReviewResponse.model_validate(r) for r in result["reviews"]],
        stats=result["stats"],
        pagination=Pagination.build(page, limit, result["total"]),
    )


@router.get("/mine", response_model=ReviewListResponse)
def get_my_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    result = ReviewService(db).get_user_reviews(user_id, page, limit)
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in result["reviews"]],
        pagination=Pagination.build(page, limit, result["total"]),
    )


@router.get("/to-review", response_model=list[ProductToReview])
def get_products_to_review(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return ReviewService(db).get_products_to_review(user_id)


@router.get("/pending", response_model=ReviewListResponse)
def get_pending_reviews(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Moderation queue."""
    result = ReviewService(db).get_pending_reviews(page, limit)
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in result["reviews"]],
        pagination=Pagination.build(page, limit, result["total"]),
    )


@router.patch("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    request: ReviewUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    service = ReviewService(db)
    try:
        review = service.update_review(user_id, review_id, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return review


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    service = ReviewService(db)
    try:
        service.delete_review(user_id, review_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return Response(status_code=204)


@router.post("/{review_id}/helpful", response_model=ReviewResponse)
def mark_review_helpful(
    review_id: int,
    db: Session = Depends(get_db),
):
    service = ReviewService(db)
    try:
        review = service.mark_helpful(review_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return review


@router.patch("/{review_id}/moderation", response_model=ReviewResponse)
def moderate_review(
    review_id: int,
    request: ModerationRequest,
    db: Session = Depends(get_db),
):
    service = ReviewService(db)
    try:
        review = service.moderate_review(
            review_id, request.status, request.moderator_note
        )
        db.commit()
    except Exception:
        db.rollback()
        raise
    return review
