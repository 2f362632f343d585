"""
Product catalog API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shop_wallet.config import get_settings
from shop_wallet.models.base import get_db
from shop_wallet.schemas.product import (
    ProductCreate,
    ProductListResponse,
    ProductResponse,
    ProductUpdate,
)
from shop_wallet.services.product_service import ProductService

settings = get_settings()

router = APIRouter(prefix="/products", tags=["Products"])


@router.post("", response_model=ProductResponse, status_code=201)
def create_product(
    request: ProductCreate,
    db: Session = Depends(get_db),
):
    service = ProductService(db)
    try:
        product = service.create_product(request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return product


@router.get("", response_model=ProductListResponse)
def list_products(
    category: str | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    """Active products, optionally filtered by category."""
    products, total = ProductService(db).list_products(category, page, limit)
    return ProductListResponse(
        products=[ProductResponse.model_validate(p) for p in products],
        total=total,
    )


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    return ProductService(db).get_product(product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductUpdate,
    db: Session = Depends(get_db),
):
    service = ProductService(db)
    try:
        product = service.update_product(product_id, request)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return product


@router.delete("/{product_id}", response_model=ProductResponse)
def deactivate_product(
    product_id: int,
    db: Session = Depends(get_db),
):
    """Withdraw a product from sale. Past orders keep referencing it."""
    service = ProductService(db)
    try:
        product = service.deactivate_product(product_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return product
