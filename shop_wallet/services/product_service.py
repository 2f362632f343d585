"""
Product service — the catalog the settlement engine prices from.
"""

import logging

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from shop_wallet.errors import ProductNotFoundError
from shop_wallet.models.product import Product
from shop_wallet.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)

# Columns that reject NULL; a null in a partial update leaves them as they are
NON_NULLABLE_FIELDS = ("name", "category", "description", "price")


class ProductService:

    def __init__(self, db: Session):
        self.db = db

    def create_product(self, request: ProductCreate) -> Product:
        product = Product(
            name=request.name,
            category=request.category,
            description=request.description,
            price=request.price,
            offer_price=request.offer_price,
        )
        self.db.add(product)
        self.db.flush()
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def get_product(self, product_id: int, active_only: bool = False) -> Product:
        """
        Get a product by ID.

        With active_only=True a deactivated product is treated
        as missing; purchases use this so withdrawn products
        cannot be bought.
        """
        product = self.db.get(Product, product_id)
        if not product or (active_only and not product.is_active):
            raise ProductNotFoundError(product_id)
        return product

    def list_products(
        self,
        category: str | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Product], int]:
        """Return one page of active products and the total count."""
        conditions = [Product.is_active.is_(True)]
        if category:
            conditions.append(Product.category == category)

        total = self.db.execute(
            select(func.count(Product.id)).where(*conditions)
        ).scalar_one()
        products = self.db.execute(
            select(Product)
            .where(*conditions)
            .order_by(Product.id)
            .limit(limit)
            .offset((page - 1) * limit)
        ).scalars().all()
        return list(products), total

    def update_product(self, product_id: int, request: ProductUpdate) -> Product:
        product = self.get_product(product_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if field in NON_NULLABLE_FIELDS and value is None:
                continue
            setattr(product, field, value)
        self.db.flush()
        return product

    def deactivate_product(self, product_id: int) -> Product:
        """Soft delete. Existing order items keep their reference."""
        product = self.get_product(product_id)
        product.is_active = False
        self.db.flush()
        logger.info("Deactivated product %s", product_id)
        return product
