"""
Product catalog model.

The settlement engine reads price and offer_price from here when
it prices an order. Products are never deleted, only deactivated,
so existing order items keep a valid reference.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Boolean, DateTime, Numeric, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shop_wallet.models.base import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_product_price_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    offer_price: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    @property
    def effective_price(self) -> Decimal:
        """
        Price charged at checkout.

        An offer price only applies when it is lower than the base
        price; a misconfigured higher "offer" never raises the price.
        """
        if self.offer_price is None:
            return self.price
        return min(self.price, self.offer_price)

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} {self.effective_price}>"
