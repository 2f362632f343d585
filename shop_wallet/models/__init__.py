"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from shop_wallet.models.base import Base
from shop_wallet.models.enums import (
    LedgerEntryKind,
    LedgerEntryStatus,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ReviewStatus,
)
from shop_wallet.models.account import Account
from shop_wallet.models.ledger_entry import LedgerEntry
from shop_wallet.models.product import Product
from shop_wallet.models.order import Order, OrderItem, OrderSequence
from shop_wallet.models.review import Review

__all__ = [
    "Base",
    "LedgerEntryKind",
    "LedgerEntryStatus",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "ReviewStatus",
    "Account",
    "LedgerEntry",
    "Product",
    "Order",
    "OrderItem",
    "OrderSequence",
    "Review",
]
