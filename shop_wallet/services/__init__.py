"""Business logic services."""

from shop_wallet.services.account_service import AccountService
from shop_wallet.services.ledger_service import LedgerService
from shop_wallet.services.order_service import OrderService
from shop_wallet.services.product_service import ProductService
from shop_wallet.services.review_service import ReviewService
from shop_wallet.services.wallet_service import WalletService

__all__ = [
    "AccountService",
    "LedgerService",
    "OrderService",
    "ProductService",
    "ReviewService",
    "WalletService",
]
