"""
Wallet error taxonomy.

Every business rule violation raises a subclass of WalletError.
Each error carries a stable numeric code, a human readable
message and the HTTP status the API layer answers with.

Code ranges:
  1xxx: Amount / request validation
  2xxx: Account
  3xxx: Product
  4xxx: Order
  5xxx: Review
  9xxx: System
"""

from decimal import Decimal


class WalletError(Exception):
    """Base class for all wallet errors."""

    def __init__(self, code: int, message: str, http_status: int = 400) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Validation ---

class InvalidAmountError(WalletError):
    def __init__(self, message: str = "Amount must be greater than 0") -> None:
        super().__init__(1001, message, 422)


class AmountExceedsLimitError(WalletError):
    def __init__(self, amount: Decimal, limit: Decimal, currency: str) -> None:
        self.amount = amount
        self.limit = limit
        super().__init__(
            1002,
            f"Maximum deposit amount is {limit:.2f} {currency}, got {amount:.2f}",
            422,
        )


class ValidationError(WalletError):
    """Malformed input the schemas could not catch (empty items, blank address fields)."""

    def __init__(self, message: str) -> None:
        super().__init__(1003, message, 422)


# --- 2xxx: Account ---

class AccountNotFoundError(WalletError):
    def __init__(self, user_id: int) -> None:
        super().__init__(2001, f"Wallet not found for user {user_id}", 404)


class InsufficientFundsError(WalletError):
    def __init__(self, required: Decimal, available: Decimal, currency: str) -> None:
        self.required = required
        self.available = available
        super().__init__(
            2002,
            f"Insufficient funds: required {required:.2f} {currency}, "
            f"available {available:.2f} {currency}",
            422,
        )


class AccountExistsError(WalletError):
    def __init__(self, user_id: int) -> None:
        super().__init__(2003, f"Wallet already exists for user {user_id}", 409)


class ConcurrentUpdateError(WalletError):
    def __init__(self, user_id: int) -> None:
        super().__init__(
            2004,
            f"Wallet of user {user_id} was modified concurrently, retry the request",
            409,
        )


# --- 3xxx: Product ---

class ProductNotFoundError(WalletError):
    def __init__(self, product_id: int) -> None:
        super().__init__(3001, f"Product {product_id} not found", 404)


# --- 4xxx: Order ---

class OrderNotFoundError(WalletError):
    def __init__(self, order_id: int) -> None:
        super().__init__(4001, f"Order {order_id} not found", 404)


class AlreadyRefundedError(WalletError):
    def __init__(self, order_number: str) -> None:
        super().__init__(4002, f"Order {order_number} has already been refunded", 409)


class InvalidRefundStateError(WalletError):
    def __init__(self, message: str) -> None:
        super().__init__(4003, message, 409)


class InvalidStatusTransitionError(WalletError):
    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            4004,
            f"Cannot transition order from {current} to {requested}",
            409,
        )


# --- 5xxx: Review ---

class ReviewNotFoundError(WalletError):
    def __init__(self, review_id: int) -> None:
        super().__init__(5001, f"Review {review_id} not found", 404)


class ReviewNotAllowedError(WalletError):
    """Only buyers of a delivered order may review its products."""

    def __init__(self, product_id: int) -> None:
        super().__init__(
            5002,
            f"Product {product_id} can only be reviewed after a delivered purchase",
            403,
        )


class AlreadyReviewedError(WalletError):
    def __init__(self, product_id: int) -> None:
        super().__init__(5003, f"Product {product_id} has already been reviewed", 409)


class ReviewOwnershipError(WalletError):
    def __init__(self, review_id: int) -> None:
        super().__init__(5004, f"Review {review_id} belongs to another user", 403)
