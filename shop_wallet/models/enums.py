"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class LedgerEntryKind(str, enum.Enum):
    """What moved the wallet balance."""
    DEPOSIT = "deposit"
    PAYMENT = "payment"
    REFUND = "refund"


class LedgerEntryStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    """How an order is paid. Only WALLET is settled end-to-end."""
    WALLET = "wallet"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    BLIK = "blik"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class ReviewStatus(str, enum.Enum):
    """Moderation state. Only APPROVED reviews are shown on a product."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
