"""
Pydantic schemas for purchases, refunds and orders.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from shop_wallet.models.enums import OrderStatus, PaymentMethod, PaymentStatus
from shop_wallet.schemas.ledger import LedgerEntryResponse, Pagination


# --- Request Schemas ---

class ShippingAddress(BaseModel):
    # Blank fields are rejected by WalletService with a
    # ValidationError naming the missing field.
    street: str = Field(default="", max_length=255)
    city: str = Field(default="", max_length=100)
    postal_code: str = Field(default="", max_length=20)
    country: str = Field(default="", max_length=100)


class PurchaseItem(BaseModel):
    product_id: int
    quantity: int


class PurchaseRequest(BaseModel):
    items: list[PurchaseItem]
    shipping_address: ShippingAddress
    notes: str | None = Field(default=None, max_length=2000)


class RefundRequest(BaseModel):
    order_id: int
    reason: str = Field(max_length=500)


class CancelRequest(BaseModel):
    reason: str = Field(default="Cancelled by customer", max_length=500)


class OrderStatusUpdate(BaseModel):
    new_status: OrderStatus


# --- Response Schemas ---

class OrderItemResponse(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = {"from_attributes": True}


class OrderResponse(BaseModel):
    id: int
    order_number: str
    user_id: int
    items: list[OrderItemResponse]
    total_amount: Decimal
    currency: str
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    shipping_address: ShippingAddress
    notes: str | None
    ledger_entry_id: int | None
    refund_reason: str | None
    refunded_at: datetime | None
    cancel_reason: str | None
    cancelled_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class OrderDetailResponse(OrderResponse):
    """Single order view, with the payment and refund entries that settled it."""
    ledger_entries: list[LedgerEntryResponse] = []


class OrderSummaryResponse(BaseModel):
    """Order row in history listings."""
    id: int
    order_number: str
    total_amount: Decimal
    currency: str
    status: OrderStatus
    item_count: int
    created_at: datetime


class OrderHistoryResponse(BaseModel):
    orders: list[OrderSummaryResponse]
    pagination: Pagination


class PurchaseResponse(BaseModel):
    order: OrderResponse
    ledger_entry: LedgerEntryResponse
    new_balance: Decimal
    formatted_balance: str


class RefundResponse(BaseModel):
    refund_amount: Decimal
    new_balance: Decimal
    formatted_balance: str
    ledger_entry: LedgerEntryResponse


class CancelResponse(BaseModel):
    order: OrderResponse
    ledger_entry: LedgerEntryResponse | None
    new_balance: Decimal
