"""
Pydantic schemas for ledger history and verification.

These define the API contract. They are separate from the
database models because the API shape and the storage shape
are often different.
"""

import math
import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel

from shop_wallet.models.enums import LedgerEntryKind, LedgerEntryStatus


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class LedgerEntryResponse(BaseModel):
    """Single entry in API responses."""
    id: int
    external_id: uuid.UUID
    kind: LedgerEntryKind
    status: LedgerEntryStatus
    amount: Decimal
    balance_before: Decimal
    balance_after: Decimal
    currency: str
    description: str
    payment_method: str
    related_order_id: int | None
    created_at: datetime

    model_config = {"from_attributes": True}


class LedgerHistoryResponse(BaseModel):
    entries: list[LedgerEntryResponse]
    pagination: Pagination


class LedgerVerificationResponse(BaseModel):
    is_consistent: bool
    entry_count: int
    balance: Decimal
    ledger_balance: Decimal
    problems: list[str]
