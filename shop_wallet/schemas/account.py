"""
Pydantic schemas for wallet accounts and deposits.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from shop_wallet.schemas.ledger import LedgerEntryResponse


class AccountResponse(BaseModel):
    id: int
    user_id: int
    balance: Decimal
    currency: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BalanceResponse(BaseModel):
    balance: Decimal
    currency: str
    formatted_balance: str


class DepositRequest(BaseModel):
    # Range and precision are business rules checked by
    # WalletService so they map onto the wallet error codes.
    amount: Decimal
    payment_method: str | None = Field(default=None, max_length=30)
    description: str | None = Field(default=None, max_length=255)


class DepositResponse(BaseModel):
    ledger_entry: LedgerEntryResponse
    new_balance: Decimal
    formatted_balance: str
