"""
Wallet API endpoints.

The API layer is thin: it resolves the caller, delegates to
WalletService and owns the transaction boundary. A settlement
is committed only if the service returned normally; any error
rolls back balance, ledger and order writes together.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shop_wallet.api.deps import get_current_user_id
from shop_wallet.config import get_settings
from shop_wallet.models.base import get_db
from shop_wallet.models.enums import LedgerEntryKind
from shop_wallet.money import format_money
from shop_wallet.schemas.account import (
    AccountResponse,
    BalanceResponse,
    DepositRequest,
    DepositResponse,
)
from shop_wallet.schemas.ledger import (
    LedgerEntryResponse,
    LedgerHistoryResponse,
    Pagination,
)
from shop_wallet.schemas.order import (
    OrderResponse,
    PurchaseRequest,
    PurchaseResponse,
    RefundRequest,
    RefundResponse,
)
from shop_wallet.services.account_service import AccountService
from shop_wallet.services.wallet_service import WalletService

settings = get_settings()

router = APIRouter(prefix="/wallet", tags=["Wallet"])


@router.post("", response_model=AccountResponse, status_code=201)
def open_wallet(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Open an empty wallet for the caller."""
    service = AccountService(db)
    try:
        account = service.open_account(user_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return account


@router.get("/balance", response_model=BalanceResponse)
def get_balance(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    wallet = WalletService(db).get_balance(user_id)
    return BalanceResponse(
        balance=wallet["balance"],
        currency=wallet["currency"],
        formatted_balance=format_money(wallet["balance"], wallet["currency"]),
    )


@router.post("/deposit", response_model=DepositResponse)
def deposit(
    request: DepositRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Top up the caller's wallet."""
    service = WalletService(db)
    try:
        result = service.deposit(
            user_id,
            request.amount,
            payment_method=request.payment_method,
            description=request.description,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return DepositResponse(
        ledger_entry=LedgerEntryResponse.model_validate(result.ledger_entry),
        new_balance=result.new_balance,
        formatted_balance=format_money(result.new_balance, settings.WALLET_CURRENCY),
    )


@router.get("/transactions", response_model=LedgerHistoryResponse)
def get_transactions(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    kind: LedgerEntryKind | None = None,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """The caller's ledger entries, newest first."""
    history = WalletService(db).get_history(user_id, page, limit, kind)
    return LedgerHistoryResponse(
        entries=[LedgerEntryResponse.model_validate(e) for e in history["entries"]],
        pagination=Pagination.build(page, limit, history["total"]),
    )


@router.post("/purchase", response_model=PurchaseResponse, status_code=201)
def purchase(
    request: PurchaseRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Buy products with the wallet balance."""
    service = WalletService(db)
    try:
        result = service.purchase(
            user_id,
            request.items,
            request.shipping_address,
            notes=request.notes,
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    return PurchaseResponse(
        order=OrderResponse.model_validate(result.order),
        ledger_entry=LedgerEntryResponse.model_validate(result.ledger_entry),
        new_balance=result.new_balance,
        formatted_balance=format_money(result.new_balance, settings.WALLET_CURRENCY),
    )


@router.post("/refund", response_model=RefundResponse)
def refund(
    request: RefundRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Refund a delivered order back to the wallet."""
    service = WalletService(db)
    try:
        result = service.refund(user_id, request.order_id, request.reason)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return RefundResponse(
        refund_amount=result.refund_amount,
        new_balance=result.new_balance,
        formatted_balance=format_money(result.new_balance, settings.WALLET_CURRENCY),
        ledger_entry=LedgerEntryResponse.model_validate(result.ledger_entry),
    )
