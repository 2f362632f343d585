"""
Order API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shop_wallet.api.deps import get_current_user_id
from shop_wallet.config import get_settings
from shop_wallet.models.base import get_db
from shop_wallet.schemas.ledger import LedgerEntryResponse, Pagination
from shop_wallet.schemas.order import (
    CancelRequest,
    CancelResponse,
    OrderDetailResponse,
    OrderHistoryResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderSummaryResponse,
)
from shop_wallet.services.order_service import OrderService
from shop_wallet.services.wallet_service import WalletService

settings = get_settings()

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get("", response_model=OrderHistoryResponse)
def get_order_history(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """The caller's orders, newest first."""
    history = WalletService(db).get_order_history(user_id, page, limit)
    return OrderHistoryResponse(
        orders=[
            OrderSummaryResponse(
                id=order.id,
                order_number=order.order_number,
                total_amount=order.total_amount,
                currency=order.currency,
                status=order.status,
                item_count=len(order.items),
                created_at=order.created_at,
            )
            for order in history["orders"]
        ],
        pagination=Pagination.build(page, limit, history["total"]),
    )


@router.get("/{order_id}", response_model=OrderDetailResponse)
def get_order(
    order_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    detail = WalletService(db).get_order_detail(user_id, order_id)
    response = OrderDetailResponse.model_validate(detail["order"])
    response.ledger_entries = [
        LedgerEntryResponse.model_validate(e) for e in detail["ledger_entries"]
    ]
    return response


@router.post("/{order_id}/cancel", response_model=CancelResponse)
def cancel_order(
    order_id: int,
    request: CancelRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Cancel an order that has not been delivered.

    Paid wallet orders are credited back to the wallet.
    """
    service = WalletService(db)
    try:
        result = service.cancel_order(user_id, order_id, request.reason)
        db.commit()
    except Exception:
        db.rollback()
        raise

    entry = result.ledger_entry
    return CancelResponse(
        order=OrderResponse.model_validate(result.order),
        ledger_entry=LedgerEntryResponse.model_validate(entry) if entry else None,
        new_balance=result.new_balance,
    )


@router.patch("/{order_id}/status", response_model=OrderResponse)
def advance_order_status(
    order_id: int,
    request: OrderStatusUpdate,
    db: Session = Depends(get_db),
):
    """
    Fulfilment transition (processing, shipped, delivered).

    Used by the back office, so it is not scoped to the caller.
    """
    service = OrderService(db)
    try:
        order = service.advance_status(order_id, request.new_status)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return order
