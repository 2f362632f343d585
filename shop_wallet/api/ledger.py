"""
Ledger API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop_wallet.api.deps import get_current_user_id
from shop_wallet.models.base import get_db
from shop_wallet.schemas.ledger import LedgerVerificationResponse
from shop_wallet.services.wallet_service import WalletService

router = APIRouter(prefix="/ledger", tags=["Ledger"])


@router.get("/verify", response_model=LedgerVerificationResponse)
def verify_ledger(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Re-check the caller's ledger chain against the stored balance.
    """
    return WalletService(db).verify_ledger(user_id)
