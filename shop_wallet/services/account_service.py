"""
Account service — opens wallets and reads balances.

Balance writes are not done here: only WalletService moves
money, and always together with a ledger entry.
"""

import logging
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from shop_wallet.config import get_settings
from shop_wallet.errors import AccountExistsError, AccountNotFoundError
from shop_wallet.models.account import Account

logger = logging.getLogger(__name__)


class AccountService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()

    def open_account(self, user_id: int) -> Account:
        """Create an empty wallet for a user."""
        existing = self.db.execute(
            select(Account).where(Account.user_id == user_id)
        ).scalar_one_or_none()

        if existing:
            raise AccountExistsError(user_id)

        account = Account(
            user_id=user_id,
            balance=Decimal("0.00"),
            currency=self.settings.WALLET_CURRENCY,
        )
        self.db.add(account)
        self.db.flush()
        logger.info("Opened wallet for user %s", user_id)
        return account

    def get_account(self, user_id: int) -> Account:
        """Get a user's wallet."""
        account = self.db.execute(
            select(Account).where(Account.user_id == user_id)
        ).scalar_one_or_none()
        if not account:
            raise AccountNotFoundError(user_id)
        return account

    def lock_account(self, user_id: int) -> Account:
        """
        Load a user's wallet with a row lock held until the
        session's transaction ends.

        populate_existing makes sure an instance already in the
        identity map is refreshed with the values read under the
        lock, not the ones loaded earlier in the session.
        """
        account = self.db.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not account:
            raise AccountNotFoundError(user_id)
        return account

    def get_balance(self, user_id: int) -> Decimal:
        return self.get_account(user_id).balance
