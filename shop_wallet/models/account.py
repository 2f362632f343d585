"""
Wallet account model.

One row per user holding the spendable balance. The balance is
stored (not derived) and only the settlement engine in
WalletService may change it, always together with a ledger entry
that records the before and after values.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Integer, String, DateTime, Numeric, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_wallet.models.base import Base


class Account(Base):
    __tablename__ = "wallet_accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_wallet_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        Integer, unique=True, nullable=False, index=True
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00")
    )
    currency: Mapped[str] = mapped_column(
        String(3), nullable=False, default="PLN"
    )
    # Bumped on every UPDATE; a stale writer matches zero rows
    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    entries: Mapped[list["LedgerEntry"]] = relationship(
        back_populates="account"
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Account user={self.user_id} {self.balance} {self.currency}>"
