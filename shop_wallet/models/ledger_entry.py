"""
Ledger entry model.

Each entry records one balance-affecting event on a wallet:
the amount moved and the balance immediately before and after.
Entries are immutable: once written, they are never modified
or deleted.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Integer, String, DateTime, Numeric, ForeignKey,
    Enum as SAEnum, Uuid, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shop_wallet.models.base import Base
from shop_wallet.models.enums import LedgerEntryKind, LedgerEntryStatus


class LedgerEntry(Base):
    """
    An immutable record of one wallet balance change.

    balance_after = balance_before + amount for deposits and refunds,
    balance_after = balance_before - amount for payments. The rule is
    enforced by WalletService and re-checked by LedgerService.
    """

    __tablename__ = "wallet_transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_ledger_amount_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    external_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4
    )
    account_id: Mapped[int] = mapped_column(
        ForeignKey("wallet_accounts.id"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    kind: Mapped[LedgerEntryKind] = mapped_column(
        SAEnum(
            LedgerEntryKind,
            name="ledger_entry_kind_enum",
            create_constraint=True,
        ),
        nullable=False,
        index=True,
    )
    status: Mapped[LedgerEntryStatus] = mapped_column(
        SAEnum(
            LedgerEntryStatus,
            name="ledger_entry_status_enum",
            create_constraint=True,
        ),
        nullable=False,
        default=LedgerEntryStatus.COMPLETED,
    )
    amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    balance_before: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    balance_after: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(30), nullable=False, default="unknown"
    )
    related_order_id: Mapped[int | None] = mapped_column(
        ForeignKey("orders.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )

    account: Mapped["Account"] = relationship(back_populates="entries")
    related_order: Mapped["Order"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry {self.kind.value} {self.amount} "
            f"{self.balance_before}->{self.balance_after}>"
        )
