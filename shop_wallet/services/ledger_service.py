"""
Ledger service — the append-only record of wallet balance changes.

This service enforces the rules on individual entries:
1. Amounts are positive
2. balance_after = balance_before +/- amount, sign per kind
3. Entries are never updated or deleted

It also answers history queries and can re-verify that an
account's entries form an unbroken chain ending at the stored
balance.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from shop_wallet.models.account import Account
from shop_wallet.models.enums import LedgerEntryKind, LedgerEntryStatus
from shop_wallet.models.ledger_entry import LedgerEntry

logger = logging.getLogger(__name__)

# Kinds that add to the balance; everything else subtracts.
CREDIT_KINDS = {LedgerEntryKind.DEPOSIT, LedgerEntryKind.REFUND}


def expected_balance_after(
    kind: LedgerEntryKind, balance_before: Decimal, amount: Decimal
) -> Decimal:
    if kind in CREDIT_KINDS:
        return balance_before + amount
    return balance_before - amount


class LedgerService:
    """
    All ledger reads and writes pass through this service.

    The service takes a database session as a constructor
    argument. The caller controls the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def append_entry(
        self,
        account: Account,
        kind: LedgerEntryKind,
        amount: Decimal,
        balance_before: Decimal,
        balance_after: Decimal,
        description: str,
        payment_method: str = "unknown",
        related_order_id: int | None = None,
    ) -> LedgerEntry:
        """
        Add a completed entry to the session.

        Raises ValueError if the entry does not satisfy the
        before/after rule for its kind. That is a programming
        error in the caller, not a user error.
        """
        if amount <= 0:
            raise ValueError(f"Ledger amount must be positive, got {amount}")

        expected = expected_balance_after(kind, balance_before, amount)
        if balance_after != expected:
            raise ValueError(
                f"Ledger entry does not balance: {kind.value} of {amount} "
                f"from {balance_before} must end at {expected}, not {balance_after}"
            )

        entry = LedgerEntry(
            account_id=account.id,
            user_id=account.user_id,
            kind=kind,
            status=LedgerEntryStatus.COMPLETED,
            amount=amount,
            balance_before=balance_before,
            balance_after=balance_after,
            currency=account.currency,
            description=description,
            payment_method=payment_method,
            related_order_id=related_order_id,
        )
        self.db.add(entry)
        return entry

    def query_history(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        kind: LedgerEntryKind | None = None,
    ) -> tuple[list[LedgerEntry], int]:
        """Return one page of a user's entries, newest first, and the total count."""
        conditions = [LedgerEntry.user_id == user_id]
        if kind is not None:
            conditions.append(LedgerEntry.kind == kind)

        total = self.db.execute(
            select(func.count(LedgerEntry.id)).where(*conditions)
        ).scalar_one()

        entries = self.db.execute(
            select(LedgerEntry)
            .where(*conditions)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        ).scalars().all()
        return list(entries), total

    def get_entries_for_order(self, order_id: int) -> list[LedgerEntry]:
        """Return all entries linked to an order, oldest first."""
        entries = self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.related_order_id == order_id)
            .order_by(LedgerEntry.id)
        ).scalars().all()
        return list(entries)

    def verify_account(self, account: Account) -> dict:
        """
        Re-check the entry chain of one wallet.

        Walks the entries in insertion order and checks that
        each one respects its kind's sign rule, that each
        entry starts where the previous one ended, that the
        first one starts at zero and that the last one ends
        at the stored balance.
        """
        entries = self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account.id)
            .order_by(LedgerEntry.id)
        ).scalars().all()

        problems = []
        running = Decimal("0.00")
        for entry in entries:
            if entry.balance_before != running:
                problems.append(
                    f"Entry {entry.id} starts at {entry.balance_before}, "
                    f"previous balance was {running}"
                )
            expected = expected_balance_after(
                entry.kind, entry.balance_before, entry.amount
            )
            if entry.balance_after != expected:
                problems.append(
                    f"Entry {entry.id} ({entry.kind.value} {entry.amount}) "
                    f"ends at {entry.balance_after}, expected {expected}"
                )
            running = entry.balance_after

        if running != account.balance:
            problems.append(
                f"Stored balance {account.balance} differs from "
                f"ledger balance {running}"
            )

        if problems:
            logger.warning(
                "Ledger inconsistency for user %s: %s",
                account.user_id, "; ".join(problems),
            )

        return {
            "is_consistent": not problems,
            "entry_count": len(entries),
            "balance": account.balance,
            "ledger_balance": running,
            "problems": problems,
        }
