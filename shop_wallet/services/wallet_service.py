"""
Wallet service — the settlement engine.

Every operation that changes a wallet balance lives here:
deposits, wallet purchases, refunds and cancellations of paid
orders. Each call:
1. Validates the request before touching anything
2. Locks the user's wallet row (and the order row, if any)
3. Computes the new balance and order state
4. Writes the balance, the ledger entry and the order in the
   caller's session
5. Flushes, turning a concurrent overwrite into an error

Nothing is committed here. The caller commits on success and
rolls back on any exception, so balance, ledger and order
writes always land or disappear together.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from shop_wallet.config import get_settings
from shop_wallet.errors import (
    AlreadyRefundedError,
    AmountExceedsLimitError,
    ConcurrentUpdateError,
    InsufficientFundsError,
    InvalidAmountError,
    InvalidRefundStateError,
    InvalidStatusTransitionError,
    ValidationError,
)
from shop_wallet.models.account import Account
from shop_wallet.models.enums import (
    LedgerEntryKind,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from shop_wallet.models.ledger_entry import LedgerEntry
from shop_wallet.models.order import Order, OrderItem
from shop_wallet.money import ZERO, has_cents_precision, to_money
from shop_wallet.schemas.order import PurchaseItem, ShippingAddress
from shop_wallet.services.account_service import AccountService
from shop_wallet.services.ledger_service import LedgerService
from shop_wallet.services.order_service import OrderService
from shop_wallet.services.product_service import ProductService

logger = logging.getLogger(__name__)

SHIPPING_FIELDS = ("street", "city", "postal_code", "country")


@dataclass
class DepositResult:
    ledger_entry: LedgerEntry
    new_balance: Decimal


@dataclass
class PurchaseResult:
    order: Order
    ledger_entry: LedgerEntry
    new_balance: Decimal


@dataclass
class RefundResult:
    refund_amount: Decimal
    new_balance: Decimal
    ledger_entry: LedgerEntry
    order: Order


@dataclass
class CancelResult:
    order: Order
    ledger_entry: LedgerEntry | None
    new_balance: Decimal


class WalletService:

    def __init__(self, db: Session):
        self.db = db
        self.settings = get_settings()
        self.accounts = AccountService(db)
        self.ledger = LedgerService(db)
        self.orders = OrderService(db)
        self.products = ProductService(db)

    # --- Balance mutation ---

    def _apply(
        self,
        account: Account,
        kind: LedgerEntryKind,
        amount: Decimal,
        description: str,
        payment_method: str,
        order: Order | None = None,
    ) -> LedgerEntry:
        """
        Move money on a locked account and record it.

        This is the only place that assigns Account.balance.
        The new balance and the ledger entry are flushed
        together; a StaleDataError means another transaction
        changed the row after we read it.
        """
        user_id = account.user_id
        before = account.balance
        after = before - amount if kind == LedgerEntryKind.PAYMENT else before + amount
        if after < ZERO:
            raise InsufficientFundsError(amount, before, account.currency)

        account.balance = after
        entry = self.ledger.append_entry(
            account=account,
            kind=kind,
            amount=amount,
            balance_before=before,
            balance_after=after,
            description=description,
            payment_method=payment_method,
            related_order_id=order.id if order is not None else None,
        )
        # A failed flush expires the account, so only user_id is read below
        try:
            self.db.flush()
        except StaleDataError as exc:
            logger.warning(
                "Concurrent update on wallet of user %s during %s",
                user_id, kind.value,
            )
            raise ConcurrentUpdateError(user_id) from exc
        return entry

    # --- Validation helpers ---

    def _validate_deposit_amount(self, amount) -> Decimal:
        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise InvalidAmountError(f"Invalid amount: {amount!r}") from exc

        if not value.is_finite() or value <= 0:
            raise InvalidAmountError()
        # The cap goes first: quantizing a huge value overflows the context
        if value > self.settings.MAX_DEPOSIT_AMOUNT:
            raise AmountExceedsLimitError(
                value,
                self.settings.MAX_DEPOSIT_AMOUNT,
                self.settings.WALLET_CURRENCY,
            )
        if not has_cents_precision(value):
            raise InvalidAmountError(
                f"Amount {value} has more than two fraction digits"
            )
        return to_money(value)

    @staticmethod
    def _validate_shipping_address(address: ShippingAddress | None) -> dict[str, str]:
        if address is None:
            raise ValidationError("Shipping address is required")
        fields = {name: (getattr(address, name) or "").strip() for name in SHIPPING_FIELDS}
        for name in SHIPPING_FIELDS:
            if not fields[name]:
                raise ValidationError(
                    f"Field {name} of the shipping address is required"
                )
        return fields

    @staticmethod
    def _validate_items(items: list[PurchaseItem] | None) -> None:
        if not items:
            raise ValidationError("At least one item is required")
        for item in items:
            if item.quantity is None or item.quantity <= 0:
                raise ValidationError(
                    f"Quantity for product {item.product_id} must be greater than 0"
                )

    def _validate_page(self, page: int, limit: int) -> None:
        if page < 1:
            raise ValidationError("page must be at least 1")
        if limit < 1 or limit > self.settings.MAX_PAGE_SIZE:
            raise ValidationError(
                f"limit must be between 1 and {self.settings.MAX_PAGE_SIZE}"
            )

    def _price_items(self, items: list[PurchaseItem]) -> tuple[list[OrderItem], Decimal]:
        """
        Build order lines at current catalog prices.

        unit_price is the lower of price and offer_price.
        """
        order_items = []
        total = ZERO
        for item in items:
            product = self.products.get_product(item.product_id, active_only=True)
            unit_price = to_money(product.effective_price)
            line_total = to_money(unit_price * item.quantity)
            total += line_total
            order_items.append(OrderItem(
                product_id=product.id,
                quantity=item.quantity,
                unit_price=unit_price,
                line_total=line_total,
            ))
        return order_items, total

    # --- Settlement operations ---

    def deposit(
        self,
        user_id: int,
        amount,
        payment_method: str | None = None,
        description: str | None = None,
    ) -> DepositResult:
        """
        Top up a wallet.

        Amount must be positive, in whole cents and not above
        the per-deposit limit.
        """
        value = self._validate_deposit_amount(amount)
        account = self.accounts.lock_account(user_id)

        entry = self._apply(
            account,
            LedgerEntryKind.DEPOSIT,
            value,
            description=description or "Wallet top-up",
            payment_method=payment_method or "unknown",
        )
        logger.info(
            "Deposit user=%s amount=%s balance=%s",
            user_id, value, account.balance,
        )
        return DepositResult(ledger_entry=entry, new_balance=account.balance)

    def purchase(
        self,
        user_id: int,
        items: list[PurchaseItem],
        shipping_address: ShippingAddress,
        notes: str | None = None,
    ) -> PurchaseResult:
        """
        Buy catalog products with the wallet balance.

        The order is created already paid: the wallet payment
        settles in the same transaction as the order itself.
        """
        address = self._validate_shipping_address(shipping_address)
        self._validate_items(items)

        account = self.accounts.lock_account(user_id)
        order_items, total = self._price_items(items)

        if account.balance < total:
            logger.warning(
                "Purchase rejected user=%s required=%s available=%s",
                user_id, total, account.balance,
            )
            raise InsufficientFundsError(total, account.balance, account.currency)

        order = self.orders.create_order(
            user_id=user_id,
            order_number=self.orders.next_order_number(),
            items=order_items,
            total_amount=total,
            shipping_address=address,
            payment_method=PaymentMethod.WALLET,
            status=OrderStatus.PAID,
            payment_status=PaymentStatus.PAID,
            currency=account.currency,
            notes=notes,
        )

        entry = self._apply(
            account,
            LedgerEntryKind.PAYMENT,
            total,
            description=f"Purchase - order {order.order_number}",
            payment_method=PaymentMethod.WALLET.value,
            order=order,
        )
        order.ledger_entry_id = entry.id
        self.db.flush()

        logger.info(
            "Purchase user=%s order=%s total=%s balance=%s",
            user_id, order.order_number, total, account.balance,
        )
        return PurchaseResult(
            order=order, ledger_entry=entry, new_balance=account.balance
        )

    def refund(self, user_id: int, order_id: int, reason: str) -> RefundResult:
        """
        Return the full amount of a delivered wallet order.

        An order can be refunded once; the second attempt fails
        with AlreadyRefundedError and leaves the balance alone.
        """
        if not reason or not reason.strip():
            raise ValidationError("Refund reason is required")

        # Lock order: wallet first, then order
        account = self.accounts.lock_account(user_id)
        order = self.orders.lock_order(order_id, user_id)

        if order.payment_method != PaymentMethod.WALLET:
            raise InvalidRefundStateError(
                f"Order {order.order_number} was not paid with the wallet"
            )
        if order.status == OrderStatus.REFUNDED:
            raise AlreadyRefundedError(order.order_number)
        if order.status != OrderStatus.DELIVERED:
            raise InvalidRefundStateError(
                f"Only delivered orders can be refunded "
                f"(order {order.order_number} is {order.status.value})"
            )

        entry = self._apply(
            account,
            LedgerEntryKind.REFUND,
            order.total_amount,
            description=f"Refund for order {order.order_number}",
            payment_method=PaymentMethod.WALLET.value,
            order=order,
        )
        self.orders.update_status(order, OrderStatus.REFUNDED, reason=reason.strip())

        logger.info(
            "Refund user=%s order=%s amount=%s balance=%s",
            user_id, order.order_number, order.total_amount, account.balance,
        )
        return RefundResult(
            refund_amount=order.total_amount,
            new_balance=account.balance,
            ledger_entry=entry,
            order=order,
        )

    def cancel_order(
        self, user_id: int, order_id: int, reason: str = "Cancelled by customer"
    ) -> CancelResult:
        """
        Cancel an order that has not been delivered yet.

        A paid wallet order gets its total credited back to the
        wallet in the same transaction.
        """
        if not reason or not reason.strip():
            raise ValidationError("Cancellation reason is required")

        account = self.accounts.lock_account(user_id)
        order = self.orders.lock_order(order_id, user_id)

        if not order.can_transition_to(OrderStatus.CANCELLED):
            raise InvalidStatusTransitionError(
                order.status.value, OrderStatus.CANCELLED.value
            )

        entry = None
        if (
            order.payment_method == PaymentMethod.WALLET
            and order.payment_status == PaymentStatus.PAID
        ):
            entry = self._apply(
                account,
                LedgerEntryKind.REFUND,
                order.total_amount,
                description=f"Refund for cancelled order {order.order_number}",
                payment_method=PaymentMethod.WALLET.value,
                order=order,
            )
            order.payment_status = PaymentStatus.REFUNDED

        self.orders.update_status(order, OrderStatus.CANCELLED, reason=reason.strip())
        return CancelResult(order=order, ledger_entry=entry, new_balance=account.balance)

    # --- Queries ---

    def get_balance(self, user_id: int) -> dict:
        account = self.accounts.get_account(user_id)
        return {"balance": account.balance, "currency": account.currency}

    def get_history(
        self,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        kind: LedgerEntryKind | None = None,
    ) -> dict:
        self._validate_page(page, limit)
        # Unknown users get AccountNotFoundError, not an empty page
        self.accounts.get_account(user_id)
        entries, total = self.ledger.query_history(user_id, page, limit, kind)
        return {"entries": entries, "total": total}

    def get_order_history(self, user_id: int, page: int = 1, limit: int = 10) -> dict:
        self._validate_page(page, limit)
        orders, total = self.orders.list_orders(user_id, page, limit)
        return {"orders": orders, "total": total}

    def get_order(self, user_id: int, order_id: int) -> Order:
        return self.orders.get_order(order_id, user_id)

    def get_order_detail(self, user_id: int, order_id: int) -> dict:
        """An order together with the ledger entries that settled it."""
        order = self.orders.get_order(order_id, user_id)
        entries = self.ledger.get_entries_for_order(order.id)
        return {"order": order, "ledger_entries": entries}

    def verify_ledger(self, user_id: int) -> dict:
        account = self.accounts.get_account(user_id)
        return self.ledger.verify_account(account)
