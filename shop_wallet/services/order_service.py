"""
Order service — order persistence, numbering and the status
state machine.

Orders are created and reversed by WalletService as part of a
settlement. This service owns everything that does not move
money: allocating order numbers, loading orders for their
owner and the fulfilment transitions (processing, shipped,
delivered).
"""

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shop_wallet.errors import InvalidStatusTransitionError, OrderNotFoundError
from shop_wallet.models.enums import OrderStatus, PaymentMethod, PaymentStatus
from shop_wallet.models.order import Order, OrderItem, OrderSequence

logger = logging.getLogger(__name__)

# Transitions driven by fulfilment. Payment, refund and
# cancellation change money and go through WalletService.
FULFILMENT_STATUSES = {
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
}


class OrderService:

    def __init__(self, db: Session):
        self.db = db

    def _lock_sequence(self, day_key: str) -> OrderSequence | None:
        return self.db.execute(
            select(OrderSequence)
            .where(OrderSequence.day == day_key)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def next_order_number(self, day: date | None = None) -> str:
        """
        Allocate the next order number for a day: YYYYMMDD + 4-digit sequence.

        The day's counter row stays locked until the caller's
        transaction ends, so two purchases can never draw the
        same number. The first order of the day creates the row
        inside a savepoint; if another transaction created it
        first, the insert fails and the existing row is locked
        instead.
        """
        day_key = (day or datetime.utcnow().date()).strftime("%Y%m%d")

        sequence = self._lock_sequence(day_key)
        if sequence is None:
            try:
                with self.db.begin_nested():
                    sequence = OrderSequence(day=day_key, last_value=0)
                    self.db.add(sequence)
            except IntegrityError:
                sequence = self._lock_sequence(day_key)
                if sequence is None:
                    raise

        sequence.last_value += 1
        self.db.flush()
        return f"{day_key}{sequence.last_value:04d}"

    def create_order(
        self,
        user_id: int,
        order_number: str,
        items: list[OrderItem],
        total_amount: Decimal,
        shipping_address: dict[str, str],
        payment_method: PaymentMethod,
        status: OrderStatus,
        payment_status: PaymentStatus,
        currency: str,
        notes: str | None = None,
    ) -> Order:
        order = Order(
            order_number=order_number,
            user_id=user_id,
            items=items,
            total_amount=total_amount,
            currency=currency,
            status=status,
            payment_method=payment_method,
            payment_status=payment_status,
            shipping_street=shipping_address["street"],
            shipping_city=shipping_address["city"],
            shipping_postal_code=shipping_address["postal_code"],
            shipping_country=shipping_address["country"],
            notes=notes,
        )
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int, user_id: int | None = None) -> Order:
        """
        Get an order by ID.

        With a user_id, an order that belongs to someone else is
        reported as not found rather than forbidden.
        """
        order = self.db.get(Order, order_id)
        if not order or (user_id is not None and order.user_id != user_id):
            raise OrderNotFoundError(order_id)
        return order

    def lock_order(self, order_id: int, user_id: int | None = None) -> Order:
        """Load an order with a row lock held until the transaction ends."""
        query = select(Order).where(Order.id == order_id)
        if user_id is not None:
            query = query.where(Order.user_id == user_id)
        order = self.db.execute(
            query.with_for_update().execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not order:
            raise OrderNotFoundError(order_id)
        return order

    def list_orders(
        self, user_id: int, page: int = 1, limit: int = 10
    ) -> tuple[list[Order], int]:
        """Return one page of a user's orders, newest first, and the total count."""
        total = self.db.execute(
            select(func.count(Order.id)).where(Order.user_id == user_id)
        ).scalar_one()
        orders = self.db.execute(
            select(Order)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc(), Order.id.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        ).scalars().all()
        return list(orders), total

    def update_status(
        self,
        order: Order,
        new_status: OrderStatus,
        reason: str | None = None,
    ) -> Order:
        """
        Move an order to a new status.

        Enforces the state machine and records the timestamps
        and reason for refunds and cancellations.
        """
        if not order.can_transition_to(new_status):
            raise InvalidStatusTransitionError(
                order.status.value, new_status.value
            )

        old_status = order.status
        order.status = new_status

        if new_status == OrderStatus.REFUNDED:
            order.payment_status = PaymentStatus.REFUNDED
            order.refund_reason = reason
            order.refunded_at = datetime.utcnow()
        elif new_status == OrderStatus.CANCELLED:
            order.cancel_reason = reason
            order.cancelled_at = datetime.utcnow()

        self.db.flush()
        logger.info(
            "Order %s: %s -> %s",
            order.order_number, old_status.value, new_status.value,
        )
        return order

    def advance_status(self, order_id: int, new_status: OrderStatus) -> Order:
        """Apply a fulfilment transition (processing, shipped, delivered)."""
        order = self.lock_order(order_id)
        if new_status not in FULFILMENT_STATUSES:
            raise InvalidStatusTransitionError(
                order.status.value, new_status.value
            )
        return self.update_status(order, new_status)
