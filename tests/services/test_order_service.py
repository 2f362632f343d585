"""
Tests for the OrderService: numbering and the status state machine.
"""

from datetime import date

import pytest

from shop_wallet.errors import InvalidStatusTransitionError, OrderNotFoundError
from shop_wallet.models.enums import OrderStatus
from shop_wallet.models.order import VALID_TRANSITIONS
from shop_wallet.services.order_service import OrderService

from conftest import buy, create_product, open_wallet


def paid_order(db_session):
    open_wallet(db_session, deposit="100.00")
    product = create_product(db_session, price="10.00")
    return buy(db_session, 1, (product, 1)).order


class TestOrderNumbers:

    def test_first_number_of_day(self, db_session):
        number = OrderService(db_session).next_order_number(date(2026, 1, 5))
        assert number == "202601050001"

    def test_numbers_increase_within_day(self, db_session):
        service = OrderService(db_session)
        day = date(2026, 1, 5)
        numbers = [service.next_order_number(day) for _ in range(3)]
        assert numbers == ["202601050001", "202601050002", "202601050003"]

    def test_each_day_restarts(self, db_session):
        service = OrderService(db_session)
        service.next_order_number(date(2026, 1, 5))
        assert service.next_order_number(date(2026, 1, 6)) == "202601060001"


class TestStateMachine:

    def test_terminal_states_have_no_exits(self):
        assert VALID_TRANSITIONS[OrderStatus.REFUNDED] == set()
        assert VALID_TRANSITIONS[OrderStatus.CANCELLED] == set()

    def test_refund_only_from_delivered(self):
        sources = {s for s, targets in VALID_TRANSITIONS.items() if OrderStatus.REFUNDED in targets}
        assert sources == {OrderStatus.DELIVERED}

    def test_fulfilment_path(self, db_session):
        order = paid_order(db_session)
        service = OrderService(db_session)

        for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            service.advance_status(order.id, status)
            db_session.commit()
            assert order.status == status

    def test_skipping_a_step_rejected(self, db_session):
        order = paid_order(db_session)
        with pytest.raises(InvalidStatusTransitionError, match="paid to delivered"):
            OrderService(db_session).advance_status(order.id, OrderStatus.DELIVERED)

    @pytest.mark.parametrize("target", [OrderStatus.REFUNDED, OrderStatus.CANCELLED, OrderStatus.PAID])
    def test_money_moving_targets_rejected(self, db_session, target):
        order = paid_order(db_session)
        with pytest.raises(InvalidStatusTransitionError):
            OrderService(db_session).advance_status(order.id, target)

    def test_going_backwards_rejected(self, db_session):
        order = paid_order(db_session)
        service = OrderService(db_session)
        service.advance_status(order.id, OrderStatus.PROCESSING)
        service.advance_status(order.id, OrderStatus.SHIPPED)
        db_session.commit()

        with pytest.raises(InvalidStatusTransitionError):
            service.advance_status(order.id, OrderStatus.PROCESSING)

    def test_unknown_order(self, db_session):
        with pytest.raises(OrderNotFoundError):
            OrderService(db_session).advance_status(999, OrderStatus.PROCESSING)


class TestListOrders:

    def test_list_is_per_user(self, db_session):
        paid_order(db_session)
        orders, total = OrderService(db_session).list_orders(2)
        assert orders == []
        assert total == 0
