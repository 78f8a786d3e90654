"""Unit tests for the Order aggregate."""

from decimal import Decimal

import pytest

from quikprint.domain.exceptions import ConflictError, ValidationError
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.order import (
    ALLOWED_TRANSITIONS,
    CREATION_NOTE,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderTotalsPolicy,
    ShippingAddress,
    is_allowed_transition,
)
from quikprint.domain.model.value_objects import Money

ADDRESS = ShippingAddress("Ada", "1 Marina", "Lagos", "LA", "100001", "NG")


def _item(total: str, quantity: int = 1, product_id: str = "cards") -> CartItem:
    return CartItem(
        id=None,
        user_id="u1",
        product_id=product_id,
        quantity=quantity,
        configuration=Configuration.from_raw({"finish": "gloss"}),
        total_price=Money.of(total),
    )


class TestCreate:

    def test_starts_awaiting_payment_without_number(self):
        order = Order.create("u1", [_item("100")], ADDRESS)
        assert order.status is OrderStatus.AWAITING_PAYMENT
        assert order.order_number is None
        assert order.user_id == "u1"

    def test_totals_above_free_shipping_threshold(self):
        order = Order.create("u1", [_item("100"), _item("25.50")], ADDRESS)
        assert order.subtotal == Money.of("125.50")
        assert order.shipping == Money.zero()
        assert order.tax == Money.of("10.04")
        assert order.total == Money.of("135.54")

    def test_shipping_charged_below_threshold(self):
        order = Order.create("u1", [_item("20")], ADDRESS)
        assert order.shipping == Money.of("9.99")
        assert order.tax == Money.of("1.60")
        assert order.total == Money.of("31.59")

    def test_custom_policy(self):
        policy = OrderTotalsPolicy(tax_rate=Decimal("0.075"), shipping_fee=Decimal("0"))
        order = Order.create("u1", [_item("10")], ADDRESS, policy)
        assert order.tax == Money.of("0.75")
        assert order.shipping == Money.zero()

    def test_line_items_snapshot_cart_prices(self):
        order = Order.create("u1", [_item("100", quantity=3)], ADDRESS)
        line = order.items[0]
        assert line.total_price == Money.of("100")
        assert line.unit_price == Money.of("33.33")
        assert line.configuration == Configuration.from_raw({"finish": "gloss"})

    def test_empty_cart_rejected(self):
        with pytest.raises(ValidationError, match="Cart is empty"):
            Order.create("u1", [], ADDRESS)

    def test_owner_required(self):
        with pytest.raises(ValidationError, match="owner is required"):
            Order.create("", [_item("10")], ADDRESS)

    def test_non_positive_item_quantity_rejected(self):
        with pytest.raises(ValidationError, match="non-positive quantity"):
            OrderLineItem.from_cart_item(_item("10", quantity=0))

    def test_creation_entry(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        entry = order.creation_entry()
        assert entry.status is OrderStatus.AWAITING_PAYMENT
        assert entry.note == CREATION_NOTE
        assert entry.created_by == "u1"
        assert entry.order_id == order.id


class TestTransitions:

    def test_permissive_by_default(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        entry = order.transition_to(OrderStatus.SHIPPED, note="manual fix", actor="admin")
        assert order.status is OrderStatus.SHIPPED
        assert entry.status is OrderStatus.SHIPPED
        assert entry.note == "manual fix"
        assert entry.created_by == "admin"
        assert order.updated_at == entry.created_at

    def test_terminal_states_can_be_left_when_permissive(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        order.transition_to(OrderStatus.CANCELLED)
        order.transition_to(OrderStatus.PROCESSING)
        assert order.status is OrderStatus.PROCESSING

    def test_enforced_follows_lifecycle(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        for status in (
            OrderStatus.PAID,
            OrderStatus.PROCESSING,
            OrderStatus.PRINTING,
            OrderStatus.READY,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
        ):
            order.transition_to(status, enforce=True)
        assert order.status is OrderStatus.DELIVERED
        with pytest.raises(ConflictError):
            order.transition_to(OrderStatus.CANCELLED, enforce=True)

    def test_enforced_rejects_skipping(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        with pytest.raises(ConflictError, match="from awaiting_payment to shipped"):
            order.transition_to(OrderStatus.SHIPPED, enforce=True)
        assert order.status is OrderStatus.AWAITING_PAYMENT

    def test_cancel_reachable_from_every_non_terminal_state(self):
        for status, targets in ALLOWED_TRANSITIONS.items():
            if status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED):
                assert targets == frozenset()
            else:
                assert is_allowed_transition(status, OrderStatus.CANCELLED)

    def test_ownership(self):
        order = Order.create("u1", [_item("10")], ADDRESS)
        assert order.is_owned_by("u1")
        assert not order.is_owned_by("u2")
