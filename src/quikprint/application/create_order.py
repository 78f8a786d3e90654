"""Application service: Create Order use case.

Turns the user's cart into an order awaiting payment.  The order, its
line items and the creation history entry are written in one
transaction by the repository; the cart is cleared only once that
transaction has committed.
"""

from __future__ import annotations

import logging

from quikprint.application.dto import OrderDTO
from quikprint.domain.model.order import (
    DEFAULT_TOTALS_POLICY,
    Order,
    OrderTotalsPolicy,
    ShippingAddress,
)
from quikprint.domain.repository.cart_repository import CartRepository
from quikprint.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        policy: OrderTotalsPolicy = DEFAULT_TOTALS_POLICY,
    ) -> None:
        self._order_repo = order_repo
        self._cart_repo = cart_repo
        self._policy = policy

    def handle(self, user_id: str, shipping_address: ShippingAddress) -> OrderDTO:
        """Create a new order from the user's cart.

        Steps:
        1. Load the cart (fail if empty).
        2. Snapshot each cart item, with its already-computed price.
        3. Persist order + items + initial history atomically.
        4. Clear the cart.
        """
        cart_items = self._cart_repo.get_items(user_id)
        order = Order.create(
            user_id=user_id,
            cart_items=cart_items,
            shipping_address=shipping_address,
            policy=self._policy,
        )
        self._order_repo.add(order)
        logger.info(
            "order created number=%s user=%s items=%s total=%s",
            order.order_number, user_id, len(order.items), order.total,
        )

        try:
            self._cart_repo.clear(user_id)
        except OSError:
            # The order is committed; a stale cart is only an inconvenience.
            logger.exception("failed to clear cart after order %s", order.order_number)

        return OrderDTO.from_order(
            order, history=self._order_repo.get_status_history(order.id)
        )
