"""Application service: Update Cart Item use case.

Changes the quantity and/or configuration of an item still in the cart
and prices it again, so the stored total always matches what is in the
item.  Omitted fields keep their current values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from quikprint.application.calculate_price import CalculatePriceHandler
from quikprint.application.dto import CartItemDTO
from quikprint.domain.exceptions import AccessDeniedError, EntityNotFoundError
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.value_objects import Quantity
from quikprint.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


def load_owned_item(cart_repo: CartRepository, item_id: str, user_id: str) -> CartItem:
    item = cart_repo.get_item(item_id)
    if item is None:
        raise EntityNotFoundError(f"Cart item {item_id} not found")
    if not item.is_owned_by(user_id):
        raise AccessDeniedError("Access denied")
    return item


class UpdateCartItemHandler:

    def __init__(self, pricing: CalculatePriceHandler, cart_repo: CartRepository) -> None:
        self._pricing = pricing
        self._cart_repo = cart_repo

    def handle(
        self,
        item_id: str,
        user_id: str,
        quantity: int | None = None,
        configuration: Mapping[str, Any] | None = None,
    ) -> CartItemDTO:
        item = load_owned_item(self._cart_repo, item_id, user_id)

        if quantity is not None:
            item.quantity = Quantity(quantity).value
        if configuration is not None:
            item.configuration = Configuration.from_raw(configuration)

        breakdown = self._pricing.price(item.product_id, item.configuration, item.quantity)
        item.total_price = breakdown.total

        self._cart_repo.update_item(item)
        logger.info(
            "cart item updated id=%s user=%s qty=%s total=%s",
            item.id, user_id, item.quantity, item.total_price,
        )
        return CartItemDTO.from_item(item)
