"""Application service: Add To Cart use case.

Prices the configuration at the moment it is added; that total travels
unchanged into the order later on.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from quikprint.application.calculate_price import CalculatePriceHandler
from quikprint.application.dto import CartItemDTO
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.value_objects import Quantity
from quikprint.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class AddToCartHandler:

    def __init__(self, pricing: CalculatePriceHandler, cart_repo: CartRepository) -> None:
        self._pricing = pricing
        self._cart_repo = cart_repo

    def handle(
        self,
        user_id: str,
        product_id: str,
        quantity: int,
        configuration: Mapping[str, Any] | None,
        uploaded_file: str | None = None,
    ) -> CartItemDTO:
        qty = Quantity(quantity)
        config = Configuration.from_raw(configuration)
        breakdown = self._pricing.price(product_id, config, qty.value)

        item = CartItem(
            id=None,
            user_id=user_id,
            product_id=product_id,
            quantity=qty.value,
            configuration=config,
            total_price=breakdown.total,
            uploaded_file=uploaded_file,
        )
        self._cart_repo.add(item)
        logger.info(
            "cart item added user=%s product=%s qty=%s total=%s",
            user_id, product_id, qty.value, breakdown.total,
        )
        return CartItemDTO.from_item(item)
