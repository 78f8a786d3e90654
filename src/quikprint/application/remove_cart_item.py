"""Application service: Remove Cart Item use case."""

from __future__ import annotations

import logging

from quikprint.application.update_cart_item import load_owned_item
from quikprint.domain.repository.cart_repository import CartRepository

logger = logging.getLogger(__name__)


class RemoveCartItemHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, item_id: str, user_id: str) -> None:
        load_owned_item(self._cart_repo, item_id, user_id)
        self._cart_repo.remove_item(item_id)
        logger.info("cart item removed id=%s user=%s", item_id, user_id)
