"""Application service: Show Cart use case (query)."""

from __future__ import annotations

from decimal import Decimal

from quikprint.application.dto import CartDTO, CartItemDTO
from quikprint.domain.repository.cart_repository import CartRepository


class ShowCartHandler:

    def __init__(self, cart_repo: CartRepository) -> None:
        self._cart_repo = cart_repo

    def handle(self, user_id: str) -> CartDTO:
        items = self._cart_repo.get_items(user_id)
        subtotal = sum((item.total_price.amount for item in items), Decimal("0"))
        return CartDTO(
            items=[CartItemDTO.from_item(item) for item in items],
            subtotal=f"{subtotal:.2f}",
            count=len(items),
        )
