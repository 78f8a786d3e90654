"""Application service: Show Order use case (query).

Looks orders up by ID or by order number.  When a user ID is supplied
the order must belong to that user; operators omit it.
"""

from __future__ import annotations

from quikprint.application.dto import OrderDTO
from quikprint.domain.exceptions import AccessDeniedError, EntityNotFoundError
from quikprint.domain.model.order import Order
from quikprint.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_ref: str, user_id: str | None = None) -> OrderDTO:
        order = self._find(order_ref)
        if user_id is not None and not order.is_owned_by(user_id):
            raise AccessDeniedError("Access denied")
        return OrderDTO.from_order(
            order,
            history=self._order_repo.get_status_history(order.id),
            notes=self._order_repo.get_notes(order.id),
        )

    def _find(self, order_ref: str) -> Order:
        order = self._order_repo.get_by_id(order_ref)
        if order is None:
            order = self._order_repo.get_by_order_number(order_ref)
        if order is None:
            raise EntityNotFoundError(f"Order {order_ref} not found")
        return order
