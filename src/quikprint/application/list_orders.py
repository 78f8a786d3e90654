"""Application service: List Orders use case (query)."""

from __future__ import annotations

from quikprint.application.dto import OrderDTO
from quikprint.domain.model.order import OrderStatus
from quikprint.domain.repository.order_repository import OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def for_user(self, user_id: str) -> list[OrderDTO]:
        return [OrderDTO.from_order(o) for o in self._order_repo.list_by_user(user_id)]

    def all(self, status: OrderStatus | None = None) -> list[OrderDTO]:
        return [OrderDTO.from_order(o) for o in self._order_repo.list_all(status)]
