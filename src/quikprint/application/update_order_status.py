"""Application service: Update Order Status use case.

The only sanctioned way to change an order's status.  The new status and
its history entry are written together.  By default any target status is
accepted (operators fix mistakes by hand); with ``enforce_transitions``
the move must follow the documented lifecycle.
"""

from __future__ import annotations

import logging

from quikprint.application.dto import OrderDTO
from quikprint.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from quikprint.domain.model.order import OrderStatus
from quikprint.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def parse_status(raw: str) -> OrderStatus:
    try:
        return OrderStatus(raw.strip().lower())
    except ValueError as exc:
        valid = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(
            f"Unknown order status '{raw}' (expected one of: {valid})"
        ) from exc


class UpdateOrderStatusHandler:

    def __init__(self, order_repo: OrderRepository, enforce_transitions: bool = False) -> None:
        self._order_repo = order_repo
        self._enforce = enforce_transitions

    def handle(
        self,
        order_id: str,
        status: OrderStatus,
        note: str = "",
        actor: str | None = None,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        previous = order.status
        entry = order.transition_to(status, note=note, actor=actor, enforce=self._enforce)

        # When enforcing, the legality check above is only valid if nobody
        # moved the order in the meantime.
        expected = previous if self._enforce else None
        if not self._order_repo.record_transition(entry, expected=expected):
            raise ConflictError(
                f"Order {order.order_number} is no longer {previous.value}; reload and retry"
            )

        logger.info(
            "order %s status %s -> %s by %s",
            order.order_number, previous.value, status.value, actor or "system",
        )
        return OrderDTO.from_order(order)
