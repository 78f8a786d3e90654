"""Application service: Add Order Note use case."""

from __future__ import annotations

from quikprint.application.dto import OrderNoteDTO
from quikprint.domain.exceptions import EntityNotFoundError, ValidationError
from quikprint.domain.model.order import OrderNote
from quikprint.domain.repository.order_repository import OrderRepository


class AddOrderNoteHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str, note: str, actor: str | None = None) -> OrderNoteDTO:
        if not note or not note.strip():
            raise ValidationError("Note text is required")

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        entry = OrderNote(order_id=order.id, note=note.strip(), created_by=actor)
        self._order_repo.add_note(entry)
        return OrderNoteDTO(
            note=entry.note,
            created_by=entry.created_by,
            created_at=entry.created_at.isoformat(),
        )
