"""Abstract repository for the Order aggregate and its audit trails."""

from __future__ import annotations

from abc import ABC, abstractmethod

from quikprint.domain.model.order import (
    Order,
    OrderNote,
    OrderStatus,
    StatusHistoryEntry,
)


class OrderRepository(ABC):

    @abstractmethod
    def add(self, order: Order) -> None:
        """Store a new order in a single transaction.

        Assigns ``order.order_number`` and writes the order, all of its
        line items and its creation history entry.  If any write fails,
        nothing is visible afterwards.
        """

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its human-readable number, or None."""

    @abstractmethod
    def list_by_user(self, user_id: str) -> list[Order]:
        """Return the user's orders, newest first."""

    @abstractmethod
    def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        """Return every order (optionally filtered by status), newest first."""

    @abstractmethod
    def record_transition(
        self,
        entry: StatusHistoryEntry,
        expected: OrderStatus | None = None,
    ) -> bool:
        """Set the order's status to ``entry.status`` and append *entry*.

        Both writes happen in one transaction.  When *expected* is given
        the write only happens if the order is currently in that status;
        the return value tells whether anything was written.  Raises
        EntityNotFoundError if the order does not exist.
        """

    @abstractmethod
    def add_note(self, note: OrderNote) -> None:
        """Append a free-text note.  Status is left untouched."""

    @abstractmethod
    def get_status_history(self, order_id: str) -> list[StatusHistoryEntry]:
        """Return the order's status history, newest first."""

    @abstractmethod
    def get_notes(self, order_id: str) -> list[OrderNote]:
        """Return the order's notes, newest first."""
