"""Abstract repository for cart items."""

from __future__ import annotations

from abc import ABC, abstractmethod

from quikprint.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    def get_items(self, user_id: str) -> list[CartItem]:
        """Return the user's cart items, oldest first."""

    @abstractmethod
    def get_item(self, item_id: str) -> CartItem | None:
        """Return one cart item by ID, or None."""

    @abstractmethod
    def add(self, item: CartItem) -> None:
        """Persist a new cart item, assigning its ID."""

    @abstractmethod
    def update_item(self, item: CartItem) -> None:
        """Overwrite an existing item.  Raises EntityNotFoundError if it is gone."""

    @abstractmethod
    def remove_item(self, item_id: str) -> None:
        """Delete one item.  Raises EntityNotFoundError if it is gone."""

    @abstractmethod
    def clear(self, user_id: str) -> None:
        """Remove every item from the user's cart."""
