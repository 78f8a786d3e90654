"""Abstract catalog lookup.

Defined in the domain layer so the domain never depends on
infrastructure. The catalog is read-only from this core's point of view.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from quikprint.domain.model.product import Product


class ProductCatalog(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""
