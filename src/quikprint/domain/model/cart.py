"""Cart items: priced configurations waiting to become an order."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.value_objects import Money


@dataclass
class CartItem:
    """A configured product in a user's cart.

    ``total_price`` is computed by the pricing engine when the item is
    added and is carried unchanged into the order line item.
    """

    id: str | None
    user_id: str
    product_id: str
    quantity: int
    configuration: Configuration
    total_price: Money
    uploaded_file: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
