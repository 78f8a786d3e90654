"""Order aggregate, the core of the ledger.

The Order is an aggregate root that owns its line items.  Line items
are an immutable snapshot of the cart at creation time: the price the
customer saw is the price they pay, whatever happens to the catalog
afterwards.  Status changes go through ``transition_to`` which yields
the history entry the repository must append in the same transaction.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from quikprint.domain.exceptions import ConflictError, ValidationError
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.value_objects import Money


class OrderStatus(Enum):
    PENDING = "pending"
    AWAITING_PAYMENT = "awaiting_payment"
    PAID = "paid"
    PROCESSING = "processing"
    PRINTING = "printing"
    READY = "ready"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# Intended lifecycle.  Only consulted when transitions are enforced;
# by default any target status is accepted from any source status.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.AWAITING_PAYMENT, OrderStatus.CANCELLED}),
    OrderStatus.AWAITING_PAYMENT: frozenset({OrderStatus.PAID, OrderStatus.CANCELLED}),
    OrderStatus.PAID: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.PRINTING, OrderStatus.CANCELLED}),
    OrderStatus.PRINTING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def is_allowed_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class ShippingAddress:
    name: str
    street: str
    city: str
    state: str
    zip: str
    country: str


@dataclass(frozen=True)
class OrderLineItem:
    """Snapshot of one cart item.  Never recomputed after creation."""

    product_id: str
    quantity: int
    configuration: Configuration
    unit_price: Money
    total_price: Money
    uploaded_file: str | None = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @staticmethod
    def from_cart_item(item: CartItem) -> OrderLineItem:
        if item.quantity <= 0:
            raise ValidationError(
                f"Cart item for product '{item.product_id}' has non-positive quantity"
            )
        unit_price = Money(
            item.total_price.amount / Decimal(item.quantity), item.total_price.currency
        ).quantize()
        return OrderLineItem(
            product_id=item.product_id,
            quantity=item.quantity,
            configuration=item.configuration,
            unit_price=unit_price,
            total_price=item.total_price,  # <-- price snapshot
            uploaded_file=item.uploaded_file,
        )


@dataclass(frozen=True)
class StatusHistoryEntry:
    order_id: str
    status: OrderStatus
    note: str = ""
    created_by: str | None = None  # None for system actors (payment confirmation)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class OrderNote:
    order_id: str
    note: str
    created_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class OrderTotalsPolicy:
    """Flat shipping below a threshold, flat percentage tax."""

    free_shipping_threshold: Decimal = Decimal("50")
    shipping_fee: Decimal = Decimal("9.99")
    tax_rate: Decimal = Decimal("0.08")

    def shipping_for(self, subtotal: Money) -> Money:
        if subtotal.amount < self.free_shipping_threshold:
            return Money(self.shipping_fee, subtotal.currency)
        return Money.zero(subtotal.currency)

    def tax_for(self, subtotal: Money) -> Money:
        return (subtotal * self.tax_rate).quantize()


DEFAULT_TOTALS_POLICY = OrderTotalsPolicy()
CREATION_NOTE = "Order created"


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    ``order_number`` is assigned by the repository when the order is
    first stored.
    """

    id: str
    order_number: str | None
    user_id: str
    items: list[OrderLineItem]
    subtotal: Money
    shipping: Money
    tax: Money
    total: Money
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.AWAITING_PAYMENT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        user_id: str,
        cart_items: list[CartItem],
        shipping_address: ShippingAddress,
        policy: OrderTotalsPolicy = DEFAULT_TOTALS_POLICY,
    ) -> Order:
        """Snapshot cart items into a new order awaiting payment."""
        if not user_id:
            raise ValidationError("Order owner is required")
        if not cart_items:
            raise ValidationError("Cart is empty")

        items = [OrderLineItem.from_cart_item(ci) for ci in cart_items]

        subtotal = Money.zero(items[0].total_price.currency)
        for item in items:
            subtotal = subtotal + item.total_price
        shipping = policy.shipping_for(subtotal)
        tax = policy.tax_for(subtotal)

        return Order(
            id=str(uuid.uuid4()),
            order_number=None,
            user_id=user_id,
            items=items,
            subtotal=subtotal,
            shipping=shipping,
            tax=tax,
            total=subtotal + shipping + tax,
            shipping_address=shipping_address,
            status=OrderStatus.AWAITING_PAYMENT,
        )

    def creation_entry(self) -> StatusHistoryEntry:
        """The history row recorded together with the order itself."""
        return StatusHistoryEntry(
            order_id=self.id,
            status=self.status,
            note=CREATION_NOTE,
            created_by=self.user_id,
            created_at=self.created_at,
        )

    # --- State transitions ----------------------------------------------------

    def transition_to(
        self,
        status: OrderStatus,
        note: str = "",
        actor: str | None = None,
        enforce: bool = False,
    ) -> StatusHistoryEntry:
        """Move to *status* and return the history entry to persist.

        Any target is accepted unless *enforce* is set, in which case the
        move must appear in ``ALLOWED_TRANSITIONS``.
        """
        if enforce and not is_allowed_transition(self.status, status):
            raise ConflictError(
                f"Cannot move order {self.order_number or self.id} "
                f"from {self.status.value} to {status.value}"
            )
        entry = StatusHistoryEntry(
            order_id=self.id, status=status, note=note, created_by=actor
        )
        self.status = status
        self.updated_at = entry.created_at
        return entry

    # --- Queries --------------------------------------------------------------

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id
