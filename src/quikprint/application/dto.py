"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI / HTTP layers and the application layer
without exposing domain internals to the outside world.  Amounts are
rendered as plain decimal strings ("13500.00") so they survive JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.order import Order, OrderNote, StatusHistoryEntry
from quikprint.domain.model.payment import Payment
from quikprint.domain.model.pricing import PriceBreakdown
from quikprint.domain.model.value_objects import Money


def _amount(money: Money | None) -> str | None:
    if money is None:
        return None
    return f"{money.amount:.2f}"


@dataclass(frozen=True)
class PriceBreakdownDTO:
    currency: str
    quantity: int
    base_price: str
    option_modifiers: dict[str, str]
    dimensional_cost: str | None
    tier_price: str | None
    add_ons: dict[str, str]
    setup_fee: str
    rush_fee: str
    subtotal: str
    total: str

    @staticmethod
    def from_breakdown(b: PriceBreakdown) -> PriceBreakdownDTO:
        return PriceBreakdownDTO(
            currency=b.total.currency,
            quantity=b.quantity,
            base_price=_amount(b.base_price),
            option_modifiers={k: _amount(v) for k, v in b.option_modifiers.items()},
            dimensional_cost=_amount(b.dimensional_cost),
            tier_price=_amount(b.tier_price),
            add_ons={k: _amount(v) for k, v in b.add_ons.items()},
            setup_fee=_amount(b.setup_fee),
            rush_fee=_amount(b.rush_fee),
            subtotal=_amount(b.subtotal),
            total=_amount(b.total),
        )


@dataclass(frozen=True)
class CartItemDTO:
    id: str
    product_id: str
    quantity: int
    configuration: dict[str, Any]
    total_price: str
    uploaded_file: str | None

    @staticmethod
    def from_item(item: CartItem) -> CartItemDTO:
        return CartItemDTO(
            id=item.id,  # type: ignore[arg-type]
            product_id=item.product_id,
            quantity=item.quantity,
            configuration=item.configuration.to_raw(),
            total_price=_amount(item.total_price),
            uploaded_file=item.uploaded_file,
        )


@dataclass(frozen=True)
class CartDTO:
    items: list[CartItemDTO]
    subtotal: str
    count: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    quantity: int
    configuration: dict[str, Any]
    unit_price: str
    total_price: str
    uploaded_file: str | None


@dataclass(frozen=True)
class StatusHistoryDTO:
    id: str
    status: str
    note: str
    created_by: str | None
    created_at: str


@dataclass(frozen=True)
class OrderNoteDTO:
    note: str
    created_by: str | None
    created_at: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    user_id: str
    status: str
    currency: str
    items: list[OrderLineItemDTO]
    subtotal: str
    shipping: str
    tax: str
    total: str
    shipping_address: dict[str, str]
    created_at: str
    updated_at: str
    history: list[StatusHistoryDTO] = field(default_factory=list)
    notes: list[OrderNoteDTO] = field(default_factory=list)

    @staticmethod
    def from_order(
        order: Order,
        history: list[StatusHistoryEntry] | None = None,
        notes: list[OrderNote] | None = None,
    ) -> OrderDTO:
        addr = order.shipping_address
        return OrderDTO(
            id=order.id,
            order_number=order.order_number,  # type: ignore[arg-type]
            user_id=order.user_id,
            status=order.status.value,
            currency=order.total.currency,
            items=[
                OrderLineItemDTO(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    configuration=item.configuration.to_raw(),
                    unit_price=_amount(item.unit_price),
                    total_price=_amount(item.total_price),
                    uploaded_file=item.uploaded_file,
                )
                for item in order.items
            ],
            subtotal=_amount(order.subtotal),
            shipping=_amount(order.shipping),
            tax=_amount(order.tax),
            total=_amount(order.total),
            shipping_address={
                "name": addr.name,
                "street": addr.street,
                "city": addr.city,
                "state": addr.state,
                "zip": addr.zip,
                "country": addr.country,
            },
            created_at=order.created_at.isoformat(),
            updated_at=order.updated_at.isoformat(),
            history=[
                StatusHistoryDTO(
                    id=h.id,
                    status=h.status.value,
                    note=h.note,
                    created_by=h.created_by,
                    created_at=h.created_at.isoformat(),
                )
                for h in history or []
            ],
            notes=[
                OrderNoteDTO(
                    note=n.note,
                    created_by=n.created_by,
                    created_at=n.created_at.isoformat(),
                )
                for n in notes or []
            ],
        )


@dataclass(frozen=True)
class PaymentInitializationDTO:
    authorization_url: str
    access_code: str
    reference: str


@dataclass(frozen=True)
class PaymentDTO:
    reference: str
    order_id: str
    amount: str
    currency: str
    status: str

    @staticmethod
    def from_payment(payment: Payment) -> PaymentDTO:
        return PaymentDTO(
            reference=payment.reference,
            order_id=payment.order_id,
            amount=_amount(payment.amount),
            currency=payment.currency,
            status=payment.status.value,
        )


@dataclass(frozen=True)
class VerificationDTO:
    """Result of the pull path: what the gateway said and where we ended up."""

    reference: str
    gateway_status: str
    payment_status: str
    order_status: str
