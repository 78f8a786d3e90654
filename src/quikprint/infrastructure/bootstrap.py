"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  Nothing is cached at
module level: callers build a ``Services`` bundle from ``Settings`` and
pass it on.
"""

from __future__ import annotations

from dataclasses import dataclass

from quikprint.application.add_order_note import AddOrderNoteHandler
from quikprint.application.add_to_cart import AddToCartHandler
from quikprint.application.calculate_price import CalculatePriceHandler
from quikprint.application.create_order import CreateOrderHandler
from quikprint.application.initialize_payment import InitializePaymentHandler
from quikprint.application.list_orders import ListOrdersHandler
from quikprint.application.reconcile_payment import PaymentReconciler
from quikprint.application.remove_cart_item import RemoveCartItemHandler
from quikprint.application.show_cart import ShowCartHandler
from quikprint.application.show_order import ShowOrderHandler
from quikprint.application.update_cart_item import UpdateCartItemHandler
from quikprint.application.update_order_status import UpdateOrderStatusHandler
from quikprint.domain.gateway.payment_gateway import PaymentGateway
from quikprint.infrastructure.config import Settings
from quikprint.infrastructure.gateway.paystack_gateway import PaystackGateway
from quikprint.infrastructure.persistence.json_cart_repository import JsonCartRepository
from quikprint.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from quikprint.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from quikprint.infrastructure.persistence.json_payment_repository import (
    JsonPaymentRepository,
)


def catalog_repository(settings: Settings) -> JsonCatalogRepository:
    return JsonCatalogRepository(settings.data_dir / "catalog.json", settings.currency)


def cart_repository(settings: Settings) -> JsonCartRepository:
    return JsonCartRepository(settings.data_dir / "carts.json")


def order_repository(settings: Settings) -> JsonOrderRepository:
    return JsonOrderRepository(settings.data_dir / "orders.json")


def payment_repository(settings: Settings) -> JsonPaymentRepository:
    return JsonPaymentRepository(settings.data_dir / "payments.json")


def payment_gateway(settings: Settings) -> PaystackGateway:
    return PaystackGateway(settings.gateway)


@dataclass(frozen=True)
class Services:
    catalog: JsonCatalogRepository
    calculate_price: CalculatePriceHandler
    add_to_cart: AddToCartHandler
    show_cart: ShowCartHandler
    update_cart_item: UpdateCartItemHandler
    remove_cart_item: RemoveCartItemHandler
    create_order: CreateOrderHandler
    show_order: ShowOrderHandler
    list_orders: ListOrdersHandler
    update_order_status: UpdateOrderStatusHandler
    add_order_note: AddOrderNoteHandler
    initialize_payment: InitializePaymentHandler
    reconciler: PaymentReconciler


def build_services(settings: Settings, gateway: PaymentGateway | None = None) -> Services:
    catalog = catalog_repository(settings)
    carts = cart_repository(settings)
    orders = order_repository(settings)
    payments = payment_repository(settings)
    gateway = gateway or payment_gateway(settings)

    pricing = CalculatePriceHandler(catalog=catalog, rule_store=catalog)
    return Services(
        catalog=catalog,
        calculate_price=pricing,
        add_to_cart=AddToCartHandler(pricing=pricing, cart_repo=carts),
        show_cart=ShowCartHandler(cart_repo=carts),
        update_cart_item=UpdateCartItemHandler(pricing=pricing, cart_repo=carts),
        remove_cart_item=RemoveCartItemHandler(cart_repo=carts),
        create_order=CreateOrderHandler(order_repo=orders, cart_repo=carts),
        show_order=ShowOrderHandler(order_repo=orders),
        list_orders=ListOrdersHandler(order_repo=orders),
        update_order_status=UpdateOrderStatusHandler(
            order_repo=orders, enforce_transitions=settings.strict_transitions
        ),
        add_order_note=AddOrderNoteHandler(order_repo=orders),
        initialize_payment=InitializePaymentHandler(
            order_repo=orders,
            payment_repo=payments,
            gateway=gateway,
            callback_url=settings.gateway.callback_url,
        ),
        reconciler=PaymentReconciler(
            order_repo=orders,
            payment_repo=payments,
            gateway=gateway,
            webhook_secret=settings.gateway.secret_key,
        ),
    )
