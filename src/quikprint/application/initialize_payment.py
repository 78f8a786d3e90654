"""Application service: Initialize Payment use case.

Opens a hosted checkout for an order that is awaiting payment.  The
gateway is contacted first and the pending payment row is written only
once it has answered, so a failed or timed-out call leaves nothing
behind.  Writing the new attempt fails any earlier pending attempt for
the same order, keeping at most one active payment per order.
"""

from __future__ import annotations

import logging

from quikprint.application.dto import PaymentInitializationDTO
from quikprint.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    EntityNotFoundError,
    ValidationError,
)
from quikprint.domain.gateway.payment_gateway import PaymentGateway
from quikprint.domain.model.order import OrderStatus
from quikprint.domain.model.payment import Payment, PaymentStatus, make_reference
from quikprint.domain.repository.order_repository import OrderRepository
from quikprint.domain.repository.payment_repository import PaymentRepository

logger = logging.getLogger(__name__)


class InitializePaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        gateway: PaymentGateway,
        callback_url: str,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._gateway = gateway
        self._callback_url = callback_url

    def handle(self, order_id: str, user_id: str, email: str) -> PaymentInitializationDTO:
        if not email or "@" not in email:
            raise ValidationError("A valid customer email is required")

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        if not order.is_owned_by(user_id):
            raise AccessDeniedError("Access denied")
        if order.status is not OrderStatus.AWAITING_PAYMENT:
            raise ConflictError(
                f"Order {order.order_number} is not awaiting payment "
                f"(status={order.status.value})"
            )

        latest = self._payment_repo.get_latest_for_order(order.id)
        if latest is not None and latest.status is PaymentStatus.SUCCESS:
            # Paid at the gateway but the order was never moved on.
            raise ConflictError(
                f"Order {order.order_number} already has a successful payment "
                f"({latest.reference}); verify it instead of paying again"
            )

        reference = make_reference(order.order_number)  # type: ignore[arg-type]
        session = self._gateway.initialize(
            email=email,
            amount_minor=order.total.to_minor_units(),
            reference=reference,
            callback_url=self._callback_url,
            metadata={"order_id": order.id, "order_number": order.order_number},
        )

        payment = Payment(order_id=order.id, reference=reference, amount=order.total)
        superseded = self._payment_repo.add(payment)
        for old in superseded:
            logger.info("payment %s superseded by %s", old, reference)
        logger.info(
            "payment initialized order=%s reference=%s amount=%s",
            order.order_number, reference, order.total,
        )

        return PaymentInitializationDTO(
            authorization_url=session.authorization_url,
            access_code=session.access_code,
            reference=reference,
        )
