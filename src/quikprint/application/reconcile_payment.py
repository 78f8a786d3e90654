"""Application service: Payment Reconciler.

The gateway confirms a payment through two independent channels that
race each other:

* the pull path (``verify``): the customer comes back from checkout and
  we ask the gateway for the reference's status;
* the push path (``handle_webhook``): the gateway posts a signed
  ``charge.success`` event.

Both end in the same transitions.  Each write is conditional on the
current state (payment: see ``PaymentStatus`` sources; order: only from
``awaiting_payment``), so replays and reorderings are harmless: a second
success changes nothing, and a late failure cannot undo a success.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
from enum import Enum

from quikprint.application.dto import VerificationDTO
from quikprint.domain.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    ValidationError,
)
from quikprint.domain.gateway.payment_gateway import PaymentGateway
from quikprint.domain.model.order import OrderStatus, StatusHistoryEntry
from quikprint.domain.model.payment import Payment, PaymentStatus
from quikprint.domain.repository.order_repository import OrderRepository
from quikprint.domain.repository.payment_repository import PaymentRepository

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-paystack-signature"
CHARGE_SUCCESS = "charge.success"

VERIFIED_NOTE = "Payment confirmed via verification"
WEBHOOK_NOTE = "Payment confirmed via webhook"


class WebhookOutcome(Enum):
    PROCESSED = "processed"
    IGNORED = "ignored"
    UNKNOWN_REFERENCE = "unknown_reference"


def compute_signature(secret: str, body: bytes) -> str:
    """Hex HMAC-SHA512 of the raw body, as the gateway computes it."""
    return hmac.new(secret.encode("utf-8"), body, hashlib.sha512).hexdigest()


def signature_matches(secret: str, body: bytes, signature: str | None) -> bool:
    if not secret or not signature:
        return False
    expected = compute_signature(secret, body)
    return hmac.compare_digest(expected, signature.strip().lower())


class PaymentReconciler:

    def __init__(
        self,
        order_repo: OrderRepository,
        payment_repo: PaymentRepository,
        gateway: PaymentGateway,
        webhook_secret: str,
    ) -> None:
        self._order_repo = order_repo
        self._payment_repo = payment_repo
        self._gateway = gateway
        self._webhook_secret = webhook_secret

    # --- Pull path ------------------------------------------------------------

    def verify(self, reference: str) -> VerificationDTO:
        """Ask the gateway about *reference* and apply the answer.

        Gateway failures propagate as UpstreamError before anything is
        written; the caller can retry.
        """
        payment = self._payment_repo.get_by_reference(reference)
        if payment is None:
            raise EntityNotFoundError(f"Payment {reference} not found")

        result = self._gateway.verify(reference)
        raw = json.dumps(result.raw, sort_keys=True)

        if result.succeeded:
            self._confirm(payment, raw, VERIFIED_NOTE)
        else:
            self._fail(payment, raw, result.status)

        return self._report(reference, result.status)

    # --- Push path ------------------------------------------------------------

    def handle_webhook(self, body: bytes, signature: str | None) -> WebhookOutcome:
        """Authenticate and apply one gateway event.

        Raises AuthenticationError on a signature mismatch (nothing is
        read from the body) and ValidationError on an unparseable body.
        Unknown references and other event types are acknowledged
        without effect.
        """
        if not signature_matches(self._webhook_secret, body, signature):
            logger.warning("webhook rejected: signature mismatch")
            raise AuthenticationError("Invalid webhook signature")

        try:
            event = json.loads(body)
        except ValueError as exc:
            raise ValidationError("Malformed webhook payload") from exc
        if not isinstance(event, dict):
            raise ValidationError("Malformed webhook payload")

        event_type = event.get("event")
        if event_type != CHARGE_SUCCESS:
            logger.info("webhook ignored: event=%s", event_type)
            return WebhookOutcome.IGNORED

        data = event.get("data")
        reference = data.get("reference") if isinstance(data, dict) else None
        payment = (
            self._payment_repo.get_by_reference(reference)
            if isinstance(reference, str) and reference
            else None
        )
        if payment is None:
            logger.info("webhook for unknown reference %s acknowledged", reference)
            return WebhookOutcome.UNKNOWN_REFERENCE

        self._confirm(payment, body.decode("utf-8", errors="replace"), WEBHOOK_NOTE)
        return WebhookOutcome.PROCESSED

    # --- Transitions ----------------------------------------------------------

    def _confirm(self, payment: Payment, raw: str, note: str) -> None:
        if self._payment_repo.update_status(payment.reference, PaymentStatus.SUCCESS, raw):
            logger.info("payment %s succeeded", payment.reference)
        else:
            logger.info("payment %s already settled, success not re-applied", payment.reference)

        # Runs even when the payment was already successful, so an order
        # left behind by an interrupted earlier attempt still gets paid.
        entry = StatusHistoryEntry(order_id=payment.order_id, status=OrderStatus.PAID, note=note)
        if self._order_repo.record_transition(entry, expected=OrderStatus.AWAITING_PAYMENT):
            logger.info("order %s marked paid (%s)", payment.order_id, payment.reference)
        else:
            order = self._order_repo.get_by_id(payment.order_id)
            if order is not None and order.status is not OrderStatus.PAID:
                logger.warning(
                    "payment %s succeeded but order %s is %s; left unchanged",
                    payment.reference, order.order_number, order.status.value,
                )

    def _fail(self, payment: Payment, raw: str, gateway_status: str) -> None:
        if self._payment_repo.update_status(payment.reference, PaymentStatus.FAILED, raw):
            logger.info("payment %s failed (gateway status=%s)", payment.reference, gateway_status)
        else:
            logger.warning(
                "payment %s not marked failed (gateway status=%s): already settled",
                payment.reference, gateway_status,
            )

    def _report(self, reference: str, gateway_status: str) -> VerificationDTO:
        payment = self._payment_repo.get_by_reference(reference)
        order = self._order_repo.get_by_id(payment.order_id) if payment else None
        return VerificationDTO(
            reference=reference,
            gateway_status=gateway_status,
            payment_status=payment.status.value if payment else "",
            order_status=order.status.value if order else "",
        )
