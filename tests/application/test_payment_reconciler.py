"""Tests for the Payment Reconciler: verify (pull) and webhook (push) paths."""

import json

import pytest

from quikprint.application.reconcile_payment import (
    PaymentReconciler,
    WebhookOutcome,
    compute_signature,
    signature_matches,
)
from quikprint.domain.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    UpstreamError,
    ValidationError,
)
from quikprint.domain.model.cart import CartItem
from quikprint.domain.model.configuration import Configuration
from quikprint.domain.model.order import Order, OrderStatus, ShippingAddress
from quikprint.domain.model.payment import Payment, PaymentStatus
from quikprint.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakePaymentGateway, FakePaymentRepository

SECRET = "sk_test_secret"
ADDRESS = ShippingAddress("Ada", "1 Marina", "Lagos", "LA", "100001", "NG")
REFERENCE = "QP-ORD-1-abcdef12"


class _World:

    def __init__(self) -> None:
        self.orders = FakeOrderRepository()
        self.payments = FakePaymentRepository()
        self.gateway = FakePaymentGateway()
        self.order = Order.create(
            "u1",
            [CartItem(None, "u1", "cards", 1, Configuration(), Money.of("100"))],
            ADDRESS,
        )
        self.orders.add(self.order)
        self.payments.add(
            Payment(order_id=self.order.id, reference=REFERENCE, amount=self.order.total)
        )
        self.reconciler = PaymentReconciler(self.orders, self.payments, self.gateway, SECRET)

    def order_status(self) -> OrderStatus:
        return self.orders.get_by_id(self.order.id).status

    def payment_status(self) -> PaymentStatus:
        return self.payments.get_by_reference(REFERENCE).status

    def paid_entries(self) -> list:
        return [
            h for h in self.orders.get_status_history(self.order.id)
            if h.status is OrderStatus.PAID
        ]


def _event(event: str = "charge.success", reference: str = REFERENCE) -> bytes:
    return json.dumps({"event": event, "data": {"reference": reference, "status": "success"}}).encode()


def _signed(body: bytes) -> str:
    return compute_signature(SECRET, body)


# ── Signatures ───────────────────────────────────────────────────────────────


class TestSignature:

    def test_matches_hmac_sha512_hex(self):
        body = b'{"event":"charge.success"}'
        sig = compute_signature(SECRET, body)
        assert len(sig) == 128
        assert signature_matches(SECRET, body, sig)
        assert signature_matches(SECRET, body, sig.upper())

    def test_missing_signature_or_secret(self):
        body = b"{}"
        assert not signature_matches(SECRET, body, None)
        assert not signature_matches(SECRET, body, "")
        assert not signature_matches("", body, compute_signature("", body))


# ── Pull path ────────────────────────────────────────────────────────────────


class TestVerify:

    def test_success_marks_payment_and_order(self):
        w = _World()
        dto = w.reconciler.verify(REFERENCE)
        assert dto.gateway_status == "success"
        assert dto.payment_status == "success"
        assert dto.order_status == "paid"
        assert len(w.paid_entries()) == 1
        assert w.paid_entries()[0].created_by is None
        stored = w.payments.get_by_reference(REFERENCE)
        assert json.loads(stored.gateway_response)["data"]["status"] == "success"

    def test_failure_leaves_order_awaiting_payment(self):
        w = _World()
        w.gateway.statuses[REFERENCE] = "abandoned"
        dto = w.reconciler.verify(REFERENCE)
        assert dto.gateway_status == "abandoned"
        assert w.payment_status() is PaymentStatus.FAILED
        assert w.order_status() is OrderStatus.AWAITING_PAYMENT
        assert w.paid_entries() == []

    def test_idempotent(self):
        w = _World()
        w.reconciler.verify(REFERENCE)
        w.reconciler.verify(REFERENCE)
        assert w.payment_status() is PaymentStatus.SUCCESS
        assert w.order_status() is OrderStatus.PAID
        assert len(w.paid_entries()) == 1

    def test_late_failure_does_not_undo_success(self):
        w = _World()
        w.reconciler.verify(REFERENCE)
        w.gateway.statuses[REFERENCE] = "failed"
        dto = w.reconciler.verify(REFERENCE)
        assert dto.payment_status == "success"
        assert dto.order_status == "paid"

    def test_failed_then_success_recovers(self):
        w = _World()
        w.gateway.statuses[REFERENCE] = "abandoned"
        w.reconciler.verify(REFERENCE)
        w.gateway.statuses[REFERENCE] = "success"
        w.reconciler.verify(REFERENCE)
        assert w.payment_status() is PaymentStatus.SUCCESS
        assert w.order_status() is OrderStatus.PAID

    def test_unknown_reference(self):
        w = _World()
        with pytest.raises(EntityNotFoundError):
            w.reconciler.verify("QP-nope")
        assert w.gateway.verified == []

    def test_gateway_error_writes_nothing(self):
        w = _World()
        w.gateway.fail_with = UpstreamError("Payment gateway timed out")
        with pytest.raises(UpstreamError):
            w.reconciler.verify(REFERENCE)
        assert w.payment_status() is PaymentStatus.PENDING
        assert w.order_status() is OrderStatus.AWAITING_PAYMENT

    def test_order_moved_on_is_left_alone(self):
        w = _World()
        w.orders.force_status(w.order.id, OrderStatus.CANCELLED)
        dto = w.reconciler.verify(REFERENCE)
        assert dto.payment_status == "success"
        assert dto.order_status == "cancelled"
        assert w.paid_entries() == []


# ── Push path ────────────────────────────────────────────────────────────────


class TestWebhook:

    def test_charge_success_processed(self):
        w = _World()
        body = _event()
        assert w.reconciler.handle_webhook(body, _signed(body)) is WebhookOutcome.PROCESSED
        assert w.payment_status() is PaymentStatus.SUCCESS
        assert w.order_status() is OrderStatus.PAID
        assert w.payments.get_by_reference(REFERENCE).gateway_response == body.decode()
        assert w.paid_entries()[0].note == "Payment confirmed via webhook"

    def test_tampered_body_rejected_without_mutation(self):
        w = _World()
        body = _event()
        signature = _signed(body)
        tampered = bytearray(body)
        tampered[-2] ^= 0x01
        with pytest.raises(AuthenticationError):
            w.reconciler.handle_webhook(bytes(tampered), signature)
        assert w.payment_status() is PaymentStatus.PENDING
        assert w.order_status() is OrderStatus.AWAITING_PAYMENT

    def test_missing_signature_rejected(self):
        w = _World()
        with pytest.raises(AuthenticationError):
            w.reconciler.handle_webhook(_event(), None)

    def test_malformed_body(self):
        w = _World()
        body = b"not json"
        with pytest.raises(ValidationError):
            w.reconciler.handle_webhook(body, _signed(body))

    def test_other_events_ignored(self):
        w = _World()
        body = _event("transfer.success")
        assert w.reconciler.handle_webhook(body, _signed(body)) is WebhookOutcome.IGNORED
        assert w.payment_status() is PaymentStatus.PENDING

    def test_unknown_reference_acknowledged(self):
        w = _World()
        body = _event(reference="QP-someone-else")
        outcome = w.reconciler.handle_webhook(body, _signed(body))
        assert outcome is WebhookOutcome.UNKNOWN_REFERENCE
        assert w.payment_status() is PaymentStatus.PENDING

    def test_replay_is_harmless(self):
        w = _World()
        body = _event()
        w.reconciler.handle_webhook(body, _signed(body))
        w.reconciler.handle_webhook(body, _signed(body))
        assert len(w.paid_entries()) == 1


class TestRace:

    def test_webhook_then_verify(self):
        w = _World()
        body = _event()
        w.reconciler.handle_webhook(body, _signed(body))
        dto = w.reconciler.verify(REFERENCE)
        assert dto.order_status == "paid"
        assert len(w.paid_entries()) == 1

    def test_verify_then_webhook(self):
        w = _World()
        w.reconciler.verify(REFERENCE)
        body = _event()
        w.reconciler.handle_webhook(body, _signed(body))
        assert len(w.paid_entries()) == 1

    def test_interrupted_confirmation_is_completed_later(self):
        w = _World()
        # Payment committed as success but the order write never happened.
        w.payments.update_status(REFERENCE, PaymentStatus.SUCCESS, "{}")
        body = _event()
        w.reconciler.handle_webhook(body, _signed(body))
        assert w.order_status() is OrderStatus.PAID

    def test_late_webhook_for_superseded_attempt_still_pays(self):
        w = _World()
        w.payments.add(
            Payment(order_id=w.order.id, reference="QP-ORD-1-99999999", amount=w.order.total)
        )
        assert w.payment_status() is PaymentStatus.FAILED

        body = _event()
        w.reconciler.handle_webhook(body, _signed(body))
        assert w.payment_status() is PaymentStatus.SUCCESS
        assert w.order_status() is OrderStatus.PAID
        assert len(w.paid_entries()) == 1
