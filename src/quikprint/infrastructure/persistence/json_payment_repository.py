"""JSON-file-backed implementation of PaymentRepository."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from quikprint.domain.exceptions import EntityNotFoundError
from quikprint.domain.model.payment import Payment, PaymentStatus, superseded_response
from quikprint.domain.repository.payment_repository import PaymentRepository
from quikprint.infrastructure.persistence.json_store import JsonStore
from quikprint.infrastructure.persistence.serialization import (
    dt_from_raw,
    dt_to_raw,
    money_from_raw,
    money_to_raw,
)


class JsonPaymentRepository(PaymentRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path, ("payments",))

    def add(self, payment: Payment) -> list[str]:
        superseded: list[str] = []
        with self._store.transaction() as doc:
            now = dt_to_raw(datetime.now(timezone.utc))
            for raw in doc["payments"]:
                if raw["order_id"] != payment.order_id:
                    continue
                if not self._to_domain(raw).can_transition_to(PaymentStatus.FAILED):
                    continue
                raw["status"] = PaymentStatus.FAILED.value
                raw["gateway_response"] = superseded_response(payment.reference)
                raw["updated_at"] = now
                superseded.append(raw["reference"])
            doc["payments"].append(self._to_raw(payment))
        return superseded

    def get_by_reference(self, reference: str) -> Payment | None:
        for raw in self._store.read()["payments"]:
            if raw["reference"] == reference:
                return self._to_domain(raw)
        return None

    def get_latest_for_order(self, order_id: str) -> Payment | None:
        payments = [
            self._to_domain(raw)
            for raw in self._store.read()["payments"]
            if raw["order_id"] == order_id
        ]
        if not payments:
            return None
        return max(payments, key=lambda p: p.created_at)

    def update_status(
        self, reference: str, status: PaymentStatus, gateway_response: str
    ) -> bool:
        with self._store.transaction() as doc:
            raw = next((p for p in doc["payments"] if p["reference"] == reference), None)
            if raw is None:
                raise EntityNotFoundError(f"Payment {reference} not found")
            if not self._to_domain(raw).can_transition_to(status):
                return False
            raw["status"] = status.value
            raw["gateway_response"] = gateway_response
            raw["updated_at"] = dt_to_raw(datetime.now(timezone.utc))
        return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(payment: Payment) -> dict:
        return {
            "id": payment.id,
            "order_id": payment.order_id,
            "reference": payment.reference,
            "amount": money_to_raw(payment.amount),
            "currency": payment.currency,
            "status": payment.status.value,
            "gateway_response": payment.gateway_response,
            "created_at": dt_to_raw(payment.created_at),
            "updated_at": dt_to_raw(payment.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Payment:
        return Payment(
            id=raw["id"],
            order_id=raw["order_id"],
            reference=raw["reference"],
            amount=money_from_raw(raw["amount"], raw["currency"]),
            status=PaymentStatus(raw["status"]),
            gateway_response=raw.get("gateway_response", ""),
            created_at=dt_from_raw(raw["created_at"]),
            updated_at=dt_from_raw(raw["updated_at"]),
        )
