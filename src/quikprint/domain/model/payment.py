"""Payment attempts against the external gateway."""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from quikprint.domain.model.value_objects import Money

REFERENCE_PREFIX = "QP"


class PaymentStatus(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    REFUNDED = "refunded"


# Which states a payment may be moved *from* to reach each target.
# The verify call and the webhook race each other; checking the current
# state at write time keeps a late "failed" from overwriting "success".
# A failed attempt may still succeed (verify saw "abandoned" before the
# customer finished paying and the webhook arrived afterwards).
_ACCEPTED_SOURCES: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.SUCCESS: frozenset({PaymentStatus.PENDING, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.REFUNDED: frozenset({PaymentStatus.SUCCESS}),
    PaymentStatus.PENDING: frozenset(),
}


def accepted_sources(target: PaymentStatus) -> frozenset[PaymentStatus]:
    return _ACCEPTED_SOURCES[target]


def superseded_response(reference: str) -> str:
    """Stored as the gateway response of an attempt replaced by *reference*."""
    return json.dumps({"superseded_by": reference})


def make_reference(order_number: str) -> str:
    """Unique reference for one payment attempt on an order."""
    return f"{REFERENCE_PREFIX}-{order_number}-{uuid.uuid4().hex[:8]}"


@dataclass
class Payment:
    order_id: str
    reference: str
    amount: Money
    status: PaymentStatus = PaymentStatus.PENDING
    gateway_response: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def currency(self) -> str:
        return self.amount.currency

    def can_transition_to(self, target: PaymentStatus) -> bool:
        return self.status in accepted_sources(target)
