"""Abstract payment gateway (hosted checkout + transaction verification)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class CheckoutSession:
    authorization_url: str
    access_code: str
    reference: str


@dataclass(frozen=True)
class VerificationResult:
    """What the gateway says about one reference.

    ``status`` is the gateway's own transaction status ("success",
    "failed", "abandoned", ...); ``raw`` is the full response envelope.
    """

    reference: str
    status: str
    amount_minor: int
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class PaymentGateway(ABC):

    @abstractmethod
    def initialize(
        self,
        email: str,
        amount_minor: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        """Open a hosted checkout.  Raises UpstreamError on failure."""

    @abstractmethod
    def verify(self, reference: str) -> VerificationResult:
        """Ask the gateway for the reference's status.  Raises UpstreamError on failure."""
