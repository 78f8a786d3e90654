"""Paystack adapter for the PaymentGateway port.

Amounts travel in minor units (kobo for NGN).  Every failure mode of
the HTTP exchange is reported as ``UpstreamError`` so callers only have
one thing to catch; nothing is written locally when it is raised.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from quikprint.domain.exceptions import UpstreamError
from quikprint.domain.gateway.payment_gateway import (
    CheckoutSession,
    PaymentGateway,
    VerificationResult,
)
from quikprint.infrastructure.config import GatewaySettings

logger = logging.getLogger(__name__)


class PaystackGateway(PaymentGateway):

    def __init__(self, settings: GatewaySettings, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client or httpx.Client(
            base_url=settings.base_url,
            timeout=settings.timeout_seconds,
        )

    def initialize(
        self,
        email: str,
        amount_minor: int,
        reference: str,
        callback_url: str,
        metadata: dict[str, str],
    ) -> CheckoutSession:
        payload = {
            "email": email,
            "amount": amount_minor,
            "reference": reference,
            "callback_url": callback_url,
            "metadata": metadata,
        }
        data = self._request("POST", "/transaction/initialize", json=payload)
        try:
            return CheckoutSession(
                authorization_url=data["authorization_url"],
                access_code=data["access_code"],
                reference=data.get("reference", reference),
            )
        except (KeyError, TypeError) as exc:
            raise UpstreamError("Payment gateway returned an incomplete checkout session") from exc

    def verify(self, reference: str) -> VerificationResult:
        envelope = self._request_envelope("GET", f"/transaction/verify/{reference}")
        data = envelope.get("data")
        if not isinstance(data, dict):
            raise UpstreamError("Payment gateway returned no transaction data")
        return VerificationResult(
            reference=data.get("reference", reference),
            status=str(data.get("status", "")),
            amount_minor=int(data.get("amount") or 0),
            raw=envelope,
        )

    def close(self) -> None:
        self._client.close()

    # --- HTTP -----------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        data = self._request_envelope(method, path, **kwargs).get("data")
        if not isinstance(data, dict):
            raise UpstreamError("Payment gateway returned no data")
        return data

    def _request_envelope(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        if not self._settings.secret_key:
            raise UpstreamError("Payment gateway is not configured")

        headers = {"Authorization": f"Bearer {self._settings.secret_key}"}
        try:
            resp = self._client.request(method, path, headers=headers, **kwargs)
        except httpx.TimeoutException as exc:
            logger.warning("paystack %s %s timed out", method, path)
            raise UpstreamError("Payment gateway timed out") from exc
        except httpx.HTTPError as exc:
            logger.warning("paystack %s %s failed: %s", method, path, exc.__class__.__name__)
            raise UpstreamError("Payment gateway unreachable") from exc

        try:
            envelope = resp.json()
        except ValueError as exc:
            logger.warning("paystack %s %s returned non-JSON (HTTP %s)", method, path, resp.status_code)
            raise UpstreamError("Payment gateway returned an invalid response") from exc

        if not isinstance(envelope, dict) or not envelope.get("status"):
            message = envelope.get("message") if isinstance(envelope, dict) else None
            logger.warning("paystack %s %s rejected (HTTP %s): %s", method, path, resp.status_code, message)
            raise UpstreamError(f"Payment gateway error: {message or 'request rejected'}")

        return envelope
