"""Abstract repository for payment attempts."""

from __future__ import annotations

from abc import ABC, abstractmethod

from quikprint.domain.model.payment import Payment, PaymentStatus


class PaymentRepository(ABC):

    @abstractmethod
    def add(self, payment: Payment) -> list[str]:
        """Persist a new attempt as the only active one for its order.

        Any other pending attempt for the same order is marked failed in
        the same write.  Returns the references that were superseded.
        """

    @abstractmethod
    def get_by_reference(self, reference: str) -> Payment | None:
        """Return the payment with this gateway reference, or None."""

    @abstractmethod
    def get_latest_for_order(self, order_id: str) -> Payment | None:
        """Return the most recent payment attempt for an order, or None."""

    @abstractmethod
    def update_status(
        self, reference: str, status: PaymentStatus, gateway_response: str
    ) -> bool:
        """Move the payment to *status* if its current state allows it.

        The check and the write happen atomically.  Returns False (and
        writes nothing) when the payment is already past the point where
        *status* applies, e.g. a second "success" or a "failed" arriving
        after "success".  Raises EntityNotFoundError for an unknown
        reference.
        """
