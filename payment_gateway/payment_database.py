"""
Payment storage.
PaymentStore is the port used by the processor; InMemoryPaymentDatabase keeps
payments in a dict keyed by id, behind a lock so concurrent requests can add
and look up payments safely. Nothing is persisted across restarts.
"""
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional
from uuid import UUID

from .payment import Payment


class PaymentStore(ABC):

    @abstractmethod
    def add_payment(self, payment: Payment) -> None:
        """Store a processed payment. No duplicate-id check is made."""

    @abstractmethod
    def get_payment(self, payment_id: UUID) -> Optional[Payment]:
        """Return the payment with this id, or None when it is unknown."""


class InMemoryPaymentDatabase(PaymentStore):

    def __init__(self) -> None:
        self._payments: Dict[UUID, Payment] = {}
        self._lock = threading.Lock()

    def add_payment(self, payment: Payment) -> None:
        with self._lock:
            self._payments[payment.id] = payment

    def get_payment(self, payment_id: UUID) -> Optional[Payment]:
        with self._lock:
            return self._payments.get(payment_id)

