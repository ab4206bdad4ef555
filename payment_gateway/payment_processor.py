import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from .bank_gateway import BankGateway, BankOutcome
from .payment import Payment
from .payment_database import PaymentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessPaymentResult:
    payment: Optional[Payment] = None
    error: Optional[str] = None


class PaymentProcessor:
    """
    Payment processor for handling payment requests and bank communication.
    Builds the Payment, asks the bank to authorize it, records the outcome
    as the payment status and stores the payment in the PaymentStore.
    """

    def __init__(self, bank_gateway: BankGateway, payment_store: PaymentStore) -> None:
        self._bank_gateway = bank_gateway
        self._payment_store = payment_store

    def process_payment(
        self,
        card_number: str,
        expiry_month: int,
        expiry_year: int,
        currency: str,
        amount: int,
        cvv: str,
        now: Optional[datetime] = None,
    ) -> ProcessPaymentResult:
        # STEP 1: Build the payment, nothing is sent to the bank if it is invalid
        creation = Payment.create(
            card_number, expiry_month, expiry_year, currency, amount, cvv, now=now
        )
        if not creation.is_valid:
            logger.info("Payment request rejected by validation: %s", creation.error)
            return ProcessPaymentResult(error=creation.error)
        payment = creation.payment

        # STEP 2: Ask the bank
        outcome = self._authorize_with_bank(
            card_number, expiry_month, expiry_year, currency, amount, cvv
        )

        # STEP 3: Record the outcome and store, whatever the bank said
        payment.apply_bank_outcome(outcome)
        self._payment_store.add_payment(payment)
        logger.info(
            "Payment %s processed with status %s (card ending %s)",
            payment.id,
            payment.status.value,
            payment.card_number_last_four,
        )
        return ProcessPaymentResult(payment=payment)

    def get_payment_details(self, payment_id: UUID) -> Optional[Payment]:
        return self._payment_store.get_payment(payment_id)

    def _authorize_with_bank(
        self,
        card_number: str,
        expiry_month: int,
        expiry_year: int,
        currency: str,
        amount: int,
        cvv: str,
    ) -> BankOutcome:
        try:
            return self._bank_gateway.authorize(
                card_number, expiry_month, expiry_year, currency, amount, cvv
            )
        except Exception:
            # A gateway is expected to report failures as an outcome; treat a
            # leaked exception the same way.
            logger.exception("Bank gateway raised instead of reporting an outcome")
            return BankOutcome.unreachable()
