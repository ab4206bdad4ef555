"""
Data models shared by the HTTP layer, the processor and the bank adapter.

PaymentRequest / PaymentResponse are the merchant-facing shapes,
BankAuthorizationRequest / BankAuthorizationResponse are the acquiring bank
wire format. PaymentRequestValidator is the coarse pre-check run on incoming
requests before a Payment is built.
"""
import re
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .payment import Payment


_DIGITS = re.compile(r"[0-9]+")


def is_numeric(value: str) -> bool:
    """True when value is made only of ASCII digits 0-9."""
    return _DIGITS.fullmatch(value) is not None


class Currency(str, Enum):
    USD = "USD"
    BRL = "BRL"
    GBP = "GBP"

    @classmethod
    def is_supported(cls, code: str) -> bool:
        return code in cls._value2member_map_


class PaymentStatus(str, Enum):
    AUTHORIZED = "Authorized"
    DECLINED = "Declined"
    REJECTED = "Rejected"


class PaymentRequest(BaseModel):
    # Field constraints are deliberately left to PaymentRequestValidator and
    # the Payment entity so that their messages reach the client.
    card_number: str
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int
    cvv: str


class PaymentResponse(BaseModel):
    id: str
    status: PaymentStatus
    card_number_last_four: str = Field(min_length=4, max_length=4)
    expiry_month: int
    expiry_year: int
    currency: Currency
    amount: int
    authorization_code: Optional[str] = None

    @classmethod
    def from_payment(cls, payment: "Payment") -> "PaymentResponse":
        return cls(
            id=str(payment.id),
            status=payment.status,
            card_number_last_four=payment.card_number_last_four,
            expiry_month=payment.expiry_month,
            expiry_year=payment.expiry_year,
            currency=payment.currency,
            amount=payment.amount,
            authorization_code=payment.authorization_code,
        )


class BankAuthorizationRequest(BaseModel):
    card_number: str
    expiry_date: str  # MM/YYYY
    currency: str
    amount: int
    cvv: str


class BankAuthorizationResponse(BaseModel):
    authorized: bool
    authorization_code: Optional[str] = None


class PaymentRequestValidator:
    """
    Boolean pre-checks on a raw payment request. None of these raise; callers
    turn a False into a client error. Card number length, CVV and the
    day-level expiry rule are left to the Payment entity.
    """

    @staticmethod
    def validate_amount(amount: int) -> bool:
        return amount >= 1

    @staticmethod
    def validate_card_number(card_number: Optional[str]) -> bool:
        if card_number is None or not card_number.strip():
            return False
        return is_numeric(card_number)

    @staticmethod
    def validate_card_expiration_date(
        expiry_month: int, expiry_year: int, today: Optional[datetime] = None
    ) -> bool:
        # Month granularity: a card expiring in the current month is refused.
        today = today or datetime.now(timezone.utc)
        if expiry_year < today.year:
            return False
        if expiry_year == today.year and expiry_month <= today.month:
            return False
        return True

    @staticmethod
    def validate_currency(currency: Optional[str]) -> bool:
        if currency is None:
            return False
        return Currency.is_supported(currency)

    @staticmethod
    def validate_payment_request(
        payment_request: PaymentRequest, today: Optional[datetime] = None
    ) -> bool:
        if not PaymentRequestValidator.validate_amount(payment_request.amount):
            return False
        if not PaymentRequestValidator.validate_card_number(payment_request.card_number):
            return False
        if not PaymentRequestValidator.validate_card_expiration_date(
            payment_request.expiry_month, payment_request.expiry_year, today
        ):
            return False
        if not PaymentRequestValidator.validate_currency(payment_request.currency):
            return False
        return True
