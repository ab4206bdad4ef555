"""
Payment entity.

A Payment is built through Payment.create(), which checks every raw field and
returns a PaymentCreationResult carrying either the new Payment or the first
validation message. Only the last four digits of the card number are kept;
the full number and the CVV are checked here but never stored.
"""
import calendar
import logging
from dataclasses import dataclass
from datetime import MAXYEAR, datetime
from typing import Optional
from uuid import UUID, uuid4

from .bank_gateway import BankOutcome, BankOutcomeKind
from .datamodels import Currency, PaymentStatus, is_numeric

logger = logging.getLogger(__name__)

CARD_NUMBER_MIN_LENGTH = 14
CARD_NUMBER_MAX_LENGTH = 19


class PaymentStatusAlreadySetError(RuntimeError):
    """Raised when a status is assigned to a payment that already has one."""


def _check_card_number(card_number: Optional[str]) -> Optional[str]:
    if card_number is None or not card_number.strip():
        return "Card number is required"
    if not CARD_NUMBER_MIN_LENGTH <= len(card_number) <= CARD_NUMBER_MAX_LENGTH:
        return "Card number must be between 14-19 characters"
    if not is_numeric(card_number):
        return "Card number must contain only numeric characters"
    return None


def _check_expiry_month(expiry_month: int) -> Optional[str]:
    if not 1 <= expiry_month <= 12:
        return "Expiry month must be between 1-12"
    return None


def _check_expiry_year(expiry_year: int, now: datetime) -> Optional[str]:
    if expiry_year < now.year:
        return "Expiry year must be greater or equal than current year"
    return None


def _check_currency(currency: Optional[str]) -> Optional[str]:
    if currency is None or not currency.strip():
        return "Currency is required"
    if len(currency) != 3:
        return "Currency must be 3 characters"
    if not Currency.is_supported(currency):
        return f"Currency {currency} is not supported"
    return None


def _check_amount(amount: int) -> Optional[str]:
    if amount <= 0:
        return "Amount must be greater than zero"
    return None


def _check_cvv(cvv: Optional[str]) -> Optional[str]:
    if cvv is None or not cvv.strip():
        return "CVV is required"
    if not 3 <= len(cvv) <= 4:
        return "CVV must be 3-4 characters long"
    if not is_numeric(cvv):
        return "CVV must contain only numeric characters"
    return None


def _check_expiry_date(expiry_month: int, expiry_year: int, now: datetime) -> Optional[str]:
    # The card stays valid until the last day of its expiry month.
    if expiry_year > MAXYEAR:
        return None
    last_day = calendar.monthrange(expiry_year, expiry_month)[1]
    expiry_date = datetime(expiry_year, expiry_month, last_day, tzinfo=now.tzinfo)
    if expiry_date <= now:
        return "Expiry date must be in the future"
    return None


class Payment:
    """
    A card payment and its outcome at the acquiring bank.

    Status starts unset and is assigned exactly once, after the bank call,
    through one of the mark_* methods. The id never changes.
    """

    def __init__(
        self,
        card_number_last_four: str,
        expiry_month: int,
        expiry_year: int,
        currency: Currency,
        amount: int,
    ) -> None:
        self._id = uuid4()
        self.card_number_last_four = card_number_last_four
        self.expiry_month = expiry_month
        self.expiry_year = expiry_year
        self.currency = currency
        self.amount = amount
        self._status: Optional[PaymentStatus] = None
        self._authorization_code: Optional[str] = None

    @classmethod
    def create(
        cls,
        card_number: Optional[str],
        expiry_month: int,
        expiry_year: int,
        currency: Optional[str],
        amount: int,
        cvv: Optional[str],
        now: Optional[datetime] = None,
    ) -> "PaymentCreationResult":
        """
        Validate raw request fields and build a Payment.

        Fields are checked in order (card number, expiry month, expiry year,
        currency, amount, CVV, then the combined expiry date) and the first
        failure is returned as the result's error.
        """
        now = now or datetime.now()
        error = (
            _check_card_number(card_number)
            or _check_expiry_month(expiry_month)
            or _check_expiry_year(expiry_year, now)
            or _check_currency(currency)
            or _check_amount(amount)
            or _check_cvv(cvv)
            or _check_expiry_date(expiry_month, expiry_year, now)
        )
        if error is not None:
            return PaymentCreationResult(error=error)

        payment = cls(
            card_number_last_four=card_number[-4:],
            expiry_month=expiry_month,
            expiry_year=expiry_year,
            currency=Currency(currency),
            amount=amount,
        )
        return PaymentCreationResult(payment=payment)

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def status(self) -> Optional[PaymentStatus]:
        return self._status

    @property
    def authorization_code(self) -> Optional[str]:
        return self._authorization_code

    def mark_authorized(self, authorization_code: Optional[str]) -> None:
        self._set_status(PaymentStatus.AUTHORIZED)
        self._authorization_code = authorization_code

    def mark_declined(self) -> None:
        self._set_status(PaymentStatus.DECLINED)

    def mark_rejected(self) -> None:
        self._set_status(PaymentStatus.REJECTED)

    def apply_bank_outcome(self, outcome: BankOutcome) -> None:
        if outcome.kind is BankOutcomeKind.AUTHORIZED:
            self.mark_authorized(outcome.authorization_code)
        elif outcome.kind is BankOutcomeKind.DECLINED:
            self.mark_declined()
        else:
            self.mark_rejected()

    def _set_status(self, status: PaymentStatus) -> None:
        if self._status is not None:
            raise PaymentStatusAlreadySetError(
                f"Payment {self._id} already has status {self._status.value}"
            )
        self._status = status
        logger.debug("Payment %s marked %s", self._id, status.value)

    def __repr__(self) -> str:
        status = self._status.value if self._status else None
        return f"Payment(id={self._id}, status={status}, last_four={self.card_number_last_four})"


@dataclass(frozen=True)
class PaymentCreationResult:
    payment: Optional[Payment] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None
