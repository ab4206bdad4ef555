"""
Acquiring bank integration.

BankGateway is the port the processor talks to; HttpBankGateway posts the
authorization request to the bank simulator over HTTP. Any transport error,
non-2xx status or unreadable body collapses to BankOutcome.unreachable():
the caller never sees an exception for a failed bank call.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from .datamodels import BankAuthorizationRequest, BankAuthorizationResponse

logger = logging.getLogger(__name__)

PAYMENTS_PATH = "payments"


class BankOutcomeKind(Enum):
    AUTHORIZED = "authorized"
    DECLINED = "declined"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class BankOutcome:
    kind: BankOutcomeKind
    authorization_code: Optional[str] = None

    @classmethod
    def authorized(cls, authorization_code: Optional[str]) -> "BankOutcome":
        return cls(BankOutcomeKind.AUTHORIZED, authorization_code)

    @classmethod
    def declined(cls) -> "BankOutcome":
        return cls(BankOutcomeKind.DECLINED)

    @classmethod
    def unreachable(cls) -> "BankOutcome":
        return cls(BankOutcomeKind.UNREACHABLE)


def format_expiry_date(expiry_month: int, expiry_year: int) -> str:
    """Bank expiry format, e.g. (1, 2025) -> "01/2025"."""
    return f"{expiry_month:02d}/{expiry_year:04d}"


class BankGateway(ABC):
    """Port for sending an authorization request to the acquiring bank."""

    @abstractmethod
    def authorize(
        self,
        card_number: str,
        expiry_month: int,
        expiry_year: int,
        currency: str,
        amount: int,
        cvv: str,
    ) -> BankOutcome:
        """Ask the bank to authorize a charge. Must not raise for integration failures."""


class HttpBankGateway(BankGateway):
    """
    Bank simulator client.
    POSTs JSON to <base_url>/payments and reads back
    {"authorized": bool, "authorization_code": str | null}.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    def authorize(
        self,
        card_number: str,
        expiry_month: int,
        expiry_year: int,
        currency: str,
        amount: int,
        cvv: str,
    ) -> BankOutcome:
        bank_request = BankAuthorizationRequest(
            card_number=card_number,
            expiry_date=format_expiry_date(expiry_month, expiry_year),
            currency=currency,
            amount=amount,
            cvv=cvv,
        )
        try:
            response = self._client.post(PAYMENTS_PATH, json=bank_request.model_dump())
            if not response.is_success:
                logger.warning("Bank returned HTTP %s", response.status_code)
                return BankOutcome.unreachable()

            bank_response = BankAuthorizationResponse.model_validate(response.json())
        except Exception:
            # Timeouts, connection errors and malformed bodies all end up here.
            logger.warning("Bank call failed", exc_info=True)
            return BankOutcome.unreachable()

        if bank_response.authorized:
            return BankOutcome.authorized(bank_response.authorization_code)
        return BankOutcome.declined()

    def close(self) -> None:
        self._client.close()
