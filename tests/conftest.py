"""Shared pytest fixtures for the test suite."""
from datetime import datetime
from typing import List, Tuple

import pytest
from fastapi.testclient import TestClient

from payment_gateway.app import create_app
from payment_gateway.bank_gateway import BankGateway, BankOutcome
from payment_gateway.payment_database import InMemoryPaymentDatabase
from payment_gateway.payment_processor import PaymentProcessor


class FakeBankGateway(BankGateway):
    """Bank gateway returning a preset outcome and recording every call."""

    def __init__(self, outcome: BankOutcome = BankOutcome.authorized("AUTH123")) -> None:
        self.outcome = outcome
        self.calls: List[Tuple] = []

    def authorize(self, card_number, expiry_month, expiry_year, currency, amount, cvv):
        self.calls.append((card_number, expiry_month, expiry_year, currency, amount, cvv))
        return self.outcome


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed local timestamp for deterministic expiry checks."""
    return datetime(2025, 6, 15, 12, 0, 0)


@pytest.fixture
def bank_gateway() -> FakeBankGateway:
    return FakeBankGateway()


@pytest.fixture
def payment_database() -> InMemoryPaymentDatabase:
    return InMemoryPaymentDatabase()


@pytest.fixture
def payment_processor(bank_gateway, payment_database) -> PaymentProcessor:
    return PaymentProcessor(bank_gateway, payment_database)


@pytest.fixture
def client(payment_processor) -> TestClient:
    return TestClient(create_app(payment_processor=payment_processor))


@pytest.fixture
def future_year() -> int:
    return datetime.now().year + 1
