"""Shared test fixtures and configuration."""

import os
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock
from typing import Dict, Any

# Module-level app in payment_gateway.api reads these on import
os.environ.setdefault("BANK_MODE", "simulator")
os.environ.setdefault("BANK_BASE_URL", "http://bank.test")

from payment_gateway.bank import BankGatewayBase, BankOutcome, BankFailureKind
from payment_gateway.models import PaymentRequest
from payment_gateway.repository import PaymentRepository
from payment_gateway.services import PaymentService

FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now() -> datetime:
    """Reference time used for expiry checks."""
    return FIXED_NOW


@pytest.fixture
def valid_payment_data() -> Dict[str, Any]:
    """Return valid payment request data."""
    return {
        "card_number": "2222405343248877",
        "expiry_month": 4,
        "expiry_year": 2025,
        "currency": "GBP",
        "amount": 100,
        "cvv": "123",
    }


@pytest.fixture
def valid_payment_request(valid_payment_data) -> PaymentRequest:
    return PaymentRequest(**valid_payment_data)


def make_bank(outcome: BankOutcome) -> MagicMock:
    """Create a call-counting bank double returning ``outcome``."""
    bank = MagicMock(spec=BankGatewayBase)
    bank.authorize.return_value = outcome
    return bank


@pytest.fixture
def authorizing_bank() -> MagicMock:
    return make_bank(BankOutcome.authorized("auth-code-123"))


@pytest.fixture
def declining_bank() -> MagicMock:
    return make_bank(BankOutcome.declined())


@pytest.fixture
def unavailable_bank() -> MagicMock:
    return make_bank(BankOutcome.failed(
        BankFailureKind.UNAVAILABLE, "acquiring bank unreachable", status_code=None
    ))


@pytest.fixture
def malformed_bank() -> MagicMock:
    return make_bank(BankOutcome.failed(
        BankFailureKind.INVALID_RESPONSE, "acquiring bank returned a malformed response", status_code=200
    ))


@pytest.fixture
def repository() -> PaymentRepository:
    return PaymentRepository()


@pytest.fixture
def service_factory(repository):
    """Build a PaymentService around a given bank with a fixed clock."""
    def _build(bank) -> PaymentService:
        return PaymentService(bank=bank, repository=repository, clock=lambda: FIXED_NOW)
    return _build
