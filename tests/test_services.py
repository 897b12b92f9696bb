"""Tests for the payment service layer."""

import logging
import uuid
import pytest
from concurrent.futures import ThreadPoolExecutor

from payment_gateway.bank import BankAuthorizationRequest, BankSimulator
from payment_gateway.errors import BANK_UNAVAILABLE_MESSAGE, DuplicatePaymentError, ErrorKind
from payment_gateway.models import FieldViolation, PaymentRequest, PaymentStatus
from payment_gateway.services import PaymentResult


class TestRejectedPayments:
    """Validation failures never reach the bank and never create records."""

    @pytest.mark.parametrize("card_number", [
        "",
        "123",
        "222240534324887",
        "22224053432488771",
        "2222405343248a77",
    ])
    def test_bad_card_number_skips_bank(self, service_factory, authorizing_bank, repository,
                                        valid_payment_data, card_number):
        service = service_factory(authorizing_bank)
        result = service.process_payment(PaymentRequest(**{**valid_payment_data, "card_number": card_number}))

        assert not result.ok
        assert result.error.kind == ErrorKind.VALIDATION
        assert [v.field for v in result.error.violations] == ["card_number"]
        assert authorizing_bank.authorize.call_count == 0
        assert len(repository) == 0

    @pytest.mark.parametrize("month,year", [(5, 2024), (12, 2023), (1, 1999)])
    def test_expired_card_skips_bank(self, service_factory, authorizing_bank, repository,
                                     valid_payment_data, month, year):
        service = service_factory(authorizing_bank)
        result = service.process_payment(
            PaymentRequest(**{**valid_payment_data, "expiry_month": month, "expiry_year": year})
        )

        assert result.error.kind == ErrorKind.VALIDATION
        authorizing_bank.authorize.assert_not_called()
        assert len(repository) == 0

    @pytest.mark.parametrize("currency", ["JPY", "CHF", "usd"])
    def test_unsupported_currency_skips_bank(self, service_factory, authorizing_bank, valid_payment_data, currency):
        service = service_factory(authorizing_bank)
        result = service.process_payment(PaymentRequest(**{**valid_payment_data, "currency": currency}))

        assert result.error.kind == ErrorKind.VALIDATION
        authorizing_bank.authorize.assert_not_called()


class TestAuthorizedAndDeclined:
    """Definite bank decisions produce stored records."""

    def test_authorized_payment(self, service_factory, authorizing_bank, valid_payment_request):
        service = service_factory(authorizing_bank)
        result = service.process_payment(valid_payment_request)

        assert result.ok
        payment = result.payment
        assert payment.status == PaymentStatus.AUTHORIZED
        assert payment.card_number_last_four == "8877"
        assert payment.expiry_month == 4
        assert payment.expiry_year == 2025
        assert payment.currency == "GBP"
        assert payment.amount == 100
        uuid.UUID(payment.id)

        assert service.get_payment(payment.id) == payment

    def test_bank_receives_wire_request(self, service_factory, authorizing_bank, valid_payment_request):
        service_factory(authorizing_bank).process_payment(valid_payment_request)

        authorizing_bank.authorize.assert_called_once_with(
            BankAuthorizationRequest.from_payment(valid_payment_request)
        )

    def test_declined_payment_is_recorded(self, service_factory, declining_bank, repository, valid_payment_request):
        service = service_factory(declining_bank)
        result = service.process_payment(valid_payment_request)

        assert result.ok
        assert result.payment.status == PaymentStatus.DECLINED
        assert repository.get(result.payment.id).status == PaymentStatus.DECLINED

    def test_record_holds_no_card_data(self, service_factory, authorizing_bank, repository, valid_payment_request):
        result = service_factory(authorizing_bank).process_payment(valid_payment_request)
        stored = repository.get(result.payment.id).model_dump()

        assert "card_number" not in stored
        assert "cvv" not in stored
        assert "2222405343248877" not in str(stored)


class TestBankFailures:
    """Failures are classified and never create records."""

    def test_unavailable_bank(self, service_factory, unavailable_bank, repository, valid_payment_request):
        service = service_factory(unavailable_bank)
        result = service.process_payment(valid_payment_request)

        assert not result.ok
        assert result.payment is None
        assert result.error.kind == ErrorKind.BANK_UNAVAILABLE
        assert result.error.message == BANK_UNAVAILABLE_MESSAGE
        assert len(repository) == 0

    def test_malformed_bank_response(self, service_factory, malformed_bank, repository, valid_payment_request):
        service = service_factory(malformed_bank)
        result = service.process_payment(valid_payment_request)

        assert result.error.kind == ErrorKind.BANK_RESPONSE_INVALID
        assert result.error.status_code == 200
        assert len(repository) == 0

    def test_simulator_503_is_unavailable(self, service_factory, repository, valid_payment_data):
        service = service_factory(BankSimulator())
        result = service.process_payment(PaymentRequest(**{**valid_payment_data, "card_number": "2222405343248870"}))

        assert result.error.kind == ErrorKind.BANK_UNAVAILABLE
        assert result.error.status_code == 503
        assert len(repository) == 0

    def test_id_collision_is_fatal(self, service_factory, authorizing_bank, valid_payment_request, monkeypatch):
        fixed_id = uuid.UUID("00000000-0000-4000-8000-000000000001")
        monkeypatch.setattr("payment_gateway.services.uuid.uuid4", lambda: fixed_id)
        service = service_factory(authorizing_bank)
        service.process_payment(valid_payment_request)

        with pytest.raises(DuplicatePaymentError):
            service.process_payment(valid_payment_request)


class TestRetrieval:
    """Lookups by payment id."""

    def test_unknown_id(self, service_factory, authorizing_bank):
        assert service_factory(authorizing_bank).get_payment("NonExistingID") is None

    def test_concurrent_payments_get_distinct_ids(self, service_factory, valid_payment_data):
        service = service_factory(BankSimulator())
        requests = [PaymentRequest(**valid_payment_data) for _ in range(2)]

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(service.process_payment, requests))

        ids = [r.payment.id for r in results]
        assert len(set(ids)) == 2
        for result in results:
            assert service.get_payment(result.payment.id) == result.payment


class TestPaymentResult:
    """Result constructors."""

    def test_rejected(self):
        violations = [FieldViolation(field="cvv", message="cvv must be 3 or 4 digits")]
        result = PaymentResult.rejected(violations)

        assert not result.ok
        assert result.payment is None
        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.violations == violations


class TestCardDataNeverLogged:
    """Full card number and CVV stay out of log output on every path."""

    def test_logs_hold_masked_card_only(self, service_factory, authorizing_bank, unavailable_bank,
                                         valid_payment_data, caplog, monkeypatch):
        # Predictable ids so a random uuid cannot contain the CVV digits
        ids = iter(uuid.UUID(int=n) for n in range(1, 10))
        monkeypatch.setattr("payment_gateway.services.uuid.uuid4", lambda: next(ids))
        caplog.set_level(logging.DEBUG)
        data = {**valid_payment_data, "cvv": "9371"}

        service_factory(authorizing_bank).process_payment(PaymentRequest(**{**data, "currency": "JPY"}))
        service_factory(unavailable_bank).process_payment(PaymentRequest(**data))
        service_factory(authorizing_bank).process_payment(PaymentRequest(**data))
        service_factory(BankSimulator()).process_payment(PaymentRequest(**data))

        assert "Rejected payment" in caplog.text
        assert "Bank failure" in caplog.text
        assert "Created payment" in caplog.text
        assert "2222405343248877" not in caplog.text
        assert "9371" not in caplog.text
        assert "************8877" in caplog.text
