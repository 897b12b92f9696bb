"""Payment service layer: validation, bank authorization and persistence."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from pydantic import BaseModel

from .bank.base import BankAuthorizationRequest, BankGatewayBase, OutcomeKind
from .errors import PaymentError
from .models import FieldViolation, PaymentRecord, PaymentRequest, PaymentStatus, PaymentView
from .repository import PaymentRepository
from .validation import last_four, mask_card_number, validate_payment_request

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PaymentResult(BaseModel):
    """Either the created payment or the classified reason there is none."""
    payment: Optional[PaymentView] = None
    error: Optional[PaymentError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def succeeded(cls, payment: PaymentView) -> "PaymentResult":
        return cls(payment=payment)

    @classmethod
    def failed(cls, error: PaymentError) -> "PaymentResult":
        return cls(error=error)

    @classmethod
    def rejected(cls, violations: List[FieldViolation]) -> "PaymentResult":
        return cls.failed(PaymentError.validation(violations))


class PaymentService:
    """Runs the authorization workflow for a single payment request."""

    def __init__(
        self,
        bank: BankGatewayBase,
        repository: PaymentRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the service.

        Args:
            bank: Acquiring bank implementation.
            repository: Store for completed payments.
            clock: Returns the current time; used for card expiry checks.
        """
        self.bank = bank
        self.repository = repository
        self.clock = clock or utc_now

    def process_payment(self, request: PaymentRequest) -> PaymentResult:
        """Validate, authorize and record a payment.

        A record is stored only when validation passes and the bank gives a
        definite authorized or declined answer.

        Args:
            request: The merchant's payment request.

        Returns:
            PaymentResult with the payment view, or a classified error.
        """
        masked = mask_card_number(request.card_number or "")

        violations = validate_payment_request(request, self.clock())
        if violations:
            logger.info(
                f"Rejected payment for card {masked}: "
                f"{', '.join(v.field for v in violations)}"
            )
            return PaymentResult.rejected(violations)

        outcome = self.bank.authorize(BankAuthorizationRequest.from_payment(request))
        if outcome.is_failure:
            error = PaymentError.from_bank_failure(outcome.failure)
            logger.warning(
                f"Bank failure for card {masked} classified as {error.kind.value}: "
                f"{outcome.failure.message}"
            )
            return PaymentResult.failed(error)

        status = (
            PaymentStatus.AUTHORIZED
            if outcome.kind == OutcomeKind.AUTHORIZED
            else PaymentStatus.DECLINED
        )
        record = PaymentRecord(
            id=str(uuid.uuid4()),
            status=status,
            card_number_last_four=last_four(request.card_number),
            expiry_month=request.expiry_month,
            expiry_year=request.expiry_year,
            currency=request.currency,
            amount=request.amount,
        )
        self.repository.add(record)

        logger.info(f"Created payment {record.id} with status {status.value}")
        return PaymentResult.succeeded(PaymentView.from_record(record))

    def get_payment(self, payment_id: str) -> Optional[PaymentView]:
        """Get a payment by id.

        Returns:
            PaymentView if found, None otherwise.
        """
        record = self.repository.get(payment_id)
        if record is None:
            return None
        return PaymentView.from_record(record)
