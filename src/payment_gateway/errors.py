"""Error classification shared by the service and the API layer."""

import enum
from typing import List, Optional

from pydantic import BaseModel

from .bank.base import BankFailure, BankFailureKind
from .models import FieldViolation

BANK_UNAVAILABLE_MESSAGE = "The acquiring bank is currently unavailable. Please try again later."
INTERNAL_ERROR_MESSAGE = "An internal error occurred while processing the payment."
VALIDATION_ERROR_MESSAGE = "The payment request is invalid."


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    BANK_UNAVAILABLE = "bank_unavailable"
    BANK_RESPONSE_INVALID = "bank_response_invalid"
    INTERNAL = "internal"


class PaymentError(BaseModel):
    """A classified failure of a payment attempt."""
    kind: ErrorKind
    message: str
    violations: List[FieldViolation] = []
    status_code: Optional[int] = None  # downstream status, when known

    @classmethod
    def validation(cls, violations: List[FieldViolation]) -> "PaymentError":
        return cls(
            kind=ErrorKind.VALIDATION,
            message=VALIDATION_ERROR_MESSAGE,
            violations=list(violations),
        )

    @classmethod
    def from_bank_failure(cls, failure: BankFailure) -> "PaymentError":
        if failure.kind == BankFailureKind.UNAVAILABLE:
            return cls(
                kind=ErrorKind.BANK_UNAVAILABLE,
                message=BANK_UNAVAILABLE_MESSAGE,
                status_code=failure.status_code,
            )
        return cls(
            kind=ErrorKind.BANK_RESPONSE_INVALID,
            message=INTERNAL_ERROR_MESSAGE,
            status_code=failure.status_code,
        )


class RepositoryError(Exception):
    """Raised when the payment store detects a broken invariant."""


class DuplicatePaymentError(RepositoryError):
    """Raised when a payment id is stored twice."""

    def __init__(self, payment_id: str):
        super().__init__(f"Payment {payment_id} already exists")
        self.payment_id = payment_id
