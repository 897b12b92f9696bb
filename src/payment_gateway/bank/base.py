import enum
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel, Field

from ..models import PaymentRequest


class BankAuthorizationRequest(BaseModel):
    """Authorization request in the acquiring bank's wire shape."""
    card_number: str = Field(repr=False)
    expiry_date: str  # MM/YYYY
    currency: str
    amount: int
    cvv: str = Field(repr=False)

    @classmethod
    def from_payment(cls, request: PaymentRequest) -> "BankAuthorizationRequest":
        return cls(
            card_number=request.card_number,
            expiry_date=f"{request.expiry_month:02d}/{request.expiry_year}",
            currency=request.currency,
            amount=request.amount,
            cvv=request.cvv,
        )


class BankFailureKind(str, enum.Enum):
    UNAVAILABLE = "unavailable"  # transport error, timeout or non-2xx
    INVALID_RESPONSE = "invalid_response"  # 2xx with a body we cannot interpret


class BankFailure(BaseModel):
    kind: BankFailureKind
    message: str
    status_code: Optional[int] = None


class OutcomeKind(str, enum.Enum):
    AUTHORIZED = "authorized"
    DECLINED = "declined"
    FAILURE = "failure"


class BankOutcome(BaseModel):
    """Result of a single call to the acquiring bank.

    Failures are returned as data rather than raised, so callers branch on
    ``kind`` instead of catching transport exceptions.
    """
    kind: OutcomeKind
    authorization_code: Optional[str] = None
    failure: Optional[BankFailure] = None

    @classmethod
    def authorized(cls, authorization_code: Optional[str] = None) -> "BankOutcome":
        return cls(kind=OutcomeKind.AUTHORIZED, authorization_code=authorization_code)

    @classmethod
    def declined(cls) -> "BankOutcome":
        return cls(kind=OutcomeKind.DECLINED)

    @classmethod
    def failed(
        cls,
        kind: BankFailureKind,
        message: str,
        status_code: Optional[int] = None,
    ) -> "BankOutcome":
        return cls(
            kind=OutcomeKind.FAILURE,
            failure=BankFailure(kind=kind, message=message, status_code=status_code),
        )

    @property
    def is_failure(self) -> bool:
        return self.kind == OutcomeKind.FAILURE


class BankGatewayBase(ABC):
    """
    Acquiring bank interface. The HTTP client and the in-process simulator are
    interchangeable implementations.
    """

    @abstractmethod
    def authorize(self, request: BankAuthorizationRequest) -> BankOutcome:
        """
        Ask the bank for a definitive accept/decline on a single payment.
        Connectivity and protocol problems come back as a failure outcome.
        """
        raise NotImplementedError
