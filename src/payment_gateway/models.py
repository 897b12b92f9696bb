"""Canonical payment models."""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PaymentStatus(str, enum.Enum):
    """Outcome of a single authorization attempt."""
    AUTHORIZED = "Authorized"
    DECLINED = "Declined"
    REJECTED = "Rejected"


class FieldViolation(BaseModel):
    """A single rule a request field failed."""
    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class PaymentRequest(BaseModel):
    """Card payment request as received from the merchant.

    Only types are coerced here. Business rules are checked by
    :func:`payment_gateway.validation.validate_payment_request` so that every
    violation can be reported at once.
    """
    card_number: str = Field(default="", repr=False)
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int  # minor units
    cvv: str = Field(default="", repr=False)

    @field_validator("card_number", "cvv", mode="before")
    @classmethod
    def _digits_as_text(cls, value: Any) -> Any:
        # JSON clients commonly send these as numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("expiry_month", "expiry_year", "amount", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        # bool is an int subclass; lax mode would read true as 1
        if isinstance(value, bool):
            raise ValueError("must be an integer, not a boolean")
        return value


class PaymentRecord(BaseModel):
    """Stored outcome of an authorization. Holds no sensitive card data."""
    model_config = ConfigDict(frozen=True)

    id: str
    status: PaymentStatus
    card_number_last_four: str
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int


class PaymentView(BaseModel):
    """Response shape returned for created and retrieved payments."""
    id: str
    status: PaymentStatus
    card_number_last_four: str
    expiry_month: int
    expiry_year: int
    currency: str
    amount: int

    @classmethod
    def from_record(cls, record: PaymentRecord) -> "PaymentView":
        return cls(**record.model_dump())
