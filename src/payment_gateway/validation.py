"""Structural and business rules for incoming card payment requests."""

from datetime import datetime
from typing import List

from .models import FieldViolation, PaymentRequest

CARD_NUMBER_LENGTH = 16
CVV_LENGTHS = (3, 4)
SUPPORTED_CURRENCIES = ("USD", "GBP", "EUR")


def _is_digits(value: str) -> bool:
    # str.isdigit() accepts non-ASCII digits such as superscripts
    return bool(value) and value.isascii() and value.isdigit()


def last_four(card_number: str) -> str:
    """Return the only card number fragment we are allowed to keep."""
    return card_number[-4:]


def mask_card_number(card_number: str) -> str:
    """Mask all but the last four digits, for log output."""
    if len(card_number) <= 4:
        return "*" * len(card_number)
    return "*" * (len(card_number) - 4) + last_four(card_number)


def is_expired(expiry_month: int, expiry_year: int, now: datetime) -> bool:
    """A card stays valid through the whole of its expiry month."""
    return (expiry_year, expiry_month) < (now.year, now.month)


def validate_payment_request(request: PaymentRequest, now: datetime) -> List[FieldViolation]:
    """Check a payment request against every rule.

    Args:
        request: The request to check.
        now: Reference time for the expiry check.

    Returns:
        Violations in field order. An empty list means the request is valid.
    """
    violations: List[FieldViolation] = []

    card_number = request.card_number or ""
    if not card_number:
        violations.append(FieldViolation(field="card_number", message="card number is required"))
    elif len(card_number) != CARD_NUMBER_LENGTH or not _is_digits(card_number):
        violations.append(FieldViolation(
            field="card_number",
            message=f"card number must be exactly {CARD_NUMBER_LENGTH} digits",
        ))

    month_valid = 1 <= request.expiry_month <= 12
    if not month_valid:
        violations.append(FieldViolation(
            field="expiry_month", message="expiry month must be between 1 and 12"
        ))

    if request.expiry_year < 1000 or request.expiry_year > 9999:
        violations.append(FieldViolation(
            field="expiry_year", message="expiry year must be a 4-digit year"
        ))
    elif request.expiry_year < now.year or (
        month_valid and is_expired(request.expiry_month, request.expiry_year, now)
    ):
        violations.append(FieldViolation(
            field="expiry_year", message="card has expired"
        ))

    if request.currency not in SUPPORTED_CURRENCIES:
        violations.append(FieldViolation(
            field="currency",
            message=f"currency must be one of {', '.join(SUPPORTED_CURRENCIES)}",
        ))

    if request.amount <= 0:
        violations.append(FieldViolation(field="amount", message="amount must be a positive integer"))

    cvv = request.cvv or ""
    if len(cvv) not in CVV_LENGTHS or not _is_digits(cvv):
        violations.append(FieldViolation(field="cvv", message="cvv must be 3 or 4 digits"))

    return violations
