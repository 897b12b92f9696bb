"""In-memory store for completed payment records."""

import logging
import threading
from typing import Dict, Optional

from .errors import DuplicatePaymentError
from .models import PaymentRecord

logger = logging.getLogger(__name__)


class PaymentRepository:
    """Thread-safe repository of payment records, keyed by payment id.

    Records are immutable, so a lookup can never observe a partially written
    record. The lock guards the mapping itself.
    """

    def __init__(self):
        self._payments: Dict[str, PaymentRecord] = {}
        self._lock = threading.Lock()

    def add(self, record: PaymentRecord) -> None:
        """Store a payment record.

        Args:
            record: The record to store.

        Raises:
            DuplicatePaymentError: If a record with the same id already exists.
                Ids are freshly generated, so this means an invariant is broken.
        """
        with self._lock:
            if record.id in self._payments:
                logger.error(f"Refusing to overwrite payment {record.id}")
                raise DuplicatePaymentError(record.id)
            self._payments[record.id] = record
        logger.debug(f"Stored payment {record.id}")

    def get(self, payment_id: str) -> Optional[PaymentRecord]:
        """Get a payment record by id.

        Returns:
            The record if found, None otherwise.
        """
        with self._lock:
            return self._payments.get(payment_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._payments)

    def __contains__(self, payment_id: object) -> bool:
        with self._lock:
            return payment_id in self._payments
