"""In-process acquiring bank simulator for local runs and tests."""

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional

from .base import BankAuthorizationRequest, BankFailureKind, BankGatewayBase, BankOutcome

logger = logging.getLogger(__name__)


class SimulatorScenario(str, Enum):
    """Behaviours selected by the last digit of the card number."""
    AUTHORIZED = "authorized"
    DECLINED = "declined"
    UNAVAILABLE = "unavailable"
    BAD_REQUEST = "bad_request"


@dataclass
class SimulatedAuthorization:
    """Authorization issued by the simulator. Keeps only the last four digits."""
    authorization_code: str
    amount: int
    currency: str
    card_number_last_four: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class SimulatorConfig:
    """Configuration for simulator behavior."""
    delay_ms: int = 0  # Simulated response delay in ms


class BankSimulator(BankGatewayBase):
    """
    Mirrors the acquiring bank simulator used by the integration environment:

    - card number ending in an odd digit: authorized, with an authorization code
    - ending in an even digit other than 0: declined
    - ending in 0: bank unavailable (503)
    - any required field missing: bad request (400)
    """

    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config or SimulatorConfig()
        self._authorizations: Dict[str, SimulatedAuthorization] = {}
        self._lock = threading.Lock()
        self._call_count = 0
        logger.info("BankSimulator initialized")

    @property
    def call_count(self) -> int:
        """Number of authorization calls received."""
        return self._call_count

    def _apply_delay(self) -> None:
        if self.config.delay_ms > 0:
            time.sleep(self.config.delay_ms / 1000.0)

    @staticmethod
    def determine_scenario(request: BankAuthorizationRequest) -> SimulatorScenario:
        """Pick the scenario for a request from its card number."""
        if not all((request.card_number, request.expiry_date, request.currency, request.cvv)):
            return SimulatorScenario.BAD_REQUEST
        last_digit = request.card_number[-1]
        if not last_digit.isdigit():
            return SimulatorScenario.BAD_REQUEST
        if last_digit == "0":
            return SimulatorScenario.UNAVAILABLE
        if int(last_digit) % 2 == 1:
            return SimulatorScenario.AUTHORIZED
        return SimulatorScenario.DECLINED

    def authorize(self, request: BankAuthorizationRequest) -> BankOutcome:
        with self._lock:
            self._call_count += 1
        self._apply_delay()
        scenario = self.determine_scenario(request)

        if scenario == SimulatorScenario.BAD_REQUEST:
            return BankOutcome.failed(
                BankFailureKind.UNAVAILABLE,
                "acquiring bank rejected the request: required fields missing",
                status_code=400,
            )
        if scenario == SimulatorScenario.UNAVAILABLE:
            return BankOutcome.failed(
                BankFailureKind.UNAVAILABLE,
                "acquiring bank returned status 503",
                status_code=503,
            )
        if scenario == SimulatorScenario.DECLINED:
            return BankOutcome.declined()

        code = str(uuid.uuid4())
        with self._lock:
            self._authorizations[code] = SimulatedAuthorization(
                authorization_code=code,
                amount=request.amount,
                currency=request.currency,
                card_number_last_four=request.card_number[-4:],
            )
        return BankOutcome.authorized(code)

    def get_authorization(self, authorization_code: str) -> Optional[SimulatedAuthorization]:
        """Get an issued authorization (for testing)."""
        with self._lock:
            return self._authorizations.get(authorization_code)

    def reset(self) -> None:
        """Forget issued authorizations and the call counter (for test cleanup)."""
        with self._lock:
            self._authorizations.clear()
            self._call_count = 0
