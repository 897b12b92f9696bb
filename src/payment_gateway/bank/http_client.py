"""HTTP client for the acquiring bank's authorization endpoint."""

import logging
import uuid
from typing import Any, Optional

import httpx

from .base import BankAuthorizationRequest, BankFailureKind, BankGatewayBase, BankOutcome

logger = logging.getLogger(__name__)


class AcquiringBankClient(BankGatewayBase):
    """
    Calls ``POST {base_url}/payments`` on the acquiring bank and classifies the
    reply. Nothing is retried; every failure is reported to the caller once.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Bank base URL, e.g. ``http://localhost:8080``.
            timeout: Request timeout in seconds. ``None`` leaves the deadline
                to the transport.
            http_client: Pre-built httpx client, mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.Client(timeout=timeout)
        logger.info(f"AcquiringBankClient initialized for {self.base_url}")

    def close(self) -> None:
        """Close the connection pool if this client created it."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def authorize(self, request: BankAuthorizationRequest) -> BankOutcome:
        url = f"{self.base_url}/payments"
        correlation_id = str(uuid.uuid4())

        try:
            response = self.http_client.post(
                url,
                json=request.model_dump(),
                headers={"X-Request-ID": correlation_id},
            )
        except httpx.TimeoutException as e:
            logger.warning(f"Bank request {correlation_id} timed out: {e}")
            return BankOutcome.failed(
                BankFailureKind.UNAVAILABLE, f"acquiring bank timed out: {e}"
            )
        except httpx.RequestError as e:
            # Connection refused, DNS failure, reset, etc.
            logger.warning(f"Bank request {correlation_id} failed: {e}")
            return BankOutcome.failed(
                BankFailureKind.UNAVAILABLE, f"acquiring bank unreachable: {e}"
            )

        if not response.is_success:
            logger.warning(
                f"Bank request {correlation_id} returned status {response.status_code}"
            )
            return BankOutcome.failed(
                BankFailureKind.UNAVAILABLE,
                f"acquiring bank returned status {response.status_code}",
                status_code=response.status_code,
            )

        return self._parse_success(response, correlation_id)

    def _parse_success(self, response: httpx.Response, correlation_id: str) -> BankOutcome:
        """Interpret a 2xx body: ``{"authorized": bool, "authorization_code": str}``."""
        try:
            body: Any = response.json()
        except ValueError:
            logger.warning(f"Bank request {correlation_id} returned a non-JSON body")
            return BankOutcome.failed(
                BankFailureKind.INVALID_RESPONSE,
                "acquiring bank returned a malformed response",
                status_code=response.status_code,
            )

        authorized = body.get("authorized") if isinstance(body, dict) else None
        if not isinstance(authorized, bool):
            logger.warning(
                f"Bank request {correlation_id} response has no boolean 'authorized' field"
            )
            return BankOutcome.failed(
                BankFailureKind.INVALID_RESPONSE,
                "acquiring bank response is missing the authorization decision",
                status_code=response.status_code,
            )

        if not authorized:
            logger.info(f"Bank request {correlation_id} declined")
            return BankOutcome.declined()

        code = body.get("authorization_code")
        logger.info(f"Bank request {correlation_id} authorized")
        return BankOutcome.authorized(code if isinstance(code, str) else None)
