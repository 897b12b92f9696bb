import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .bank import AcquiringBankClient, BankGatewayBase, BankSimulator
from .config import BANK_MODE_SIMULATOR, GatewaySettings
from .errors import INTERNAL_ERROR_MESSAGE, ErrorKind, PaymentError
from .models import FieldViolation, PaymentRequest, PaymentStatus, PaymentView
from .repository import PaymentRepository
from .services import PaymentService

logger = logging.getLogger(__name__)

PAYMENT_NOT_FOUND_MESSAGE = "Payment not found"


class ErrorResponse(BaseModel):
    message: str


class RejectedResponse(BaseModel):
    status: PaymentStatus = PaymentStatus.REJECTED
    message: str
    errors: List[FieldViolation] = []


def build_bank(settings: GatewaySettings) -> BankGatewayBase:
    if settings.bank_mode == BANK_MODE_SIMULATOR:
        return BankSimulator()
    return AcquiringBankClient(settings.bank_base_url, timeout=settings.bank_timeout_seconds)


def build_service(settings: GatewaySettings) -> PaymentService:
    return PaymentService(bank=build_bank(settings), repository=PaymentRepository())


def get_payment_service(request: Request) -> PaymentService:
    return request.app.state.payment_service


def error_response(error: PaymentError) -> JSONResponse:
    """Map a classified payment error to its HTTP response."""
    if error.kind == ErrorKind.VALIDATION:
        body = RejectedResponse(message=error.message, errors=error.violations)
        return JSONResponse(status_code=400, content=body.model_dump(mode="json"))
    status_code = 503 if error.kind == ErrorKind.BANK_UNAVAILABLE else 500
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=error.message).model_dump())


def _violations_from_decode_errors(exc: RequestValidationError) -> List[FieldViolation]:
    violations = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        violations.append(FieldViolation(
            field=".".join(loc) or "body",
            message=err.get("msg", "invalid value"),
        ))
    return violations


def create_app(
    service: Optional[PaymentService] = None,
    settings: Optional[GatewaySettings] = None,
) -> FastAPI:
    """Build the gateway API.

    Args:
        service: Pre-built payment service. Built from ``settings`` when omitted.
        settings: Runtime settings. Read from the environment when omitted.
    """
    owns_service = service is None
    if service is None:
        service = build_service(settings or GatewaySettings.from_env())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        close = getattr(app.state.payment_service.bank, "close", None)
        if owns_service and close is not None:
            close()

    app = FastAPI(title="Payment Gateway API", lifespan=lifespan)
    app.state.payment_service = service

    @app.exception_handler(RequestValidationError)
    async def request_decode_handler(request: Request, exc: RequestValidationError):
        violations = _violations_from_decode_errors(exc)
        logger.info(f"Rejected undecodable payment request: {', '.join(v.field for v in violations)}")
        return error_response(PaymentError.validation(violations))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=ErrorResponse(message=INTERNAL_ERROR_MESSAGE).model_dump())

    @app.get("/ping")
    def ping():
        return {"message": "pong"}

    @app.post("/api/payments", response_model=PaymentView)
    def create_payment(body: PaymentRequest, payments: PaymentService = Depends(get_payment_service)):
        result = payments.process_payment(body)
        if not result.ok:
            return error_response(result.error)
        return result.payment

    @app.get("/api/payments/{payment_id}", response_model=PaymentView)
    def get_payment(payment_id: str, payments: PaymentService = Depends(get_payment_service)):
        payment = payments.get_payment(payment_id)
        if payment is None:
            return JSONResponse(
                status_code=404,
                content=ErrorResponse(message=PAYMENT_NOT_FOUND_MESSAGE).model_dump(),
            )
        return payment

    return app


app = create_app()
