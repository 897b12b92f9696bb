# payment_gateway package
__version__ = "0.1.0"

from .models import (
    PaymentRequest,
    PaymentRecord,
    PaymentView,
    PaymentStatus,
    FieldViolation,
)
from .errors import (
    ErrorKind,
    PaymentError,
    RepositoryError,
    DuplicatePaymentError,
    BANK_UNAVAILABLE_MESSAGE,
)
from .validation import validate_payment_request, SUPPORTED_CURRENCIES
from .repository import PaymentRepository
from .services import PaymentService, PaymentResult

# Bank exports
from .bank import (
    BankGatewayBase,
    BankAuthorizationRequest,
    BankOutcome,
    BankFailureKind,
    AcquiringBankClient,
    BankSimulator,
)
