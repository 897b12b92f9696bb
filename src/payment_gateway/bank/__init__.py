"""Acquiring bank integrations."""

from .base import (
    BankGatewayBase,
    BankAuthorizationRequest,
    BankOutcome,
    BankFailure,
    BankFailureKind,
    OutcomeKind,
)
from .http_client import AcquiringBankClient
from .simulator import (
    BankSimulator,
    SimulatorConfig,
    SimulatorScenario,
    SimulatedAuthorization,
)

__all__ = [
    # Interface and outcome types
    "BankGatewayBase",
    "BankAuthorizationRequest",
    "BankOutcome",
    "BankFailure",
    "BankFailureKind",
    "OutcomeKind",
    # Implementations
    "AcquiringBankClient",
    "BankSimulator",
    "SimulatorConfig",
    "SimulatorScenario",
    "SimulatedAuthorization",
]
