from .auth import LoginRequest, LoginResponse, UserCreate, UserStatusUpdate, UserResponse
from .client import ClientCreate, ClientUpdate, ClientResponse
from .unit import UnitCreate, UnitUpdate, UnitResponse
from .broker import BrokerCreate, BrokerUpdate, BrokerApproval, BrokerRegistrationResponse
from .negotiation import (
    TradeIn,
    InstallmentIn,
    InstallmentCreate,
    InstallmentStatusUpdate,
    NegotiationCreate,
    NegotiationUpdate,
    InstallmentReceiptRequest,
    LedgerSummaryResponse
)
from .receipt import (
    ReceiptData,
    QrOptions,
    QrPayload,
    SignatureResponse,
    ReceiptLookupResponse,
    ReceiptLinkRequest
)
from .state import StateDocument

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "UserCreate",
    "UserStatusUpdate",
    "UserResponse",
    "ClientCreate",
    "ClientUpdate",
    "ClientResponse",
    "UnitCreate",
    "UnitUpdate",
    "UnitResponse",
    "BrokerCreate",
    "BrokerUpdate",
    "BrokerApproval",
    "BrokerRegistrationResponse",
    "TradeIn",
    "InstallmentIn",
    "InstallmentCreate",
    "InstallmentStatusUpdate",
    "NegotiationCreate",
    "NegotiationUpdate",
    "InstallmentReceiptRequest",
    "LedgerSummaryResponse",
    "ReceiptData",
    "QrOptions",
    "QrPayload",
    "SignatureResponse",
    "ReceiptLookupResponse",
    "ReceiptLinkRequest",
    "StateDocument"
]
