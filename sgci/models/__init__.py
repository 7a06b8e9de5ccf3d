from .user import User
from .client import Client
from .broker import Broker, BrokerStatus
from .unit import Unit, UnitStatus
from .negotiation import (
    Negotiation,
    Installment,
    NegotiationStatus,
    InstallmentStatus,
    TradeInType,
    MAX_INSTALLMENTS
)
from .receipt import Receipt

__all__ = [
    "User",
    "Client",
    "Broker",
    "BrokerStatus",
    "Unit",
    "UnitStatus",
    "Negotiation",
    "Installment",
    "NegotiationStatus",
    "InstallmentStatus",
    "TradeInType",
    "MAX_INSTALLMENTS",
    "Receipt"
]
