from .auth import router as auth_router
from .clients import router as clients_router
from .units import router as units_router
from .brokers import router as brokers_router, public_router
from .negotiations import router as negotiations_router
from .receipts import router as receipts_router
from .state import router as state_router
from .stats import router as stats_router
from .cep import router as cep_router

__all__ = [
    "auth_router",
    "clients_router",
    "units_router",
    "brokers_router",
    "public_router",
    "negotiations_router",
    "receipts_router",
    "state_router",
    "stats_router",
    "cep_router"
]
