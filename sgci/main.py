"""
S.G.C.I. - Main Application
Gestão comercial imobiliária: cadastros, negociações e recibos assinados
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import JSONResponse
from sqlalchemy.orm.exc import StaleDataError
from starlette.middleware.base import BaseHTTPMiddleware

from sgci.core import settings
from sgci.core.exceptions import SgciError, ReceiptValidationError, VersionConflictError
from sgci.database import init_db
from sgci.services.records import uploads_dir
from sgci.api import (
    auth_router,
    clients_router,
    units_router,
    brokers_router,
    public_router,
    negotiations_router,
    receipts_router,
    state_router,
    stats_router,
    cep_router
)

# Rate limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sgci.api.auth import limiter

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle do aplicativo"""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Inicializa banco de dados
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")


# Middleware de headers de seguranca
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adiciona headers de seguranca em todas as respostas"""
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Cache control para endpoints de autenticacao
        if "/auth" in request.url.path or "/login" in request.url.path:
            response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
            response.headers["Pragma"] = "no-cache"
        return response


# Cria aplicação
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Sistema de Gestão Comercial Imobiliária com recibos verificáveis",
    lifespan=lifespan,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None
)

# Configura rate limiter na aplicacao
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(ReceiptValidationError)
async def receipt_validation_handler(request: Request, exc: ReceiptValidationError):
    return JSONResponse(status_code=exc.status_code, content={"errors": exc.errors})


@app.exception_handler(VersionConflictError)
async def version_conflict_handler(request: Request, exc: VersionConflictError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "errorType": type(exc).__name__, "currentVersion": exc.current_version}
    )


@app.exception_handler(SgciError)
async def sgci_error_handler(request: Request, exc: SgciError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "errorType": type(exc).__name__}
    )


@app.exception_handler(StaleDataError)
async def stale_data_handler(request: Request, exc: StaleDataError):
    logger.warning(f"Gravação concorrente detectada em {request.url.path}: {exc}")
    return JSONResponse(
        status_code=409,
        content={
            "error": "Registro alterado por outra sessão. Recarregue e tente novamente.",
            "errorType": "VersionConflictError",
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# Headers de seguranca (adicionar ANTES do CORS)
app.add_middleware(SecurityHeadersMiddleware)

# CORS (deve vir DEPOIS dos headers de seguranca)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-recibo-share-id", "x-recibo-share-url", "Content-Disposition"],
)

# Routers
app.include_router(auth_router, prefix="/api")
app.include_router(clients_router, prefix="/api")
app.include_router(units_router, prefix="/api")
app.include_router(brokers_router, prefix="/api")
app.include_router(public_router, prefix="/api")
app.include_router(negotiations_router, prefix="/api")
app.include_router(receipts_router, prefix="/api")
app.include_router(state_router, prefix="/api")
app.include_router(stats_router, prefix="/api")
app.include_router(cep_router, prefix="/api")

# Static files para uploads (fotos de corretores em uploads/corretores)
uploads_path = uploads_dir()
(uploads_path / "corretores").mkdir(parents=True, exist_ok=True)
logger.info(f"Uploads directory: {uploads_path}")
app.mount("/uploads", StaticFiles(directory=str(uploads_path)), name="uploads")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "sgci.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
