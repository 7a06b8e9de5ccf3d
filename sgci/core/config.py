"""
S.G.C.I. - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
import secrets
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env com override para sobrescrever variáveis do sistema
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file, override=True)


class Settings(BaseSettings):
    # App
    APP_NAME: str = "S.G.C.I."
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Database (accepts DATABASE_URL or SGCI_DATABASE_URL)
    DATABASE_URL: Optional[str] = None
    SGCI_DATABASE_URL: str = "sqlite+aiosqlite:///./sgci.db"

    @property
    def db_url(self) -> str:
        """Returns DATABASE_URL if set, otherwise SGCI_DATABASE_URL"""
        return self.DATABASE_URL or self.SGCI_DATABASE_URL

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    # Security
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    RATE_LIMIT_ENABLED: bool = True

    # Segredo usado na assinatura dos recibos (deve ser fixo em produção,
    # senão os hashes emitidos deixam de conferir após um restart)
    HASH_SECRET: str = "sgci-recibos-dev-secret"

    # Admin inicial
    ADMIN_EMAIL: str = "admin@sgci.com.br"
    ADMIN_PASSWORD: str = "change-me-in-production"
    ADMIN_NAME: str = "Administrador"

    # CORS
    CORS_ORIGINS: list = ["*"]

    # URL pública usada nos links de verificação/compartilhamento
    APP_BASE_URL: str = "http://localhost:3000"

    # Emitente dos recibos
    EMISSOR_NOME: str = "DUARTE URBANISMO LTDA"
    EMISSOR_CNPJ: str = "47.200.760/0001-06"
    EMPRESA_CEP: str = "88015-200"
    EMPRESA_ENDERECO: str = "Av. Beira-Mar Norte, 1800 - Centro"
    EMPRESA_TELEFONE: str = "(48) 4000-3010"
    EMPRESA_EMAIL: str = "financeiro@duarteurbanismo.com"
    EMPRESA_CIDADE: str = "Florianópolis"
    EMPRESA_UF: str = "SC"
    LOGO_PATH: Optional[str] = None

    # Dados bancários (exibidos apenas em recibos pendentes)
    BANCO_NOME: str = "Banco do Brasil"
    BANCO_AGENCIA: str = "3582-3"
    BANCO_CONTA: str = "45021-7"
    BANCO_TIPO_CONTA: str = "Conta Corrente PJ"

    # PIX
    PIX_KEY: str = "47.200.760/0001-06"
    PIX_MERCHANT_CITY: str = "Florianopolis"

    # Uploads
    UPLOADS_DIR: Optional[str] = None
    MAX_PHOTO_SIZE_MB: int = 5

    # Consulta de CEP
    VIACEP_URL: str = "https://viacep.com.br/ws"
    VIACEP_TIMEOUT: float = 10.0

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
