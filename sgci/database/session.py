"""
S.G.C.I. - Database Session
"""
import logging
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from sqlalchemy import select

from sgci.core.config import settings

logger = logging.getLogger(__name__)

# SQLite não compartilha bem conexões entre event loops (testes, reload)
_engine_kwargs = {"poolclass": NullPool} if settings.db_url.startswith("sqlite") else {"pool_pre_ping": True}

# Engine assíncrono
engine = create_async_engine(
    settings.db_url,
    echo=settings.DEBUG,
    **_engine_kwargs
)

# Session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

# Base para models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency para injetar sessão do banco"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def ensure_super_admin():
    """
    Garante que exista ao menos um usuário no sistema.
    Na primeira inicialização cria o SUPER_ADMIN configurado em ADMIN_EMAIL/ADMIN_PASSWORD.
    """
    from sgci.core.security import get_password_hash
    from sgci.core.permissions import UserRole, UserStatus
    from sgci.models.user import User

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).limit(1))
        if result.scalar_one_or_none():
            return

        admin = User(
            email=settings.ADMIN_EMAIL.lower(),
            hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
            name=settings.ADMIN_NAME,
            role=UserRole.SUPER_ADMIN.value,
            status=UserStatus.APPROVED.value,
        )
        session.add(admin)
        await session.commit()
        logger.info(f"Super admin {admin.email} criado")


async def init_db():
    """Inicializa banco de dados (cria tabelas) e garante o admin inicial"""
    import sgci.models  # noqa: F401  registra as tabelas em Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await ensure_super_admin()
