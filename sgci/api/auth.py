"""
S.G.C.I. - Auth API
Autenticação e gestão de usuários do painel
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from slowapi import Limiter
from slowapi.util import get_remote_address

from sgci.database import get_db
from sgci.models import User
from sgci.schemas import LoginRequest, LoginResponse, UserCreate, UserStatusUpdate, UserResponse
from sgci.core import (
    verify_password,
    get_password_hash,
    create_access_token,
    verify_access_token,
    settings
)
from sgci.core.permissions import Action, UserStatus, is_allowed

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])
security = HTTPBearer()
limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """Dependency para obter o usuário autenticado"""
    payload = verify_access_token(credentials.credentials)

    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token inválido ou expirado"
        )

    user = await db.get(User, payload.get("sub"))
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuário não encontrado"
        )

    return user


def require_action(action: Action):
    """Dependency que exige permissão para a ação informada"""
    async def checker(user: User = Depends(get_current_user)) -> User:
        if not is_allowed(user.role, user.status, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Acesso negado"
            )
        return user

    return checker


@router.post("/login", response_model=LoginResponse)
@limiter.limit("10/minute")
async def login(request: Request, credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Login de usuário do painel"""
    result = await db.execute(
        select(User).where(User.email == credentials.email.lower())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.hashed_password):
        logger.warning(f"Tentativa de login inválida para {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="E-mail ou senha inválidos"
        )

    if user.status == UserStatus.PENDING.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cadastro aguardando aprovação"
        )
    if user.status == UserStatus.REJECTED.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cadastro rejeitado"
        )

    # Atualiza último login
    user.last_login_at = datetime.utcnow()
    await db.commit()

    access_token = create_access_token(
        data={"sub": user.id, "email": user.email, "role": user.role}
    )

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=user.to_dict()
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Retorna dados do usuário atual"""
    return user.to_dict()


@router.get("/users", response_model=List[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_action(Action.MANAGE_USERS))
):
    """Lista usuários do painel"""
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return [u.to_dict() for u in result.scalars().all()]


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_action(Action.MANAGE_USERS))
):
    """Cria usuário (administrador ou corretor)"""
    email = request.email.lower()
    result = await db.execute(select(User).where(User.email == email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="E-mail já cadastrado"
        )

    user = User(
        email=email,
        hashed_password=get_password_hash(request.password),
        name=request.name,
        role=request.role.value,
        status=request.status.value,
        corretor_id=request.corretor_id,
    )
    if request.status == UserStatus.APPROVED:
        user.approved_at = datetime.utcnow()
        user.approved_by = admin.email

    db.add(user)
    await db.commit()

    logger.info(f"Usuário {email} ({user.role}) criado por {admin.email}")
    return user.to_dict()


@router.post("/users/{user_id}/status", response_model=UserResponse)
async def update_user_status(
    user_id: str,
    request: UserStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_action(Action.MANAGE_USERS))
):
    """Aprova, rejeita ou volta um usuário para pendente"""
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Usuário não encontrado"
        )

    user.status = request.status.value
    if request.status == UserStatus.APPROVED:
        user.approved_at = datetime.utcnow()
        user.approved_by = admin.email

    await db.commit()

    logger.info(f"Usuário {user.email} agora {user.status} ({admin.email})")
    return user.to_dict()
