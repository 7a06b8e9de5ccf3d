"""
S.G.C.I. - Brokers API
Cadastro de corretores, autocadastro público e aprovação
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from starlette.datastructures import UploadFile

from sgci.core.config import settings
from sgci.core.permissions import Action
from sgci.database import get_db
from sgci.models import Broker, User
from sgci.schemas import BrokerCreate, BrokerUpdate, BrokerApproval, BrokerRegistrationResponse
from sgci.services import records
from sgci.utils.ids import generate_id
from sgci.api.auth import require_action, get_current_user, limiter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/corretores", tags=["Corretores"])
public_router = APIRouter(prefix="/public", tags=["Público"])

PHOTO_TYPES = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

FORM_FIELDS = (
    "userId", "nome", "creci", "email", "telefone", "whatsapp", "instagram",
    "endereco", "cep", "cidade", "estado", "bancoNome", "bancoAgencia",
    "bancoConta", "bancoTipoConta", "bancoPix", "areaAtuacao", "observacoes",
)


async def read_photo(foto) -> Optional[tuple]:
    """Valida a foto enviada; retorna (conteúdo, extensão) ou None quando ausente"""
    if not isinstance(foto, UploadFile):
        return None

    contents = await foto.read()
    if not contents:
        return None

    if len(contents) > settings.MAX_PHOTO_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Foto muito grande. Máximo {settings.MAX_PHOTO_SIZE_MB}MB"
        )

    ext = PHOTO_TYPES.get((foto.content_type or "").lower())
    if not ext:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Formato de imagem inválido. Use JPG, PNG ou WEBP"
        )

    return contents, ext


def save_photo(broker_id: str, contents: bytes, ext: str) -> None:
    upload_dir = records.uploads_dir() / "corretores"
    upload_dir.mkdir(parents=True, exist_ok=True)

    filepath = upload_dir / f"{broker_id}.{ext}"
    filepath.write_bytes(contents)
    logger.info(f"Foto do corretor {broker_id} salva em {filepath}")


def remove_photo(photo_url: str) -> None:
    """Apaga o arquivo de uma foto servida em /uploads/corretores"""
    if not photo_url.startswith("/uploads/corretores/"):
        return
    filepath = records.uploads_dir() / "corretores" / photo_url.rsplit("/", 1)[-1]
    filepath.unlink(missing_ok=True)
    logger.info(f"Foto antiga removida: {filepath}")


@router.get("")
async def list_brokers(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Lista corretores (todos os status)"""
    brokers = await records.list_brokers(db, search, status_filter)
    return [b.to_dict() for b in brokers]


async def _find_user_broker(db: AsyncSession, user: User) -> Broker:
    broker = None
    if user.corretor_id:
        broker = await db.get(Broker, user.corretor_id)
    if not broker:
        result = await db.execute(select(Broker).where(Broker.user_id == user.id))
        broker = result.scalars().first()

    if not broker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Corretor não encontrado"
        )
    return broker


@router.get("/me")
async def get_my_broker(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Cadastro de corretor do usuário logado"""
    broker = await _find_user_broker(db, user)
    return broker.to_dict()


@router.post("/me/foto")
async def update_my_photo(
    request: Request,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """Troca a foto do corretor logado (multipart, campo foto)"""
    broker = await _find_user_broker(db, user)

    form = await request.form()
    photo = await read_photo(form.get("foto"))
    if not photo:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Foto é obrigatória"
        )

    contents, ext = photo
    previous = broker.foto
    broker.foto = f"/uploads/corretores/{broker.id}.{ext}"
    save_photo(broker.id, contents, ext)
    if previous and previous != broker.foto:
        remove_photo(previous)
    await db.commit()

    return {
        "success": True,
        "message": "Foto atualizada com sucesso",
        "foto": broker.foto
    }


@router.get("/{broker_id}")
async def get_broker(
    broker_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    broker = await records.get_broker(db, broker_id)
    return broker.to_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_broker(
    request: BrokerCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Cadastro feito pela equipe (já aprovado)"""
    broker = await records.create_broker(db, request)
    await db.commit()
    return broker.to_dict()


@router.put("/{broker_id}")
async def update_broker(
    broker_id: str,
    request: BrokerUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    broker = await records.update_broker(db, broker_id, request)
    await db.commit()
    return broker.to_dict()


@router.delete("/{broker_id}")
async def delete_broker(
    broker_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Remove corretor. Negociações que o referenciam são mantidas."""
    await records.delete_broker(db, broker_id)
    await db.commit()
    return {"message": "Corretor removido com sucesso"}


@router.post("/cadastro", response_model=BrokerRegistrationResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("10/minute")
async def register_broker(request: Request, db: AsyncSession = Depends(get_db)):
    """
    Autocadastro público (multipart/form-data).
    Foto opcional: JPG, PNG ou WEBP de até MAX_PHOTO_SIZE_MB.
    """
    form = await request.form()
    fields = {name: str(form.get(name) or "").strip() for name in FORM_FIELDS}
    photo = await read_photo(form.get("foto"))

    broker_id = generate_id("cor")
    photo_url = f"/uploads/corretores/{broker_id}.{photo[1]}" if photo else None

    broker = await records.register_broker(
        db,
        fields,
        photo_url=photo_url,
        user_id=fields.get("userId") or None,
        broker_id=broker_id,
    )
    if photo:
        save_photo(broker.id, *photo)
    await db.commit()

    return BrokerRegistrationResponse(
        message="Cadastro realizado com sucesso! Aguarde aprovação.",
        corretor_id=broker.id
    )


@router.post("/{broker_id}/aprovacao")
async def approve_broker(
    broker_id: str,
    request: BrokerApproval,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.APPROVE_BROKERS))
):
    """Aprova ou rejeita um autocadastro"""
    broker = await records.set_broker_approval(db, broker_id, request.status, user)
    await db.commit()

    acao = "aprovado" if request.status == "Aprovado" else "rejeitado"
    return {
        "success": True,
        "message": f"Corretor {acao} com sucesso",
        "corretor": broker.to_dict()
    }


@public_router.get("/corretores")
async def list_public_brokers(db: AsyncSession = Depends(get_db)):
    """Corretores aprovados, sem dados bancários"""
    brokers = await records.list_public_brokers(db)
    return [b.to_public_dict() for b in brokers]
