"""
S.G.C.I. - Clients API
CRUD de clientes (compradores)
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.database import get_db
from sgci.models import User
from sgci.schemas import ClientCreate, ClientUpdate, ClientResponse
from sgci.core.permissions import Action
from sgci.services import records
from sgci.api.auth import require_action

router = APIRouter(prefix="/clientes", tags=["Clientes"])


@router.get("", response_model=List[ClientResponse])
async def list_clients(
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Lista clientes por nome"""
    clients = await records.list_clients(db, search)
    return [c.to_dict() for c in clients]


@router.get("/{client_id}", response_model=ClientResponse)
async def get_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Retorna um cliente específico"""
    client = await records.get_client(db, client_id)
    return client.to_dict()


@router.post("", response_model=ClientResponse, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Cadastra cliente (documento validado e único)"""
    client = await records.create_client(db, request)
    await db.commit()
    return client.to_dict()


@router.put("/{client_id}", response_model=ClientResponse)
async def update_client(
    client_id: str,
    request: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Atualiza cliente; informe version para detectar edição concorrente"""
    client = await records.update_client(db, client_id, request)
    await db.commit()
    return client.to_dict()


@router.delete("/{client_id}")
async def delete_client(
    client_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Remove cliente. Negociações que o referenciam são mantidas."""
    await records.delete_client(db, client_id)
    await db.commit()
    return {"message": "Cliente removido com sucesso"}
