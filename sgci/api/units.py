"""
S.G.C.I. - Development Units API
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.database import get_db
from sgci.models import User
from sgci.schemas import UnitCreate, UnitUpdate, UnitResponse
from sgci.core.permissions import Action
from sgci.services import records
from sgci.api.auth import require_action

router = APIRouter(prefix="/empreendimentos", tags=["Empreendimentos"])


@router.get("", response_model=List[UnitResponse])
async def list_units(
    search: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    units = await records.list_units(db, search)
    return [u.to_dict() for u in units]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    unit = await records.get_unit(db, unit_id)
    return unit.to_dict()


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
async def create_unit(
    request: UnitCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    unit = await records.create_unit(db, request)
    await db.commit()
    return unit.to_dict()


@router.put("/{unit_id}", response_model=UnitResponse)
async def update_unit(
    unit_id: str,
    request: UnitUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    unit = await records.update_unit(db, unit_id, request)
    await db.commit()
    return unit.to_dict()


@router.delete("/{unit_id}")
async def delete_unit(
    unit_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_RECORDS))
):
    """Remove a unidade sem afetar as negociações"""
    await records.delete_unit(db, unit_id)
    await db.commit()
    return {"message": "Empreendimento removido com sucesso"}
