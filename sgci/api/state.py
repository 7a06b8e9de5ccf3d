"""
S.G.C.I. - State API
Leitura e substituição do documento completo (compatibilidade com o painel antigo)
"""
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.permissions import Action
from sgci.database import get_db
from sgci.models import User
from sgci.schemas import StateDocument
from sgci.services.state import fetch_state, replace_state, seed_state
from sgci.api.auth import require_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sgci", tags=["Estado"])


@router.get("/state")
async def get_state(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    state = await fetch_state(db)
    return JSONResponse(content=state, headers={"Cache-Control": "no-store"})


@router.put("/state")
async def put_state(
    request: StateDocument,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.REPLACE_STATE))
):
    """Substitui todas as coleções (a última gravação vence)"""
    await replace_state(db, request)
    await db.commit()
    logger.info(f"Estado completo substituído por {user.email}")
    return {"ok": True}


@router.post("/seed")
async def seed(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.SEED_DATA))
):
    """Grava os dados de exemplo se ainda não houver cadastros"""
    seeded, state = await seed_state(db)
    await db.commit()
    return {"ok": True, "seeded": seeded, "state": state}
