"""
S.G.C.I. - Negotiations API
Negociações, parcelas e recibos de parcela
"""
import logging
from typing import Optional
from fastapi import APIRouter, Body, Depends, HTTPException, status, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.exceptions import SgciError
from sgci.core.permissions import Action
from sgci.database import get_db
from sgci.models import User
from sgci.schemas import (
    NegotiationCreate,
    NegotiationUpdate,
    InstallmentCreate,
    InstallmentStatusUpdate,
    InstallmentReceiptRequest,
    ReceiptLinkRequest,
)
from sgci.services import negotiations as service
from sgci.services.ledger import summarize, upcoming_payments
from sgci.services.receipts import issue_receipt, find_receipt_by_share_id
from sgci.services.records import resolve_names
from sgci.api.auth import require_action
from sgci.api.receipts import request_origin, pdf_response, pdf_error_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/negociacoes", tags=["Negociações"])


@router.get("")
async def list_negotiations(
    status_filter: Optional[str] = Query(None, alias="status"),
    cliente_id: Optional[str] = Query(None, alias="clienteId"),
    corretor_id: Optional[str] = Query(None, alias="corretorId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Lista negociações (mais recentes primeiro)"""
    negotiations = await service.list_negotiations(db, status_filter, cliente_id, corretor_id)
    return [n.to_dict() for n in negotiations]


@router.get("/{negotiation_id}")
async def get_negotiation(
    negotiation_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Negociação com parcelas e nomes de cliente, unidade e corretor"""
    negotiation = await service.get_negotiation(db, negotiation_id)
    data = negotiation.to_dict()
    data["nomes"] = await resolve_names(db, negotiation)
    return data


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_negotiation(
    request: NegotiationCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_NEGOTIATIONS))
):
    negotiation = await service.create_negotiation(db, request)
    await db.commit()
    return negotiation.to_dict()


@router.put("/{negotiation_id}")
async def update_negotiation(
    negotiation_id: str,
    request: NegotiationUpdate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_NEGOTIATIONS))
):
    negotiation = await service.update_negotiation(db, negotiation_id, request)
    await db.commit()
    return negotiation.to_dict()


@router.delete("/{negotiation_id}")
async def delete_negotiation(
    negotiation_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_NEGOTIATIONS))
):
    """Remove a negociação e suas parcelas"""
    await service.delete_negotiation(db, negotiation_id)
    await db.commit()
    return {"message": "Negociação removida com sucesso"}


@router.get("/{negotiation_id}/resumo")
async def get_summary(
    negotiation_id: str,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_RECORDS))
):
    """Totais, saldos e simulação de parcela"""
    negotiation = await service.get_negotiation(db, negotiation_id)
    summary = summarize(negotiation).to_dict()
    summary.update({
        "negociacaoId": negotiation.id,
        "nomes": await resolve_names(db, negotiation),
        "proximasParcelas": [p.to_dict() for p in upcoming_payments(negotiation.parcelas)],
    })
    return summary


@router.post("/{negotiation_id}/parcelas", status_code=status.HTTP_201_CREATED)
async def add_installment(
    negotiation_id: str,
    request: InstallmentCreate,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_NEGOTIATIONS))
):
    """Acrescenta uma parcela pendente (máximo de 100 por negociação)"""
    negotiation = await service.get_negotiation(db, negotiation_id)
    await service.add_installment(db, negotiation, request.valor, request.vencimento, request.version)
    await db.commit()
    return negotiation.to_dict()


@router.post("/{negotiation_id}/parcelas/{installment_id}/status")
async def update_installment_status(
    negotiation_id: str,
    installment_id: str,
    request: Optional[InstallmentStatusUpdate] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.MANAGE_NEGOTIATIONS))
):
    """Alterna a parcela entre Paga e Pendente (ou define o status informado)"""
    request = request or InstallmentStatusUpdate()
    negotiation = await service.get_negotiation(db, negotiation_id)
    await service.set_installment_status(db, negotiation, installment_id, request.status, request.version)
    await db.commit()
    return negotiation.to_dict()


@router.post("/{negotiation_id}/parcelas/{installment_id}/recibo-link")
async def link_receipt(
    negotiation_id: str,
    installment_id: str,
    request: ReceiptLinkRequest,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.ISSUE_RECEIPTS))
):
    """Vincula um recibo já emitido à parcela (repetir o mesmo vínculo não altera nada)"""
    record = await find_receipt_by_share_id(db, request.share_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Recibo não encontrado"
        )

    negotiation = await service.get_negotiation(db, negotiation_id)
    await service.link_receipt_to_installment(
        db,
        negotiation,
        installment_id,
        record.share_id,
        numero=request.numero or record.numero,
    )
    await db.commit()
    return negotiation.to_dict()


@router.post("/{negotiation_id}/parcelas/{installment_id}/recibo")
async def issue_installment_receipt(
    negotiation_id: str,
    installment_id: str,
    request: Request,
    options: Optional[InstallmentReceiptRequest] = Body(None),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.ISSUE_RECEIPTS))
):
    """
    Emite o recibo da parcela e devolve o PDF.
    O vínculo parcela/recibo é feito depois da entrega: se falhar, apenas
    registra aviso e pode ser refeito em /recibo-link.
    """
    options = options or InstallmentReceiptRequest()
    negotiation = await service.get_negotiation(db, negotiation_id)
    payload = await service.build_installment_receipt(
        db,
        negotiation,
        installment_id,
        emitido_por_nome=options.emitido_por_nome or user.name,
        data_emissao=options.data_emissao,
    )

    try:
        issued = await issue_receipt(db, payload, request_origin(request))
    except SgciError:
        raise
    except Exception as e:
        logger.error(f"Erro ao gerar PDF da parcela {installment_id}: {e}")
        return pdf_error_response(e)

    try:
        await service.link_receipt_to_installment(
            db,
            negotiation,
            installment_id,
            issued.share_id,
            numero=issued.data.numero,
            share_url=issued.share_url,
        )
        await db.commit()
    except (SgciError, SQLAlchemyError) as e:
        await db.rollback()
        logger.warning(f"Recibo {issued.data.numero} emitido, mas não vinculado à parcela {installment_id}: {e}")

    return pdf_response(issued)
