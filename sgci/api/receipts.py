"""
S.G.C.I. - Receipts API
Emissão (PDF), assinatura e verificação pública de recibos
"""
import logging
import traceback
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.config import settings
from sgci.core.authenticity import verify_receipt_hash, build_share_url, build_qr_payload
from sgci.core.exceptions import SgciError
from sgci.core.permissions import Action
from sgci.database import get_db
from sgci.models import User
from sgci.schemas import SignatureResponse
from sgci.services.receipts import (
    IssuedReceipt,
    issue_receipt,
    sign_receipt,
    find_receipt_by_numero,
    find_receipt_by_share_id,
    record_to_receipt_data,
)
from sgci.api.auth import require_action

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recibos", tags=["Recibos"])

PUBLIC_FIELDS = (
    "numero", "valor", "valorExtenso", "recebidoDe", "cpfCnpj", "referente", "data",
    "formaPagamento", "emitidoPor", "cpfEmitente", "enderecoEmitente",
    "telefoneEmitente", "emailEmitente",
)


def request_origin(request: Request) -> str:
    return request.headers.get("origin") or settings.APP_BASE_URL


def pdf_response(issued: IssuedReceipt) -> Response:
    """PDF como anexo, com o share id nos headers"""
    return Response(
        content=issued.pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="recibo-{issued.data.numero}.pdf"',
            "x-recibo-share-id": issued.share_id,
            "x-recibo-share-url": issued.share_url,
        }
    )


def pdf_error_response(error: Exception) -> JSONResponse:
    """Diagnóstico de falha na geração do PDF (stack fora de produção)"""
    content = {
        "error": str(error) or "Erro ao gerar PDF",
        "errorType": type(error).__name__,
        "errorString": repr(error),
        "timestamp": datetime.utcnow().isoformat(),
    }
    if not settings.is_production:
        content["stack"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return JSONResponse(status_code=500, content=content)


def _hash_matches(record) -> bool:
    return verify_receipt_hash(record_to_receipt_data(record), record.hash)


@router.post("/gerar-pdf")
async def generate_pdf(
    request: Request,
    payload: dict = Body(...),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.ISSUE_RECEIPTS))
):
    """
    Gera o recibo em PDF.
    O recibo é assinado e gravado antes da renderização; o share id volta
    nos headers x-recibo-share-id e x-recibo-share-url.
    """
    try:
        issued = await issue_receipt(db, payload, request_origin(request))
    except SgciError:
        raise
    except Exception as e:
        logger.error(f"Erro ao gerar PDF do recibo: {e}")
        return pdf_error_response(e)

    logger.info(f"PDF do recibo {issued.data.numero} entregue ({len(issued.pdf)} bytes) para {user.email}")
    return pdf_response(issued)


@router.post("/assinatura", response_model=SignatureResponse)
async def sign(
    request: Request,
    payload: dict = Body(...),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.ISSUE_RECEIPTS))
):
    """Assina e grava o recibo sem gerar o PDF"""
    data, hash_value, share_id, qr_payload = await sign_receipt(db, payload, request_origin(request))
    await db.commit()

    return SignatureResponse(hash=hash_value, share_id=share_id, qr_payload=qr_payload)


@router.get("/share/{share_id}")
async def get_shared_receipt(share_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    """Consulta pública pelo link de compartilhamento"""
    record = await find_receipt_by_share_id(db, share_id)
    if not record:
        return JSONResponse(status_code=404, content={"error": "Recibo não encontrado."})

    data = record_to_receipt_data(record)
    origin = request_origin(request)
    qr_payload = build_qr_payload(data, record.hash, origin, record.share_id)

    recibo = record.to_dict()
    recibo["shareUrl"] = build_share_url(record.share_id, origin)
    hash_matches = _hash_matches(record)

    return {
        "valid": hash_matches,
        "hashMatches": hash_matches,
        "recibo": recibo,
        "qrPayload": qr_payload.model_dump(by_alias=True),
    }


@router.get("/{numero}")
async def verify_receipt(
    numero: str,
    request: Request,
    hash: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """
    Verificação pública do recibo.
    valid = hash gravado confere com os dados E (quando informado) o hash da URL confere.
    """
    record = await find_receipt_by_numero(db, numero)
    if not record:
        return JSONResponse(status_code=404, content={"valid": False, "reason": "NOT_FOUND"})

    hash_matches = _hash_matches(record)
    provided_hash_matches = None
    if hash:
        provided_hash_matches = verify_receipt_hash(record_to_receipt_data(record), hash)

    stored = record.data or {}
    recibo = {field: stored.get(field) for field in PUBLIC_FIELDS}
    recibo.update({
        "shareId": record.share_id,
        "shareUrl": build_share_url(record.share_id, request_origin(request)),
        "hash": record.hash,
        "createdAt": record.created_at.isoformat() if record.created_at else None,
        "updatedAt": record.updated_at.isoformat() if record.updated_at else None,
    })

    return {
        "valid": hash_matches and (provided_hash_matches if provided_hash_matches is not None else True),
        "hashMatches": hash_matches,
        "providedHashMatches": provided_hash_matches,
        "recibo": recibo,
    }
