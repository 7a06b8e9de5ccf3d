"""
S.G.C.I. - Receipt Service
Saneamento, validação, assinatura, persistência e emissão de recibos
"""
import logging
import math
import re
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.config import settings
from sgci.core.authenticity import generate_receipt_hash, build_qr_payload, build_share_url
from sgci.core.exceptions import ReceiptValidationError
from sgci.core.pix import build_static_pix_payload
from sgci.models import Receipt
from sgci.schemas.receipt import ReceiptData, QrOptions, QrPayload
from sgci.utils.formatting import format_cep, numero_por_extenso
from sgci.utils.ids import generate_share_id
from sgci.utils.qrcodes import generate_receipt_qr_images
from sgci.utils.receiptGenerator import generate_receipt_pdf
from sgci.utils.validators import (
    validate_text_field,
    validate_amount,
    validate_cpf_cnpj,
    validate_date,
    validate_cep,
    validate_phone,
    validate_email,
    MAX_AMOUNT,
)

logger = logging.getLogger(__name__)

RECEIPT_STATUSES = ("Paga", "Pendente")


@dataclass
class IssuedReceipt:
    data: ReceiptData
    hash: str
    share_id: str
    share_url: str
    qr_payload: QrPayload
    pdf: bytes


# ============================================
# SANEAMENTO E VALIDAÇÃO
# ============================================

def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(value) -> Optional[str]:
    return _text(value) or None


def _optional_number(value, cast=float):
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


def _sanitize_numero(value) -> str:
    numero = re.sub(r"[^A-Z0-9-]", "", _text(value).upper())[:32]
    if numero:
        return numero
    return f"REC-{str(int(time.time() * 1000))[-6:]}"


def _sanitize_valor(value) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        valor = float(value)
    except (TypeError, ValueError):
        return 0.0
    return valor if math.isfinite(valor) else 0.0


def _extenso(valor: float) -> str:
    # Acima do limite o validador rejeita o recibo
    if valor > MAX_AMOUNT:
        return ""
    return numero_por_extenso(valor)


def sanitize_receipt_data(payload: dict) -> ReceiptData:
    """
    Normaliza o payload recebido (camelCase) em um ReceiptData.
    Campos do emitente ausentes assumem os dados da empresa.
    """
    payload = payload or {}
    valor = _sanitize_valor(payload.get("valor"))
    status = payload.get("status")
    conta_para_credito = payload.get("contaParaCredito")

    return ReceiptData(
        numero=_sanitize_numero(payload.get("numero")),
        valor=valor,
        valor_extenso=_text(payload.get("valorExtenso")) or _extenso(valor),
        recebido_de=_text(payload.get("recebidoDe")),
        cpf_cnpj=_text(payload.get("cpfCnpj")),
        referente=_text(payload.get("referente")),
        data=_text(payload.get("data"))[:10],
        data_emissao=_text(payload.get("dataEmissao"))[:10] or None,
        forma_pagamento=_text(payload.get("formaPagamento")),
        emitido_por=_text(payload.get("emitidoPor")) or settings.EMISSOR_NOME,
        emitido_por_nome=_optional_text(payload.get("emitidoPorNome")),
        cpf_emitente=_text(payload.get("cpfEmitente")) or settings.EMISSOR_CNPJ,
        cep_emitente=format_cep(_text(payload.get("cepEmitente")) or settings.EMPRESA_CEP),
        endereco_emitente=_text(payload.get("enderecoEmitente")) or settings.EMPRESA_ENDERECO,
        telefone_emitente=_text(payload.get("telefoneEmitente")) or settings.EMPRESA_TELEFONE,
        email_emitente=(_text(payload.get("emailEmitente")) or settings.EMPRESA_EMAIL).lower(),
        empreendimento_nome=_optional_text(payload.get("empreendimentoNome")),
        empreendimento_unidade=_optional_text(payload.get("empreendimentoUnidade")),
        empreendimento_metragem=_optional_number(payload.get("empreendimentoMetragem")),
        empreendimento_fase=_optional_text(payload.get("empreendimentoFase")),
        numero_lote=_optional_text(payload.get("numeroLote")),
        numero_parcela=_optional_number(payload.get("numeroParcela"), int),
        total_parcelas=_optional_number(payload.get("totalParcelas"), int),
        corretor_nome=_optional_text(payload.get("corretorNome")),
        corretor_creci=_optional_text(payload.get("corretorCreci")),
        status=status if status in RECEIPT_STATUSES else None,
        conta_para_credito=conta_para_credito if isinstance(conta_para_credito, bool) else None,
        banco_nome=_optional_text(payload.get("bancoNome")),
        banco_agencia=_optional_text(payload.get("bancoAgencia")),
        banco_conta=_optional_text(payload.get("bancoConta")),
        banco_tipo_conta=_optional_text(payload.get("bancoTipoConta")),
        pix_key=_optional_text(payload.get("pixKey")),
        pix_payload=_optional_text(payload.get("pixPayload")),
        share_id=_optional_text(payload.get("shareId")),
    )


def validate_receipt_data(data: ReceiptData) -> List[str]:
    """Lista de mensagens de erro (vazia quando o recibo é válido)"""
    results = [
        validate_text_field(data.numero, "Número do recibo"),
        validate_amount(data.valor),
        validate_text_field(data.recebido_de, "Nome/Razão Social"),
        validate_cpf_cnpj(data.cpf_cnpj),
        validate_text_field(data.referente, "Referente a", 10),
        validate_date(data.data),
        validate_text_field(data.forma_pagamento, "Forma de pagamento"),
        validate_cep(data.cep_emitente),
        validate_text_field(data.endereco_emitente, "Endereço", 10),
        validate_phone(data.telefone_emitente),
        validate_email(data.email_emitente),
        validate_cpf_cnpj(data.cpf_emitente),
    ]
    return [r.message for r in results if not r.valid and r.message]


# ============================================
# REPOSITÓRIO
# ============================================

def _stored_document(data: ReceiptData) -> dict:
    return data.model_dump(by_alias=True, exclude_none=True, exclude={"share_id"})


def record_to_receipt_data(record: Receipt) -> ReceiptData:
    return ReceiptData.model_validate(record.data)


async def save_receipt(db: AsyncSession, data: ReceiptData, hash_value: str) -> str:
    """
    Grava (ou atualiza) o recibo pelo número.
    O share id de um recibo já existente é mantido.
    """
    existing = await db.get(Receipt, data.numero)
    now = datetime.utcnow()
    document = _stored_document(data)

    if existing:
        existing.hash = hash_value
        existing.valor = data.valor
        existing.recebido_de = data.recebido_de
        existing.data_pagamento = data.data
        existing.data = document
        existing.updated_at = now
        share_id = existing.share_id
    else:
        share_id = generate_share_id()
        db.add(Receipt(
            numero=data.numero,
            share_id=share_id,
            hash=hash_value,
            valor=data.valor,
            recebido_de=data.recebido_de,
            data_pagamento=data.data,
            data=document,
            created_at=now,
            updated_at=now,
        ))

    await db.flush()
    logger.info(f"Recibo {data.numero} salvo (shareId={share_id})")
    return share_id


async def find_receipt_by_numero(db: AsyncSession, numero: Optional[str]) -> Optional[Receipt]:
    if not numero or not numero.strip():
        return None
    return await db.get(Receipt, numero.strip())


async def find_receipt_by_share_id(db: AsyncSession, share_id: Optional[str]) -> Optional[Receipt]:
    if not share_id or not share_id.strip():
        return None
    result = await db.execute(select(Receipt).where(Receipt.share_id == share_id.strip()))
    return result.scalar_one_or_none()


async def seed_receipts(db: AsyncSession, seeds: List[dict]) -> List[Receipt]:
    """Substitui a coleção de recibos pelos recibos de exemplo, já assinados"""
    await db.execute(delete(Receipt))

    records = []
    for seed in seeds:
        if not seed.get("shareId") or not seed.get("data"):
            continue
        data = sanitize_receipt_data(seed["data"])
        created_at = seed.get("createdAt") or datetime.utcnow()
        record = Receipt(
            numero=data.numero,
            share_id=seed["shareId"],
            hash=generate_receipt_hash(data),
            valor=data.valor,
            recebido_de=data.recebido_de,
            data_pagamento=data.data,
            data=_stored_document(data),
            created_at=created_at,
            updated_at=seed.get("updatedAt") or created_at,
        )
        db.add(record)
        records.append(record)

    await db.flush()
    logger.info(f"{len(records)} recibos de exemplo gravados")
    return records


# ============================================
# EMISSÃO
# ============================================

def _apply_qr_options(data: ReceiptData, qr_options: QrOptions) -> ReceiptData:
    """Completa chave e payload PIX; monta o BR Code quando só a chave foi informada"""
    pix_key = qr_options.pix_key or data.pix_key
    pix_payload = qr_options.pix_payload or data.pix_payload

    if pix_key and not pix_payload:
        pix_payload = build_static_pix_payload(
            key=pix_key,
            amount=data.valor,
            merchant_name=settings.EMISSOR_NOME,
            merchant_city=settings.PIX_MERCHANT_CITY,
            tx_id=data.numero,
        )

    return data.model_copy(update={"pix_key": pix_key, "pix_payload": pix_payload})


def prepare_receipt(payload: dict) -> ReceiptData:
    """Saneia e valida; erros de validação interrompem antes de qualquer gravação"""
    data = sanitize_receipt_data(payload)
    errors = validate_receipt_data(data)
    if errors:
        raise ReceiptValidationError(errors)

    qr_options = QrOptions.model_validate((payload or {}).get("qrOptions") or {})
    return _apply_qr_options(data, qr_options)


async def sign_receipt(db: AsyncSession, payload: dict, origin: Optional[str] = None):
    """Assina e grava o recibo sem gerar PDF"""
    data = prepare_receipt(payload)
    hash_value = generate_receipt_hash(data)
    share_id = await save_receipt(db, data, hash_value)
    qr_payload = build_qr_payload(data, hash_value, origin, share_id)
    return data, hash_value, share_id, qr_payload


def company_data() -> dict:
    return {"cidade": settings.EMPRESA_CIDADE, "uf": settings.EMPRESA_UF}


async def issue_receipt(db: AsyncSession, payload: dict, origin: Optional[str] = None) -> IssuedReceipt:
    """
    Rascunho -> assinado -> renderizado -> entregue.
    O registro assinado é confirmado antes da renderização e permanece
    gravado mesmo que a geração do PDF falhe.
    """
    data, hash_value, share_id, qr_payload = await sign_receipt(db, payload, origin)
    await db.commit()
    logger.info(f"Recibo {data.numero} assinado (hash={hash_value[:12]}...)")

    qr_images = generate_receipt_qr_images(qr_payload)
    pdf = await generate_receipt_pdf(
        data,
        qr_payload,
        qr_images,
        company_data=company_data(),
        logo_path=settings.LOGO_PATH,
    )

    return IssuedReceipt(
        data=data,
        hash=hash_value,
        share_id=share_id,
        share_url=build_share_url(share_id, origin),
        qr_payload=qr_payload,
        pdf=pdf,
    )
