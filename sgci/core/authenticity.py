"""
S.G.C.I. - Receipt Authenticity
Assinatura determinística dos recibos (SHA-256 sobre a forma canônica + segredo)
e montagem dos links públicos de verificação
"""
import hashlib
import hmac
from typing import Optional
from urllib.parse import quote

from .config import settings
from sgci.schemas.receipt import ReceiptData, QrPayload
from sgci.utils.formatting import only_digits


def canonicalize(data: ReceiptData) -> str:
    """Forma canônica dos campos assinados, separados por |"""
    fields = [
        data.numero.strip().upper(),
        f"{float(data.valor):.2f}",
        data.data,
        data.recebido_de.strip().upper(),
        only_digits(data.cpf_cnpj),
        data.referente.strip().upper(),
        data.forma_pagamento.strip().upper(),
        data.emitido_por.strip().upper(),
        only_digits(data.cpf_emitente),
        only_digits(data.cep_emitente),
        data.endereco_emitente.strip().upper(),
        only_digits(data.telefone_emitente),
        data.email_emitente.strip().lower(),
    ]
    return "|".join(fields)


def generate_receipt_hash(data: ReceiptData, secret: Optional[str] = None) -> str:
    """Hash hexadecimal (64 caracteres) do recibo"""
    content = f"{canonicalize(data)}|{secret or settings.HASH_SECRET}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def verify_receipt_hash(data: ReceiptData, hash_value: Optional[str]) -> bool:
    if not hash_value:
        return False
    return hmac.compare_digest(generate_receipt_hash(data), hash_value.strip().lower())


def _base_url(origin: Optional[str]) -> str:
    return (origin or settings.APP_BASE_URL).rstrip("/")


def build_verification_url(numero: str, hash_value: str, origin: Optional[str] = None) -> str:
    return f"{_base_url(origin)}/api/recibos/{quote(numero, safe='')}?hash={quote(hash_value, safe='')}"


def build_share_url(share_id: str, origin: Optional[str] = None) -> str:
    return f"{_base_url(origin)}/recibos/share/{quote(share_id, safe='')}"


def build_qr_payload(
    data: ReceiptData,
    hash_value: str,
    origin: Optional[str] = None,
    share_id: Optional[str] = None,
    pix_payload: Optional[str] = None,
    pix_key: Optional[str] = None
) -> QrPayload:
    return QrPayload(
        numero=data.numero,
        valor=data.valor,
        data=data.data,
        emitente=data.emitido_por,
        hash=hash_value,
        verify_url=build_verification_url(data.numero, hash_value, origin),
        share_url=build_share_url(share_id, origin) if share_id else None,
        pix_key=pix_key or data.pix_key,
        pix_payload=pix_payload or data.pix_payload,
    )
