"""
S.G.C.I. - Receipt Schemas
"""
from typing import Optional, Literal
from pydantic import Field

from .base import CamelModel


class ReceiptData(CamelModel):
    """Dados de um recibo já saneados"""
    numero: str
    valor: float
    valor_extenso: str = ""
    recebido_de: str = ""
    cpf_cnpj: str = ""
    referente: str = ""
    data: str = ""
    data_emissao: Optional[str] = None
    forma_pagamento: str = ""
    emitido_por: str = ""
    emitido_por_nome: Optional[str] = None
    cpf_emitente: str = ""
    cep_emitente: str = ""
    endereco_emitente: str = ""
    telefone_emitente: str = ""
    email_emitente: str = ""

    # Empreendimento / lote / parcela
    empreendimento_nome: Optional[str] = None
    empreendimento_unidade: Optional[str] = None
    empreendimento_metragem: Optional[float] = None
    empreendimento_fase: Optional[str] = None
    numero_lote: Optional[str] = None
    numero_parcela: Optional[int] = None
    total_parcelas: Optional[int] = None

    # Corretor
    corretor_nome: Optional[str] = None
    corretor_creci: Optional[str] = None

    status: Optional[Literal["Paga", "Pendente"]] = None
    conta_para_credito: Optional[bool] = None

    # Dados bancários
    banco_nome: Optional[str] = None
    banco_agencia: Optional[str] = None
    banco_conta: Optional[str] = None
    banco_tipo_conta: Optional[str] = None

    # PIX
    pix_key: Optional[str] = None
    pix_payload: Optional[str] = None

    share_id: Optional[str] = None


class QrOptions(CamelModel):
    pix_payload: Optional[str] = None
    pix_key: Optional[str] = None


class QrPayload(CamelModel):
    """Conteúdo do QR de verificação"""
    numero: str
    valor: float
    data: str
    emitente: str
    hash: str
    verify_url: str
    share_url: Optional[str] = None
    pix_key: Optional[str] = None
    pix_payload: Optional[str] = None


class SignatureResponse(CamelModel):
    hash: str
    share_id: str
    qr_payload: QrPayload


class ReceiptLookupResponse(CamelModel):
    valid: bool
    hash_matches: bool
    provided_hash_matches: Optional[bool] = None
    recibo: dict
    qr_payload: Optional[QrPayload] = None


class ReceiptLinkRequest(CamelModel):
    share_id: str = Field(..., min_length=1)
    numero: Optional[str] = None
