"""
S.G.C.I. - Negotiation Schemas
"""
from datetime import date
from typing import Optional, List, Literal
from pydantic import Field, field_validator

from .base import CamelModel

NegotiationStatusLiteral = Literal["Em prospecção", "Em andamento", "Aguardando aprovação", "Fechado"]
InstallmentStatusLiteral = Literal["Paga", "Pendente"]


class TradeIn(CamelModel):
    """Bem dado em permuta"""
    tipo: Literal["Veículo", "Imóvel", "Outro Bem"]
    valor: float = Field(..., gt=0)
    descricao: str = "Bem em permuta"

    @field_validator("descricao")
    @classmethod
    def default_descricao(cls, value: str) -> str:
        return value.strip() or "Bem em permuta"


class InstallmentIn(CamelModel):
    """Parcela recebida em documentos completos (estado ou criação)"""
    id: Optional[str] = None
    numero: Optional[int] = None
    valor: float = Field(..., ge=0)
    vencimento: date
    status: InstallmentStatusLiteral = "Pendente"
    recibo_share_id: Optional[str] = None
    recibo_share_url: Optional[str] = None
    recibo_numero: Optional[str] = None
    recibo_emitido_em: Optional[date] = None


class InstallmentCreate(CamelModel):
    valor: float = Field(..., gt=0)
    vencimento: date
    # Versão da negociação lida pelo cliente
    version: Optional[int] = None


class InstallmentStatusUpdate(CamelModel):
    # Sem status a parcela alterna entre Paga e Pendente
    status: Optional[InstallmentStatusLiteral] = None
    version: Optional[int] = None


class NegotiationCreate(CamelModel):
    id: Optional[str] = None
    cliente_id: str
    unidade_id: str
    corretor_id: Optional[str] = None
    fase: Optional[str] = None
    numero_lote: Optional[str] = None
    metragem: Optional[float] = Field(None, ge=0)
    valor_contrato: Optional[float] = Field(None, ge=0)
    qtd_parcelas: Optional[int] = Field(None, ge=0, le=100)
    descricao: str = ""
    permuta_lista: List[TradeIn] = Field(default_factory=list)
    # Formato antigo, com uma única permuta
    permuta: Optional[TradeIn] = None
    status: NegotiationStatusLiteral = "Em prospecção"
    share_id: Optional[str] = None
    criado_em: Optional[date] = None
    parcelas: List[InstallmentIn] = Field(default_factory=list, max_length=100)


class NegotiationUpdate(CamelModel):
    cliente_id: Optional[str] = None
    unidade_id: Optional[str] = None
    corretor_id: Optional[str] = None
    fase: Optional[str] = None
    numero_lote: Optional[str] = None
    metragem: Optional[float] = Field(None, ge=0)
    valor_contrato: Optional[float] = Field(None, ge=0)
    qtd_parcelas: Optional[int] = Field(None, ge=0, le=100)
    descricao: Optional[str] = None
    permuta_lista: Optional[List[TradeIn]] = None
    status: Optional[NegotiationStatusLiteral] = None
    version: Optional[int] = None


class InstallmentReceiptRequest(CamelModel):
    """Opções da emissão do recibo de uma parcela"""
    emitido_por_nome: Optional[str] = None
    data_emissao: Optional[date] = None


class LedgerSummaryResponse(CamelModel):
    contrato_base: float
    total_pago: float
    total_pendente: float
    total_agendado: float
    total_permuta: float
    saldo_em_aberto: float
    saldo_parcelado: float
    qtd_prevista: int
    valor_parcela_simulada: Optional[float] = None
    parcelas_pagas: int
    parcelas_pendentes: int
    proximo_vencimento: Optional[date] = None
