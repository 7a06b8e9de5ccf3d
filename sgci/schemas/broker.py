"""
S.G.C.I. - Broker Schemas
"""
from typing import Optional, Literal
from pydantic import Field

from .base import CamelModel


class BrokerCreate(CamelModel):
    id: Optional[str] = None
    nome: str = Field(..., min_length=3, max_length=255)
    creci: str = Field(..., min_length=5, max_length=30)
    email: str = Field(..., max_length=255)
    telefone: str = Field("", max_length=20)
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    contato_secundario: Optional[str] = None
    endereco: Optional[str] = None
    cep: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = Field(None, max_length=2)
    banco_nome: Optional[str] = None
    banco_agencia: Optional[str] = None
    banco_conta: Optional[str] = None
    banco_tipo_conta: Optional[str] = None
    banco_pix: Optional[str] = None
    area_atuacao: Optional[str] = None
    observacoes: Optional[str] = None
    foto: Optional[str] = None
    status: Optional[Literal["Pendente", "Aprovado", "Rejeitado"]] = None


class BrokerUpdate(CamelModel):
    nome: Optional[str] = Field(None, min_length=3, max_length=255)
    creci: Optional[str] = Field(None, min_length=5, max_length=30)
    email: Optional[str] = Field(None, max_length=255)
    telefone: Optional[str] = Field(None, max_length=20)
    whatsapp: Optional[str] = None
    instagram: Optional[str] = None
    contato_secundario: Optional[str] = None
    endereco: Optional[str] = None
    cep: Optional[str] = None
    cidade: Optional[str] = None
    estado: Optional[str] = Field(None, max_length=2)
    banco_nome: Optional[str] = None
    banco_agencia: Optional[str] = None
    banco_conta: Optional[str] = None
    banco_tipo_conta: Optional[str] = None
    banco_pix: Optional[str] = None
    area_atuacao: Optional[str] = None
    observacoes: Optional[str] = None
    version: Optional[int] = None


class BrokerApproval(CamelModel):
    status: Literal["Aprovado", "Rejeitado"]


class BrokerRegistrationResponse(CamelModel):
    success: bool = True
    message: str
    corretor_id: str
