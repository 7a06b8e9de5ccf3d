"""
S.G.C.I. - Client Schemas
"""
from typing import Optional, Literal
from pydantic import Field

from .base import CamelModel


class ClientCreate(CamelModel):
    id: Optional[str] = None
    tipo: Literal["PF", "PJ"] = "PF"
    nome: str = Field(..., min_length=2, max_length=255)
    documento: str = Field(..., max_length=20)
    email: str = Field(..., max_length=255)
    telefone: str = Field("", max_length=20)
    cep: Optional[str] = Field(None, max_length=9)
    endereco: str = ""
    contato_secundario: Optional[str] = Field(None, max_length=255)
    referencias: Optional[str] = None
    observacoes: Optional[str] = None


class ClientUpdate(CamelModel):
    tipo: Optional[Literal["PF", "PJ"]] = None
    nome: Optional[str] = Field(None, min_length=2, max_length=255)
    documento: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=255)
    telefone: Optional[str] = Field(None, max_length=20)
    cep: Optional[str] = Field(None, max_length=9)
    endereco: Optional[str] = None
    contato_secundario: Optional[str] = Field(None, max_length=255)
    referencias: Optional[str] = None
    observacoes: Optional[str] = None
    # Versão lida pelo cliente; divergência gera 409
    version: Optional[int] = None


class ClientResponse(CamelModel):
    id: str
    tipo: str
    nome: str
    documento: Optional[str] = None
    email: str = ""
    telefone: str = ""
    cep: Optional[str] = None
    endereco: str = ""
    contato_secundario: Optional[str] = None
    referencias: Optional[str] = None
    observacoes: Optional[str] = None
    version: int
