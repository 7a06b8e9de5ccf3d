"""
S.G.C.I. - Development Unit Schemas
"""
from typing import Optional, Literal
from pydantic import Field

from .base import CamelModel

UnitStatusLiteral = Literal["Disponível", "Reservado", "Vendido"]


class UnitCreate(CamelModel):
    id: Optional[str] = None
    nome: str = Field(..., min_length=2, max_length=255)
    metragem: float = Field(0, ge=0)
    unidade: str = Field("", max_length=100)
    valor_base: float = Field(0, ge=0)
    status: UnitStatusLiteral = "Disponível"


class UnitUpdate(CamelModel):
    nome: Optional[str] = Field(None, min_length=2, max_length=255)
    metragem: Optional[float] = Field(None, ge=0)
    unidade: Optional[str] = Field(None, max_length=100)
    valor_base: Optional[float] = Field(None, ge=0)
    status: Optional[UnitStatusLiteral] = None
    version: Optional[int] = None


class UnitResponse(CamelModel):
    id: str
    nome: str
    metragem: float = 0
    unidade: str = ""
    valor_base: float = 0
    status: str
    version: int
