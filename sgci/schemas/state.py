"""
S.G.C.I. - State Document Schemas
Documento completo (empreendimentos, clientes, negociações, corretores)
"""
from typing import List
from pydantic import Field

from .base import CamelModel
from .client import ClientCreate
from .unit import UnitCreate
from .broker import BrokerCreate
from .negotiation import NegotiationCreate


class StateDocument(CamelModel):
    empreendimentos: List[UnitCreate] = Field(default_factory=list)
    clientes: List[ClientCreate] = Field(default_factory=list)
    negociacoes: List[NegotiationCreate] = Field(default_factory=list)
    corretores: List[BrokerCreate] = Field(default_factory=list)
