"""
S.G.C.I. - Development Unit Model
Lotes e unidades dos empreendimentos
"""
from datetime import datetime
import enum
from sqlalchemy import Column, String, DateTime, Float, Integer

from sgci.database import Base
from sgci.utils.ids import id_factory


class UnitStatus(str, enum.Enum):
    """Situação comercial da unidade"""
    DISPONIVEL = "Disponível"
    RESERVADO = "Reservado"
    VENDIDO = "Vendido"


class Unit(Base):
    """Modelo de unidade de empreendimento"""
    __tablename__ = "units"

    id = Column(String(64), primary_key=True, default=id_factory("emp"))

    nome = Column(String(255), nullable=False, index=True)
    metragem = Column(Float, default=0)
    unidade = Column(String(100), default="")
    valor_base = Column(Float, default=0)
    status = Column(String(20), nullable=False, default=UnitStatus.DISPONIVEL.value)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        return {
            "id": self.id,
            "nome": self.nome,
            "metragem": self.metragem or 0,
            "unidade": self.unidade or "",
            "valorBase": self.valor_base or 0,
            "status": self.status,
            "version": self.version,
        }
