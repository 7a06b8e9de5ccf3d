"""
S.G.C.I. - Receipt Model
Recibos assinados (dados + hash), localizáveis pelo número ou pelo share id
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Float
from sqlalchemy.dialects.sqlite import JSON

from sgci.database import Base
from sgci.utils.ids import generate_share_id


class Receipt(Base):
    """Modelo de Recibo"""
    __tablename__ = "receipts"

    numero = Column(String(32), primary_key=True)
    share_id = Column(String(36), unique=True, nullable=False, index=True, default=generate_share_id)
    hash = Column(String(64), nullable=False)

    # Colunas de busca; o documento completo fica em data
    valor = Column(Float, nullable=False)
    recebido_de = Column(String(255))
    data_pagamento = Column(String(10))
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        data = dict(self.data or {})
        data.update({
            "hash": self.hash,
            "shareId": self.share_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        })
        return data
