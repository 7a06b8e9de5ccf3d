"""
S.G.C.I. - Client Model
Compradores (pessoa física ou jurídica)
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, Integer

from sgci.database import Base
from sgci.utils.ids import id_factory


class Client(Base):
    """Modelo de Cliente"""
    __tablename__ = "clients"

    id = Column(String(64), primary_key=True, default=id_factory("cli"))

    tipo = Column(String(2), nullable=False, default="PF")
    nome = Column(String(255), nullable=False, index=True)
    documento = Column(String(20), unique=True, index=True)
    email = Column(String(255))
    telefone = Column(String(20))
    cep = Column(String(9))
    endereco = Column(Text)
    contato_secundario = Column(String(255))
    referencias = Column(Text)
    observacoes = Column(Text)

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        return {
            "id": self.id,
            "tipo": self.tipo,
            "nome": self.nome,
            "documento": self.documento,
            "email": self.email or "",
            "telefone": self.telefone or "",
            "cep": self.cep,
            "endereco": self.endereco or "",
            "contatoSecundario": self.contato_secundario,
            "referencias": self.referencias,
            "observacoes": self.observacoes,
            "version": self.version,
        }
