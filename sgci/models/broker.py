"""
S.G.C.I. - Broker Model
Corretores credenciados (CRECI)
"""
from datetime import datetime
import enum
from sqlalchemy import Column, String, DateTime, Text, Integer

from sgci.database import Base
from sgci.utils.ids import id_factory


class BrokerStatus(str, enum.Enum):
    """Status de aprovação do corretor"""
    PENDENTE = "Pendente"
    APROVADO = "Aprovado"
    REJEITADO = "Rejeitado"


class Broker(Base):
    """Modelo de Corretor"""
    __tablename__ = "brokers"

    id = Column(String(64), primary_key=True, default=id_factory("cor"))

    # Usuário do painel vinculado (autocadastro)
    user_id = Column(String(36), index=True)

    nome = Column(String(255), nullable=False, index=True)
    creci = Column(String(30), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, index=True)
    telefone = Column(String(20))
    whatsapp = Column(String(20))
    instagram = Column(String(100))
    foto = Column(String(500))
    contato_secundario = Column(String(255))

    # Endereço
    endereco = Column(Text)
    cep = Column(String(9))
    cidade = Column(String(100))
    estado = Column(String(2))

    # Dados bancários
    banco_nome = Column(String(100))
    banco_agencia = Column(String(20))
    banco_conta = Column(String(30))
    banco_tipo_conta = Column(String(50))
    banco_pix = Column(String(100))

    area_atuacao = Column(String(255))
    observacoes = Column(Text)

    # Aprovação
    status = Column(String(20), default=BrokerStatus.APROVADO.value)
    aprovado_em = Column(DateTime)
    aprovado_por = Column(String(36))
    aprovado_por_nome = Column(String(255))

    version = Column(Integer, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __mapper_args__ = {"version_id_col": version}

    def to_public_dict(self):
        """Dados exibidos no site (sem dados bancários)"""
        return {
            "id": self.id,
            "nome": self.nome,
            "creci": self.creci,
            "email": self.email or "",
            "telefone": self.telefone or "",
            "whatsapp": self.whatsapp,
            "instagram": self.instagram,
            "foto": self.foto,
            "cidade": self.cidade,
            "estado": self.estado,
            "areaAtuacao": self.area_atuacao,
        }

    def to_dict(self):
        data = self.to_public_dict()
        data.update({
            "userId": self.user_id,
            "contatoSecundario": self.contato_secundario,
            "endereco": self.endereco,
            "cep": self.cep,
            "bancoNome": self.banco_nome,
            "bancoAgencia": self.banco_agencia,
            "bancoConta": self.banco_conta,
            "bancoTipoConta": self.banco_tipo_conta,
            "bancoPix": self.banco_pix,
            "observacoes": self.observacoes,
            "status": self.status,
            "aprovadoEm": self.aprovado_em.isoformat() if self.aprovado_em else None,
            "aprovadoPor": self.aprovado_por,
            "aprovadoPorNome": self.aprovado_por_nome,
            "criadoEm": self.created_at.isoformat() if self.created_at else None,
            "version": self.version,
        })
        return data
