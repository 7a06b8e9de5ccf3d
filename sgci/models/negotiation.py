"""
S.G.C.I. - Negotiation Model
Negociações de venda e suas parcelas
"""
import enum
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Text, Integer, Float, ForeignKey
from sqlalchemy.dialects.sqlite import JSON
from sqlalchemy.orm import relationship

from sgci.database import Base
from sgci.utils.ids import id_factory, generate_share_id

MAX_INSTALLMENTS = 100


class NegotiationStatus(str, enum.Enum):
    """Etapas da negociação"""
    EM_PROSPECCAO = "Em prospecção"
    EM_ANDAMENTO = "Em andamento"
    AGUARDANDO_APROVACAO = "Aguardando aprovação"
    FECHADO = "Fechado"


class InstallmentStatus(str, enum.Enum):
    """Situação da parcela"""
    PAGA = "Paga"
    PENDENTE = "Pendente"


class TradeInType(str, enum.Enum):
    """Tipos de bem aceitos em permuta"""
    VEICULO = "Veículo"
    IMOVEL = "Imóvel"
    OUTRO_BEM = "Outro Bem"


class Negotiation(Base):
    """Modelo de Negociação"""
    __tablename__ = "negotiations"

    id = Column(String(64), primary_key=True, default=id_factory("neg"))

    # Referências fracas: remover cliente/corretor/unidade não apaga a negociação
    cliente_id = Column(String(64), index=True)
    unidade_id = Column(String(64), index=True)
    corretor_id = Column(String(64), index=True)

    fase = Column(String(100))
    numero_lote = Column(String(50))
    metragem = Column(Float)
    valor_contrato = Column(Float)
    qtd_parcelas = Column(Integer)
    descricao = Column(Text, default="")

    # Lista de permutas [{tipo, valor, descricao}]
    permutas = Column(JSON, default=list)

    status = Column(String(30), nullable=False, default=NegotiationStatus.EM_PROSPECCAO.value)
    share_id = Column(String(36), default=generate_share_id)
    criado_em = Column(Date, default=lambda: datetime.utcnow().date())

    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    parcelas = relationship(
        "Installment",
        back_populates="negotiation",
        order_by="Installment.numero",
        cascade="all, delete-orphan",
        lazy="selectin"
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        permutas = list(self.permutas or [])
        return {
            "id": self.id,
            "clienteId": self.cliente_id,
            "unidadeId": self.unidade_id,
            "corretorId": self.corretor_id,
            "fase": self.fase,
            "numeroLote": self.numero_lote,
            "metragem": self.metragem,
            "valorContrato": self.valor_contrato,
            "qtdParcelas": self.qtd_parcelas,
            "descricao": self.descricao or "",
            "permuta": permutas[0] if permutas else None,
            "permutaLista": permutas,
            "status": self.status,
            "shareId": self.share_id,
            "parcelas": [p.to_dict() for p in self.parcelas],
            "criadoEm": self.criado_em.isoformat() if self.criado_em else None,
            "version": self.version,
        }


class Installment(Base):
    """Modelo de Parcela"""
    __tablename__ = "installments"

    id = Column(String(64), primary_key=True, default=id_factory("par"))
    negotiation_id = Column(String(64), ForeignKey("negotiations.id", ondelete="CASCADE"), nullable=False, index=True)
    negotiation = relationship("Negotiation", back_populates="parcelas")

    numero = Column(Integer, nullable=False)
    valor = Column(Float, nullable=False)
    vencimento = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=InstallmentStatus.PENDENTE.value)

    # Vínculo com o recibo emitido (só é preenchido, nunca desfeito)
    recibo_share_id = Column(String(36))
    recibo_share_url = Column(String(500))
    recibo_numero = Column(String(32))
    recibo_emitido_em = Column(Date)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        return {
            "id": self.id,
            "numero": self.numero,
            "valor": self.valor,
            "vencimento": self.vencimento.isoformat() if self.vencimento else None,
            "status": self.status,
            "reciboShareId": self.recibo_share_id,
            "reciboShareUrl": self.recibo_share_url,
            "reciboNumero": self.recibo_numero,
            "reciboEmitidoEm": self.recibo_emitido_em.isoformat() if self.recibo_emitido_em else None,
            "version": self.version,
        }
