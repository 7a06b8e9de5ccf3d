"""
S.G.C.I. - Negotiation Service
Negociações, parcelas, vínculo parcela/recibo e montagem do recibo de parcela
"""
import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.config import settings
from sgci.core.authenticity import build_share_url
from sgci.core.exceptions import NotFoundError, ReceiptLinkConflictError, SgciError
from sgci.core.pix import build_static_pix_payload, build_installment_tx_id
from sgci.models import Negotiation, Installment, InstallmentStatus, Client, Unit, Broker
from sgci.schemas import NegotiationCreate, NegotiationUpdate, TradeIn
from sgci.services.ledger import ensure_can_add_installment, toggle_status
from sgci.services.records import ensure_version
from sgci.utils.formatting import format_currency
from sgci.utils.ids import generate_id, generate_share_id

logger = logging.getLogger(__name__)

FINANCING_NOTE = "Condições financeiras com correção IPCA + 0,85% a.m. direto com a incorporadora."


def trade_ins_to_json(permuta_lista: List[TradeIn], permuta: Optional[TradeIn] = None) -> list:
    """Lista de permutas no formato gravado; aceita o campo antigo de permuta única"""
    items = list(permuta_lista or [])
    if not items and permuta is not None:
        items = [permuta]
    return [item.model_dump() for item in items]


def build_installments(parcelas) -> List[Installment]:
    """Parcelas de um documento completo, numeradas pela posição quando sem número"""
    installments = []
    for index, parcela in enumerate(parcelas):
        installments.append(Installment(
            id=parcela.id or generate_id("par"),
            numero=parcela.numero or index + 1,
            valor=parcela.valor,
            vencimento=parcela.vencimento,
            status=parcela.status,
            recibo_share_id=parcela.recibo_share_id,
            recibo_share_url=parcela.recibo_share_url,
            recibo_numero=parcela.recibo_numero,
            recibo_emitido_em=parcela.recibo_emitido_em,
        ))
    return installments


# ============================================
# NEGOCIAÇÕES
# ============================================

async def list_negotiations(
    db: AsyncSession,
    status: Optional[str] = None,
    cliente_id: Optional[str] = None,
    corretor_id: Optional[str] = None
) -> List[Negotiation]:
    """Negociações mais recentes primeiro"""
    query = select(Negotiation)
    if status:
        query = query.where(Negotiation.status == status)
    if cliente_id:
        query = query.where(Negotiation.cliente_id == cliente_id)
    if corretor_id:
        query = query.where(Negotiation.corretor_id == corretor_id)

    result = await db.execute(query.order_by(Negotiation.criado_em.desc(), Negotiation.id))
    return list(result.scalars().all())


async def get_negotiation(db: AsyncSession, negotiation_id: str) -> Negotiation:
    negotiation = await db.get(Negotiation, negotiation_id)
    if not negotiation:
        raise NotFoundError("Negociação não encontrada")
    return negotiation


async def _ensure_references(db: AsyncSession, cliente_id=None, unidade_id=None, corretor_id=None) -> None:
    if cliente_id and not await db.get(Client, cliente_id):
        raise NotFoundError("Cliente não encontrado")
    if unidade_id and not await db.get(Unit, unidade_id):
        raise NotFoundError("Empreendimento não encontrado")
    if corretor_id and not await db.get(Broker, corretor_id):
        raise NotFoundError("Corretor não encontrado")


async def create_negotiation(db: AsyncSession, request: NegotiationCreate) -> Negotiation:
    await _ensure_references(db, request.cliente_id, request.unidade_id, request.corretor_id)

    negotiation = Negotiation(
        id=request.id or generate_id("neg"),
        cliente_id=request.cliente_id,
        unidade_id=request.unidade_id,
        corretor_id=request.corretor_id,
        fase=request.fase,
        numero_lote=request.numero_lote,
        metragem=request.metragem,
        valor_contrato=request.valor_contrato,
        qtd_parcelas=request.qtd_parcelas,
        descricao=request.descricao,
        permutas=trade_ins_to_json(request.permuta_lista, request.permuta),
        status=request.status,
        share_id=request.share_id or generate_share_id(),
        criado_em=request.criado_em or date.today(),
        parcelas=build_installments(request.parcelas),
    )
    db.add(negotiation)
    await db.flush()

    logger.info(f"Negociação {negotiation.id} criada com {len(negotiation.parcelas)} parcelas")
    return negotiation


async def update_negotiation(db: AsyncSession, negotiation_id: str, request: NegotiationUpdate) -> Negotiation:
    negotiation = await get_negotiation(db, negotiation_id)
    ensure_version(negotiation, request.version, "Negociação")

    update_data = request.model_dump(exclude_unset=True, exclude={"version", "permuta_lista"})
    await _ensure_references(
        db,
        update_data.get("cliente_id"),
        update_data.get("unidade_id"),
        update_data.get("corretor_id")
    )

    for field, value in update_data.items():
        setattr(negotiation, field, value)

    if request.permuta_lista is not None:
        # Coluna JSON: reatribuir para o SQLAlchemy detectar a alteração
        negotiation.permutas = trade_ins_to_json(request.permuta_lista)

    await db.flush()
    return negotiation


async def delete_negotiation(db: AsyncSession, negotiation_id: str) -> None:
    negotiation = await get_negotiation(db, negotiation_id)
    await db.delete(negotiation)
    await db.flush()
    logger.info(f"Negociação {negotiation_id} removida")


# ============================================
# PARCELAS
# ============================================

def find_installment(negotiation: Negotiation, installment_id: str) -> Installment:
    for parcela in negotiation.parcelas:
        if parcela.id == installment_id:
            return parcela
    raise NotFoundError("Parcela não encontrada")


def _touch(negotiation: Negotiation) -> None:
    # Qualquer alteração nas parcelas incrementa a versão da negociação
    negotiation.updated_at = datetime.utcnow()


async def add_installment(
    db: AsyncSession,
    negotiation: Negotiation,
    valor: float,
    vencimento: date,
    expected_version: Optional[int] = None
) -> Installment:
    """Acrescenta uma parcela pendente ao final do cronograma"""
    ensure_version(negotiation, expected_version, "Negociação")
    ensure_can_add_installment(len(negotiation.parcelas))

    parcela = Installment(
        id=generate_id("par"),
        numero=len(negotiation.parcelas) + 1,
        valor=valor,
        vencimento=vencimento,
        status=InstallmentStatus.PENDENTE.value,
    )
    negotiation.parcelas.append(parcela)
    _touch(negotiation)
    await db.flush()

    logger.info(f"Parcela {parcela.numero} adicionada à negociação {negotiation.id}")
    return parcela


async def set_installment_status(
    db: AsyncSession,
    negotiation: Negotiation,
    installment_id: str,
    status: Optional[str] = None,
    expected_version: Optional[int] = None
) -> Installment:
    """Define o status da parcela; sem status, alterna entre Paga e Pendente"""
    parcela = find_installment(negotiation, installment_id)
    ensure_version(parcela, expected_version, "Parcela")

    parcela.status = status or toggle_status(parcela.status)
    _touch(negotiation)
    await db.flush()

    logger.info(f"Parcela {parcela.id} da negociação {negotiation.id} agora {parcela.status}")
    return parcela


async def toggle_installment_status(
    db: AsyncSession,
    negotiation: Negotiation,
    installment_id: str,
    expected_version: Optional[int] = None
) -> Installment:
    return await set_installment_status(db, negotiation, installment_id, None, expected_version)


async def link_receipt_to_installment(
    db: AsyncSession,
    negotiation: Negotiation,
    installment_id: str,
    share_id: str,
    numero: Optional[str] = None,
    share_url: Optional[str] = None,
    emitted_on: Optional[date] = None
) -> Installment:
    """
    Registra na parcela o recibo emitido para ela.
    Repetir o vínculo com o mesmo share id não altera nada; vincular outro
    recibo a uma parcela já vinculada é conflito. O vínculo não é desfeito.
    """
    parcela = find_installment(negotiation, installment_id)

    if parcela.recibo_share_id:
        if parcela.recibo_share_id == share_id:
            return parcela
        raise ReceiptLinkConflictError(
            f"Parcela {parcela.numero} já está vinculada ao recibo {parcela.recibo_numero or parcela.recibo_share_id}"
        )

    parcela.recibo_share_id = share_id
    parcela.recibo_share_url = share_url or build_share_url(share_id)
    parcela.recibo_numero = numero
    parcela.recibo_emitido_em = emitted_on or date.today()
    _touch(negotiation)
    await db.flush()

    logger.info(f"Recibo {numero or share_id} vinculado à parcela {parcela.id}")
    return parcela


# ============================================
# RECIBO DE PARCELA
# ============================================

def installment_receipt_number(negotiation_id: str, position: int) -> str:
    identificador = negotiation_id.split("-")[-1].upper()
    return f"NEG-{identificador}-PAR-{position:03d}"


def _format_area(metragem) -> str:
    return f"{float(metragem):g} m²"


def _build_referente(negotiation, unit, broker, position: int, total: int) -> str:
    partes = []
    if unit:
        partes.append(f"{unit.nome} · {unit.unidade}" if unit.unidade else unit.nome)
    if negotiation.numero_lote:
        partes.append(f"Lote {negotiation.numero_lote}")

    metragem = negotiation.metragem if negotiation.metragem is not None else (unit.metragem if unit else None)
    if metragem:
        partes.append(_format_area(metragem))

    partes.append(f"Parcela {position} de {total}")
    if negotiation.fase:
        partes.append(f"Fase {negotiation.fase}")
    partes.append(f"Status: {negotiation.status}")

    permutas = negotiation.permutas or []
    if permutas:
        descricao = ", ".join(f"{p.get('tipo')} ({format_currency(p.get('valor'))})" for p in permutas)
        partes.append(f"Permutas integradas: {descricao}")

    if broker:
        corretor = f"Corretor: {broker.nome}"
        if broker.creci:
            corretor += f" · CRECI {broker.creci}"
        partes.append(corretor)

    return f"{' | '.join(partes)} • {FINANCING_NOTE}"


async def build_installment_receipt(
    db: AsyncSession,
    negotiation: Negotiation,
    installment_id: str,
    emitido_por_nome: Optional[str] = None,
    data_emissao: Optional[date] = None
) -> dict:
    """
    Monta o payload (camelCase) do recibo de uma parcela, pronto para
    sanitize/assinatura. Dados bancários e PIX só entram em parcelas pendentes.
    """
    parcelas = list(negotiation.parcelas)
    parcela = find_installment(negotiation, installment_id)
    position = parcelas.index(parcela) + 1

    client = await db.get(Client, negotiation.cliente_id) if negotiation.cliente_id else None
    if not client:
        raise SgciError("Cadastre o cliente para emitir recibos desta negociação.")
    if not client.documento:
        raise SgciError("O cliente precisa ter CPF ou CNPJ cadastrado para gerar recibos.")
    if not parcela.valor or parcela.valor <= 0:
        raise SgciError("Informe um valor válido para a parcela antes de gerar o recibo.")
    if not parcela.vencimento:
        raise SgciError("Defina a data de vencimento da parcela para gerar o recibo.")

    unit = await db.get(Unit, negotiation.unidade_id) if negotiation.unidade_id else None
    broker = await db.get(Broker, negotiation.corretor_id) if negotiation.corretor_id else None

    total = (negotiation.qtd_parcelas if negotiation.qtd_parcelas is not None else len(parcelas)) or position
    numero = installment_receipt_number(negotiation.id, position)
    pendente = parcela.status == InstallmentStatus.PENDENTE.value
    metragem = negotiation.metragem if negotiation.metragem is not None else (unit.metragem if unit else None)

    payload = {
        "numero": numero,
        "valor": parcela.valor,
        "recebidoDe": client.nome,
        "cpfCnpj": client.documento,
        "referente": _build_referente(negotiation, unit, broker, position, total),
        "data": parcela.vencimento.isoformat(),
        "dataEmissao": (data_emissao or date.today()).isoformat(),
        "formaPagamento": f"Parcelamento direto · Parcela {position}/{total}",
        "emitidoPor": settings.EMISSOR_NOME,
        "emitidoPorNome": emitido_por_nome,
        "cpfEmitente": settings.EMISSOR_CNPJ,
        "cepEmitente": settings.EMPRESA_CEP,
        "enderecoEmitente": settings.EMPRESA_ENDERECO,
        "telefoneEmitente": settings.EMPRESA_TELEFONE,
        "emailEmitente": settings.EMPRESA_EMAIL,
        "empreendimentoNome": unit.nome if unit else None,
        "empreendimentoUnidade": unit.unidade if unit else None,
        "empreendimentoMetragem": metragem,
        "empreendimentoFase": negotiation.fase,
        "numeroLote": negotiation.numero_lote,
        "numeroParcela": position,
        "totalParcelas": total,
        "corretorNome": broker.nome if broker else None,
        "corretorCreci": broker.creci if broker else None,
        "status": parcela.status,
        "contaParaCredito": pendente,
    }

    if pendente:
        payload.update({
            "bancoNome": settings.BANCO_NOME,
            "bancoAgencia": settings.BANCO_AGENCIA,
            "bancoConta": settings.BANCO_CONTA,
            "bancoTipoConta": settings.BANCO_TIPO_CONTA,
        })

    if parcela.status != InstallmentStatus.PAGA.value and settings.PIX_KEY:
        tx_id = build_installment_tx_id(
            numero,
            negotiation.numero_lote,
            broker.nome if broker else None,
            broker.creci if broker else None,
        )
        pix_payload = build_static_pix_payload(
            key=settings.PIX_KEY,
            amount=parcela.valor,
            merchant_name=settings.EMISSOR_NOME,
            merchant_city=settings.PIX_MERCHANT_CITY,
            tx_id=tx_id,
        )
        payload.update({"pixKey": settings.PIX_KEY, "pixPayload": pix_payload})
        payload["qrOptions"] = {"pixKey": settings.PIX_KEY, "pixPayload": pix_payload}

    return payload
