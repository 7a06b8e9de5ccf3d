"""
S.G.C.I. - State Service
Documento completo do sistema: leitura, substituição integral e dados iniciais
"""
import logging
from datetime import date
from typing import Tuple

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.models import Unit, Client, Broker, BrokerStatus, Negotiation, Installment
from sgci.schemas import StateDocument
from sgci.services.negotiations import trade_ins_to_json, build_installments
from sgci.services.receipts import seed_receipts
from sgci.services.seed_data import SEED_STATE, receipt_seeds
from sgci.utils.ids import generate_id, generate_share_id

logger = logging.getLogger(__name__)


async def fetch_state(db: AsyncSession) -> dict:
    """Cadastros por nome, negociações mais recentes primeiro"""
    units = (await db.execute(select(Unit).order_by(Unit.nome, Unit.unidade))).scalars().all()
    clients = (await db.execute(select(Client).order_by(Client.nome))).scalars().all()
    negotiations = (await db.execute(
        select(Negotiation).order_by(Negotiation.criado_em.desc(), Negotiation.id)
    )).scalars().all()
    brokers = (await db.execute(select(Broker).order_by(Broker.nome))).scalars().all()

    return {
        "empreendimentos": [u.to_dict() for u in units],
        "clientes": [c.to_dict() for c in clients],
        "negociacoes": [n.to_dict() for n in negotiations],
        "corretores": [b.to_dict() for b in brokers],
    }


async def replace_state(db: AsyncSession, state: StateDocument) -> None:
    """
    Substitui as quatro coleções pelo documento recebido.
    Última gravação vence: não há controle de versão neste caminho.
    """
    await db.execute(delete(Installment))
    await db.execute(delete(Negotiation))
    await db.execute(delete(Client))
    await db.execute(delete(Unit))
    await db.execute(delete(Broker))

    for item in state.empreendimentos:
        db.add(Unit(id=item.id or generate_id("emp"), **item.model_dump(exclude={"id"})))

    for item in state.clientes:
        db.add(Client(id=item.id or generate_id("cli"), **item.model_dump(exclude={"id"})))

    for item in state.corretores:
        data = item.model_dump(exclude={"id", "status", "email"})
        db.add(Broker(
            id=item.id or generate_id("cor"),
            email=item.email.strip().lower() or None,
            status=item.status or BrokerStatus.APROVADO.value,
            **data
        ))

    for item in state.negociacoes:
        db.add(Negotiation(
            id=item.id or generate_id("neg"),
            cliente_id=item.cliente_id,
            unidade_id=item.unidade_id,
            corretor_id=item.corretor_id,
            fase=item.fase,
            numero_lote=item.numero_lote,
            metragem=item.metragem,
            valor_contrato=item.valor_contrato,
            qtd_parcelas=item.qtd_parcelas,
            descricao=item.descricao,
            permutas=trade_ins_to_json(item.permuta_lista, item.permuta),
            status=item.status,
            share_id=item.share_id or generate_share_id(),
            criado_em=item.criado_em or date.today(),
            parcelas=build_installments(item.parcelas),
        ))

    await db.flush()
    logger.info(
        f"Estado substituído: {len(state.empreendimentos)} empreendimentos, {len(state.clientes)} clientes, "
        f"{len(state.negociacoes)} negociações, {len(state.corretores)} corretores"
    )


async def has_records(db: AsyncSession) -> bool:
    for model in (Unit, Client, Negotiation, Broker):
        count = await db.scalar(select(func.count()).select_from(model))
        if count:
            return True
    return False


async def seed_state(db: AsyncSession) -> Tuple[bool, dict]:
    """
    Grava os dados de exemplo (e os recibos das parcelas pagas) apenas
    quando ainda não há nenhum cadastro. Retorna (semeado, estado atual).
    """
    if await has_records(db):
        logger.info("Seed ignorado: já existem cadastros")
        return False, await fetch_state(db)

    await replace_state(db, StateDocument.model_validate(SEED_STATE))
    await seed_receipts(db, receipt_seeds())

    logger.info("Dados de exemplo gravados")
    return True, await fetch_state(db)
