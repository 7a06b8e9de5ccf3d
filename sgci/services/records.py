"""
S.G.C.I. - Records Service
Cadastros de clientes, corretores e unidades de empreendimento
"""
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from sgci.core.config import settings
from sgci.core.exceptions import NotFoundError, DuplicateRecordError, VersionConflictError, SgciError
from sgci.models import Client, Broker, BrokerStatus, Unit
from sgci.schemas import (
    ClientCreate,
    ClientUpdate,
    BrokerCreate,
    BrokerUpdate,
    UnitCreate,
    UnitUpdate,
)
from sgci.utils.formatting import format_cep, format_cpf_cnpj
from sgci.utils.ids import generate_id
from sgci.utils.validators import validate_cpf_cnpj, validate_email, validate_cep, EMAIL_REGEX

logger = logging.getLogger(__name__)

REMOVED_LABEL = "(removido)"


def ensure_version(entity, expected: Optional[int], label: str) -> None:
    """Compara a versão lida pelo cliente com a atual"""
    if expected is not None and expected != entity.version:
        raise VersionConflictError(
            f"{label} foi alterado(a) por outra sessão. Recarregue e tente novamente.",
            current_version=entity.version
        )


def _apply(entity, update_data: dict) -> None:
    for field, value in update_data.items():
        setattr(entity, field, value)


# ============================================
# CLIENTES
# ============================================

def _check_client_fields(documento: Optional[str], email: Optional[str], cep: Optional[str]) -> None:
    if documento is not None:
        result = validate_cpf_cnpj(documento)
        if not result.valid:
            raise SgciError(result.message)
    if email is not None:
        result = validate_email(email)
        if not result.valid:
            raise SgciError(result.message)
    if cep:
        result = validate_cep(cep)
        if not result.valid:
            raise SgciError(result.message)


async def _ensure_unique_document(db: AsyncSession, documento: str, exclude_id: Optional[str] = None) -> None:
    query = select(Client).where(Client.documento == documento)
    if exclude_id:
        query = query.where(Client.id != exclude_id)
    result = await db.execute(query)
    if result.scalars().first():
        raise DuplicateRecordError("Documento já cadastrado")


async def list_clients(db: AsyncSession, search: Optional[str] = None) -> List[Client]:
    query = select(Client)
    if search:
        query = query.where(
            or_(
                Client.nome.ilike(f"%{search}%"),
                Client.email.ilike(f"%{search}%"),
                Client.documento.ilike(f"%{search}%")
            )
        )
    result = await db.execute(query.order_by(Client.nome))
    return list(result.scalars().all())


async def get_client(db: AsyncSession, client_id: str) -> Client:
    client = await db.get(Client, client_id)
    if not client:
        raise NotFoundError("Cliente não encontrado")
    return client


async def create_client(db: AsyncSession, request: ClientCreate) -> Client:
    _check_client_fields(request.documento, request.email, request.cep)
    documento = format_cpf_cnpj(request.documento)
    await _ensure_unique_document(db, documento)

    data = request.model_dump(exclude={"id"})
    data.update(
        documento=documento,
        email=request.email.strip().lower(),
        cep=format_cep(request.cep) if request.cep else None,
    )
    client = Client(id=request.id or generate_id("cli"), **data)
    db.add(client)
    await db.flush()

    logger.info(f"Cliente {client.id} cadastrado")
    return client


async def update_client(db: AsyncSession, client_id: str, request: ClientUpdate) -> Client:
    client = await get_client(db, client_id)
    update_data = request.model_dump(exclude_unset=True, exclude={"version"})
    ensure_version(client, request.version, "Cliente")

    _check_client_fields(update_data.get("documento"), update_data.get("email"), update_data.get("cep"))

    if update_data.get("documento") is not None:
        update_data["documento"] = format_cpf_cnpj(update_data["documento"])
        if update_data["documento"] != client.documento:
            await _ensure_unique_document(db, update_data["documento"], exclude_id=client.id)
    if update_data.get("email") is not None:
        update_data["email"] = update_data["email"].strip().lower()
    if update_data.get("cep"):
        update_data["cep"] = format_cep(update_data["cep"])

    _apply(client, update_data)
    await db.flush()
    return client


async def delete_client(db: AsyncSession, client_id: str) -> None:
    """Remove o cliente; negociações que o referenciam são mantidas"""
    client = await get_client(db, client_id)
    await db.delete(client)
    await db.flush()
    logger.info(f"Cliente {client_id} removido")


# ============================================
# UNIDADES
# ============================================

async def list_units(db: AsyncSession, search: Optional[str] = None) -> List[Unit]:
    query = select(Unit)
    if search:
        query = query.where(or_(Unit.nome.ilike(f"%{search}%"), Unit.unidade.ilike(f"%{search}%")))
    result = await db.execute(query.order_by(Unit.nome, Unit.unidade))
    return list(result.scalars().all())


async def get_unit(db: AsyncSession, unit_id: str) -> Unit:
    unit = await db.get(Unit, unit_id)
    if not unit:
        raise NotFoundError("Empreendimento não encontrado")
    return unit


async def create_unit(db: AsyncSession, request: UnitCreate) -> Unit:
    unit = Unit(id=request.id or generate_id("emp"), **request.model_dump(exclude={"id"}))
    db.add(unit)
    await db.flush()
    logger.info(f"Unidade {unit.id} cadastrada")
    return unit


async def update_unit(db: AsyncSession, unit_id: str, request: UnitUpdate) -> Unit:
    unit = await get_unit(db, unit_id)
    ensure_version(unit, request.version, "Empreendimento")
    _apply(unit, request.model_dump(exclude_unset=True, exclude={"version"}))
    await db.flush()
    return unit


async def delete_unit(db: AsyncSession, unit_id: str) -> None:
    unit = await get_unit(db, unit_id)
    await db.delete(unit)
    await db.flush()
    logger.info(f"Unidade {unit_id} removida")


# ============================================
# CORRETORES
# ============================================

async def _ensure_unique_broker(db: AsyncSession, creci: Optional[str], email: Optional[str],
                                exclude_id: Optional[str] = None) -> None:
    if creci:
        query = select(Broker).where(Broker.creci == creci)
        if exclude_id:
            query = query.where(Broker.id != exclude_id)
        if (await db.execute(query)).scalars().first():
            raise DuplicateRecordError("CRECI já cadastrado no sistema")
    if email:
        query = select(Broker).where(Broker.email == email)
        if exclude_id:
            query = query.where(Broker.id != exclude_id)
        if (await db.execute(query)).scalars().first():
            raise DuplicateRecordError("E-mail já cadastrado no sistema")


async def list_brokers(db: AsyncSession, search: Optional[str] = None, status: Optional[str] = None) -> List[Broker]:
    query = select(Broker)
    if search:
        query = query.where(
            or_(
                Broker.nome.ilike(f"%{search}%"),
                Broker.creci.ilike(f"%{search}%"),
                Broker.email.ilike(f"%{search}%")
            )
        )
    if status:
        query = query.where(Broker.status == status)
    result = await db.execute(query.order_by(Broker.nome))
    return list(result.scalars().all())


async def list_public_brokers(db: AsyncSession) -> List[Broker]:
    """Corretores aprovados (ou sem status, cadastros antigos)"""
    result = await db.execute(
        select(Broker)
        .where(or_(Broker.status == BrokerStatus.APROVADO.value, Broker.status.is_(None)))
        .order_by(Broker.nome)
    )
    return list(result.scalars().all())


async def get_broker(db: AsyncSession, broker_id: str) -> Broker:
    broker = await db.get(Broker, broker_id)
    if not broker:
        raise NotFoundError("Corretor não encontrado")
    return broker


async def create_broker(db: AsyncSession, request: BrokerCreate) -> Broker:
    """Cadastro feito pela equipe: o corretor já nasce aprovado"""
    creci = request.creci.strip().upper()
    email = request.email.strip().lower()
    if not EMAIL_REGEX.match(email):
        raise SgciError("E-mail válido é obrigatório")
    await _ensure_unique_broker(db, creci, email)

    data = request.model_dump(exclude={"id", "status"})
    data.update(creci=creci, email=email, whatsapp=request.whatsapp or request.telefone)
    broker = Broker(
        id=request.id or generate_id("cor"),
        status=request.status or BrokerStatus.APROVADO.value,
        **data
    )
    db.add(broker)
    await db.flush()

    logger.info(f"Corretor {broker.id} cadastrado (CRECI {creci})")
    return broker


async def update_broker(db: AsyncSession, broker_id: str, request: BrokerUpdate) -> Broker:
    broker = await get_broker(db, broker_id)
    ensure_version(broker, request.version, "Corretor")
    update_data = request.model_dump(exclude_unset=True, exclude={"version"})

    if update_data.get("creci"):
        update_data["creci"] = update_data["creci"].strip().upper()
    if update_data.get("email"):
        update_data["email"] = update_data["email"].strip().lower()
        if not EMAIL_REGEX.match(update_data["email"]):
            raise SgciError("E-mail válido é obrigatório")

    await _ensure_unique_broker(
        db,
        update_data.get("creci") if update_data.get("creci") != broker.creci else None,
        update_data.get("email") if update_data.get("email") != broker.email else None,
        exclude_id=broker.id
    )

    _apply(broker, update_data)
    await db.flush()
    return broker


async def delete_broker(db: AsyncSession, broker_id: str) -> None:
    broker = await get_broker(db, broker_id)
    await db.delete(broker)
    await db.flush()
    logger.info(f"Corretor {broker_id} removido")


async def register_broker(db: AsyncSession, form: dict, photo_url: Optional[str] = None,
                          user_id: Optional[str] = None, broker_id: Optional[str] = None) -> Broker:
    """
    Autocadastro público do corretor. Fica Pendente até aprovação.
    form: campos do formulário (camelCase) já sem espaços nas pontas
    """
    nome = form.get("nome") or ""
    creci = (form.get("creci") or "").upper()
    email = (form.get("email") or "").lower()
    telefone = form.get("telefone") or ""

    if len(nome) < 3:
        raise SgciError("Nome completo é obrigatório (mínimo 3 caracteres)")
    if len(creci) < 5:
        raise SgciError("CRECI é obrigatório")
    if not email or not EMAIL_REGEX.match(email):
        raise SgciError("E-mail válido é obrigatório")
    if len(telefone) < 10:
        raise SgciError("Telefone é obrigatório")

    await _ensure_unique_broker(db, creci, email)

    broker = Broker(
        id=broker_id or generate_id("cor"),
        user_id=user_id,
        nome=nome,
        creci=creci,
        email=email,
        telefone=telefone,
        whatsapp=form.get("whatsapp") or telefone,
        instagram=form.get("instagram") or None,
        foto=photo_url,
        endereco=form.get("endereco") or None,
        cep=form.get("cep") or None,
        cidade=form.get("cidade") or None,
        estado=form.get("estado") or None,
        banco_nome=form.get("bancoNome") or None,
        banco_agencia=form.get("bancoAgencia") or None,
        banco_conta=form.get("bancoConta") or None,
        banco_tipo_conta=form.get("bancoTipoConta") or None,
        banco_pix=form.get("bancoPix") or None,
        area_atuacao=form.get("areaAtuacao") or None,
        observacoes=form.get("observacoes") or None,
        status=BrokerStatus.PENDENTE.value,
    )
    db.add(broker)
    await db.flush()

    logger.info(f"Autocadastro do corretor {broker.id} (CRECI {creci}) aguardando aprovação")
    return broker


async def set_broker_approval(db: AsyncSession, broker_id: str, status: str, approver) -> Broker:
    """Aprova ou rejeita um corretor"""
    if status not in (BrokerStatus.APROVADO.value, BrokerStatus.REJEITADO.value):
        raise SgciError('status deve ser "Aprovado" ou "Rejeitado"')

    broker = await get_broker(db, broker_id)
    broker.status = status
    broker.aprovado_em = datetime.utcnow()
    broker.aprovado_por = approver.id
    broker.aprovado_por_nome = approver.name or approver.email
    await db.flush()

    logger.info(f"Corretor {broker_id} {status.lower()} por {approver.email}")
    return broker


def uploads_dir() -> Path:
    """Diretório de uploads (UPLOADS_DIR ou ./uploads na raiz do projeto)"""
    if settings.UPLOADS_DIR:
        return Path(settings.UPLOADS_DIR)
    return Path(__file__).resolve().parent.parent.parent / "uploads"


async def resolve_names(db: AsyncSession, negotiation) -> dict:
    """Nomes de cliente, unidade e corretor; referências apagadas viram "(removido)" """
    cliente = await db.get(Client, negotiation.cliente_id) if negotiation.cliente_id else None
    unidade = await db.get(Unit, negotiation.unidade_id) if negotiation.unidade_id else None
    corretor = await db.get(Broker, negotiation.corretor_id) if negotiation.corretor_id else None

    unidade_nome = None
    if unidade:
        unidade_nome = f"{unidade.nome} · {unidade.unidade}" if unidade.unidade else unidade.nome

    return {
        "cliente": cliente.nome if cliente else REMOVED_LABEL,
        "unidade": unidade_nome or REMOVED_LABEL,
        "corretor": (corretor.nome if corretor else REMOVED_LABEL) if negotiation.corretor_id else None,
    }
