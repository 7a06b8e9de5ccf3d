"""
S.G.C.I. - Statistics API
Indicadores do painel
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from sgci.database import get_db
from sgci.models import (
    Client,
    Broker,
    BrokerStatus,
    Unit,
    Negotiation,
    Installment,
    InstallmentStatus,
    Receipt,
    User,
)
from sgci.core.permissions import Action
from sgci.services.ledger import summarize_portfolio, total_paid, total_pending, upcoming_payments
from sgci.api.auth import require_action

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get("/dashboard")
async def get_dashboard_stats(
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_action(Action.VIEW_DASHBOARD))
):
    """Estatísticas para o dashboard"""

    # Cadastros
    total_clients = await db.scalar(select(func.count(Client.id))) or 0
    total_units = await db.scalar(select(func.count(Unit.id))) or 0

    result = await db.execute(select(Unit.status, func.count(Unit.id)).group_by(Unit.status))
    units_by_status = {row[0]: row[1] for row in result.all()}

    total_brokers = await db.scalar(select(func.count(Broker.id))) or 0
    pending_brokers = await db.scalar(
        select(func.count(Broker.id)).where(Broker.status == BrokerStatus.PENDENTE.value)
    ) or 0

    # Negociações por etapa
    result = await db.execute(
        select(Negotiation.status, func.count(Negotiation.id)).group_by(Negotiation.status)
    )
    negotiations_by_status = {row[0]: row[1] for row in result.all()}

    # Parcelas
    result = await db.execute(select(Installment))
    installments = result.scalars().all()

    paid_count = sum(1 for p in installments if p.status == InstallmentStatus.PAGA.value)

    # Recibos
    total_receipts = await db.scalar(select(func.count(Receipt.numero))) or 0

    # Painel de recibos (somente negociações fechadas)
    result = await db.execute(select(Negotiation))
    portfolio = summarize_portfolio(result.scalars().all())

    return {
        "clientes": {"total": total_clients},
        "empreendimentos": {
            "total": total_units,
            "porStatus": units_by_status
        },
        "corretores": {
            "total": total_brokers,
            "pendentes": pending_brokers
        },
        "negociacoes": {
            "total": sum(negotiations_by_status.values()),
            "porStatus": negotiations_by_status
        },
        "parcelas": {
            "total": len(installments),
            "pagas": paid_count,
            "pendentes": len(installments) - paid_count,
            "totalPago": float(total_paid(installments)),
            "totalPendente": float(total_pending(installments)),
            "proximosVencimentos": [p.to_dict() for p in upcoming_payments(installments, limit=5)]
        },
        "recibos": {
            "emitidos": total_receipts,
            "painel": portfolio.to_dict()
        },
        "generatedAt": datetime.utcnow().isoformat()
    }
