"""
S.G.C.I. - Installment Ledger
Cálculos sobre as parcelas de uma negociação (totais, saldos, simulação)
Funções puras: não acessam banco nem alteram os objetos recebidos
"""
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional

from sgci.core.exceptions import InstallmentLimitError
from sgci.models.negotiation import InstallmentStatus, NegotiationStatus, MAX_INSTALLMENTS
from sgci.utils.formatting import to_decimal

ZERO = Decimal("0.00")


@dataclass
class LedgerSummary:
    contrato_base: Decimal
    total_pago: Decimal
    total_pendente: Decimal
    total_agendado: Decimal
    total_permuta: Decimal
    saldo_em_aberto: Decimal
    saldo_parcelado: Decimal
    qtd_prevista: int
    valor_parcela_simulada: Optional[Decimal]
    parcelas_pagas: int
    parcelas_pendentes: int
    proximo_vencimento: Optional[date]

    def to_dict(self):
        return {
            "contratoBase": float(self.contrato_base),
            "totalPago": float(self.total_pago),
            "totalPendente": float(self.total_pendente),
            "totalAgendado": float(self.total_agendado),
            "totalPermuta": float(self.total_permuta),
            "saldoEmAberto": float(self.saldo_em_aberto),
            "saldoParcelado": float(self.saldo_parcelado),
            "qtdPrevista": self.qtd_prevista,
            "valorParcelaSimulada": float(self.valor_parcela_simulada) if self.valor_parcela_simulada is not None else None,
            "parcelasPagas": self.parcelas_pagas,
            "parcelasPendentes": self.parcelas_pendentes,
            "proximoVencimento": self.proximo_vencimento.isoformat() if self.proximo_vencimento else None,
        }


@dataclass
class PortfolioSummary:
    total_pago: Decimal
    total_pendente: Decimal
    parcelas_pagas: int
    total_parcelas: int

    def to_dict(self):
        return {
            "totalPago": float(self.total_pago),
            "totalPendente": float(self.total_pendente),
            "parcelasPagas": self.parcelas_pagas,
            "totalParcelas": self.total_parcelas,
        }


def _sum(values: Iterable) -> Decimal:
    return sum((to_decimal(v) for v in values), ZERO)


def _get(item, name: str):
    """Aceita tanto objetos (models) quanto dicts"""
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def _is_paid(parcela) -> bool:
    return _get(parcela, "status") == InstallmentStatus.PAGA.value


def total_paid(parcelas) -> Decimal:
    return _sum(_get(p, "valor") for p in parcelas if _is_paid(p))


def total_pending(parcelas) -> Decimal:
    return _sum(_get(p, "valor") for p in parcelas if not _is_paid(p))


def total_scheduled(parcelas) -> Decimal:
    return _sum(_get(p, "valor") for p in parcelas)


def trade_in_total(permutas) -> Decimal:
    return _sum(_get(item, "valor") for item in (permutas or []))


def _due_date(parcela) -> Optional[date]:
    vencimento = _get(parcela, "vencimento")
    if isinstance(vencimento, str):
        return date.fromisoformat(vencimento[:10])
    return vencimento


def next_due_date(parcelas) -> Optional[date]:
    """Vencimento mais próximo entre as parcelas pendentes"""
    pendentes = [_due_date(p) for p in parcelas if not _is_paid(p) and _due_date(p)]
    return min(pendentes) if pendentes else None


def upcoming_payments(parcelas, limit: int = 3) -> List:
    """Próximas parcelas pendentes, por vencimento"""
    pendentes = [p for p in parcelas if not _is_paid(p) and _due_date(p)]
    return sorted(pendentes, key=_due_date)[:limit]


def toggle_status(status: str) -> str:
    if status == InstallmentStatus.PAGA.value:
        return InstallmentStatus.PENDENTE.value
    return InstallmentStatus.PAGA.value


def ensure_can_add_installment(count: int) -> None:
    if count >= MAX_INSTALLMENTS:
        raise InstallmentLimitError(f"Limite de {MAX_INSTALLMENTS} parcelas atingido para esta negociação.")


def simulate_installment_value(valor_contrato, permutas, qtd_parcelas: Optional[int]) -> Optional[Decimal]:
    """
    Valor de cada parcela após descontar as permutas.
    Retorna None quando não há parcelas previstas.
    """
    if not qtd_parcelas:
        return None
    saldo = max(to_decimal(valor_contrato) - trade_in_total(permutas), ZERO)
    return (saldo / Decimal(qtd_parcelas)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def summarize(negotiation) -> LedgerSummary:
    parcelas = list(_get(negotiation, "parcelas") or [])
    permutas = _get(negotiation, "permutas")
    if permutas is None and isinstance(negotiation, dict):
        permutas = negotiation.get("permutaLista")

    valor_contrato = _get(negotiation, "valor_contrato")
    if valor_contrato is None and isinstance(negotiation, dict):
        valor_contrato = negotiation.get("valorContrato")

    pago = total_paid(parcelas)
    agendado = total_scheduled(parcelas)
    permuta = trade_in_total(permutas)

    contrato_base = to_decimal(valor_contrato) if valor_contrato is not None else agendado

    qtd_parcelas = _get(negotiation, "qtd_parcelas")
    if qtd_parcelas is None and isinstance(negotiation, dict):
        qtd_parcelas = negotiation.get("qtdParcelas")
    qtd_prevista = min(qtd_parcelas if qtd_parcelas is not None else len(parcelas), MAX_INSTALLMENTS)

    saldo_parcelado = max(contrato_base - permuta, ZERO)
    valor_simulado = None
    if qtd_prevista > 0:
        valor_simulado = (saldo_parcelado / Decimal(qtd_prevista)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    pagas = sum(1 for p in parcelas if _is_paid(p))

    return LedgerSummary(
        contrato_base=contrato_base,
        total_pago=pago,
        total_pendente=total_pending(parcelas),
        total_agendado=agendado,
        total_permuta=permuta,
        saldo_em_aberto=max(contrato_base - pago, ZERO),
        saldo_parcelado=saldo_parcelado,
        qtd_prevista=qtd_prevista,
        valor_parcela_simulada=valor_simulado,
        parcelas_pagas=pagas,
        parcelas_pendentes=len(parcelas) - pagas,
        proximo_vencimento=next_due_date(parcelas),
    )


def summarize_portfolio(negotiations) -> PortfolioSummary:
    """Totais do painel de recibos (somente negociações fechadas)"""
    fechadas = [n for n in negotiations if _get(n, "status") == NegotiationStatus.FECHADO.value]
    parcelas = [p for n in fechadas for p in (_get(n, "parcelas") or [])]

    return PortfolioSummary(
        total_pago=total_paid(parcelas),
        total_pendente=total_pending(parcelas),
        parcelas_pagas=sum(1 for p in parcelas if _is_paid(p)),
        total_parcelas=len(parcelas),
    )
