"""
Calculadoras de SLA e estatísticas agregadas.

As estatísticas são recalculadas por varredura completa de um snapshot
de entidades a cada chamada; o motor não mantém agregados persistidos.

Calculadoras:
- TicketStatsCalculator: contagem por status, atribuídos, atrasados e
  médias de tempo de resposta/resolução
- ReportStatsCalculator: contagem por status e atribuídas
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from src.core.reports.entities import ReportEntity, ReportStatus
from src.core.shared.timestamps import utc_now
from src.core.tickets.entities import TicketEntity, TicketStatus


def mean_hours(values: Iterable[Optional[float]]) -> float:
    """
    Média dos valores definidos, arredondada em 2 casas.

    Returns:
        0 quando nenhum valor está definido
    """
    defined = [value for value in values if value is not None]
    if not defined:
        return 0
    return round(sum(defined) / len(defined), 2)


@dataclass
class TicketStats:
    """Estatísticas agregadas de tickets."""

    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    assigned: int = 0
    unassigned: int = 0
    escalated: int = 0
    overdue: int = 0
    avg_response_time_hours: float = 0
    avg_resolution_time_hours: float = 0

    def count(self, status: TicketStatus) -> int:
        return self.by_status.get(status.value, 0)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "assigned": self.assigned,
            "unassigned": self.unassigned,
            "escalated": self.escalated,
            "overdue": self.overdue,
            "avg_response_time_hours": self.avg_response_time_hours,
            "avg_resolution_time_hours": self.avg_resolution_time_hours,
        }


@dataclass
class ReportStats:
    """Estatísticas agregadas de denúncias."""

    total: int = 0
    by_status: Dict[str, int] = field(default_factory=dict)
    assigned: int = 0
    unassigned: int = 0

    def count(self, status: ReportStatus) -> int:
        return self.by_status.get(status.value, 0)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "by_status": dict(self.by_status),
            "assigned": self.assigned,
            "unassigned": self.unassigned,
        }


class TicketStatsCalculator:
    """
    Calcula TicketStats sobre uma coleção de tickets.

    Example:
        stats = TicketStatsCalculator().calculate(repo.list_all())
        stats.overdue
    """

    def calculate(
        self,
        tickets: Iterable[TicketEntity],
        now: Optional[datetime] = None,
    ) -> TicketStats:
        """
        Args:
            tickets: Snapshot de tickets
            now: Relógio para o cálculo de atraso (default: agora, UTC)
        """
        now = now or utc_now()
        snapshot: List[TicketEntity] = list(tickets)

        by_status = {status.value: 0 for status in TicketStatus}
        for ticket in snapshot:
            by_status[ticket.status.value] += 1

        assigned = sum(1 for ticket in snapshot if ticket.is_assigned)

        return TicketStats(
            total=len(snapshot),
            by_status=by_status,
            assigned=assigned,
            unassigned=len(snapshot) - assigned,
            escalated=sum(1 for ticket in snapshot if ticket.is_escalated),
            overdue=sum(1 for ticket in snapshot if ticket.is_overdue_at(now)),
            avg_response_time_hours=mean_hours(t.response_time_hours for t in snapshot),
            avg_resolution_time_hours=mean_hours(t.resolution_time_hours for t in snapshot),
        )


class ReportStatsCalculator:
    """Calcula ReportStats sobre uma coleção de denúncias."""

    def calculate(self, reports: Iterable[ReportEntity]) -> ReportStats:
        snapshot: List[ReportEntity] = list(reports)

        by_status = {status.value: 0 for status in ReportStatus}
        for report in snapshot:
            by_status[report.status.value] += 1

        assigned = sum(1 for report in snapshot if report.is_assigned)

        return ReportStats(
            total=len(snapshot),
            by_status=by_status,
            assigned=assigned,
            unassigned=len(snapshot) - assigned,
        )
