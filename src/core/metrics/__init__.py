"""
Métricas de SLA do back office.

Estatísticas derivadas de snapshots de tickets e denúncias:
contagens por status, atribuição, atraso (24h) e tempos médios
de resposta e resolução.
"""

from .calculators import (
    TicketStats,
    ReportStats,
    TicketStatsCalculator,
    ReportStatsCalculator,
    mean_hours,
)

__all__ = [
    "TicketStats",
    "ReportStats",
    "TicketStatsCalculator",
    "ReportStatsCalculator",
    "mean_hours",
]
