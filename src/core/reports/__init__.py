"""
Domínio de Denúncias - Reports contra produtos e vendedores.

Este módulo contém a lógica de negócio das denúncias:
- Entidades (ReportEntity, ReportType, ReportStatus) e validador
- Domain Events (ReportSubmitted, ReportAssigned, ...)
- DTOs (Input/Output)
- Ports (ReportRepository sobre DocumentStore)

Os use cases ficam em ``src.core.reports.use_cases``.
"""

from .entities import (
    ReportEntity,
    ReportType,
    ReportStatus,
    VALID_REASONS,
    OTHER_REASON,
)
from .events import (
    ReportSubmittedEvent,
    ReportAssignedEvent,
    ReportUnassignedEvent,
    ReportStatusChangedEvent,
)
from .dtos import (
    SubmitReportInputDTO,
    AssignReportInputDTO,
    UpdateReportStatusInputDTO,
    ReportOutputDTO,
)
from .ports import ReportRepository, DocumentReportRepository

__all__ = [
    # Entities
    "ReportEntity",
    "ReportType",
    "ReportStatus",
    "VALID_REASONS",
    "OTHER_REASON",
    # Events
    "ReportSubmittedEvent",
    "ReportAssignedEvent",
    "ReportUnassignedEvent",
    "ReportStatusChangedEvent",
    # DTOs
    "SubmitReportInputDTO",
    "AssignReportInputDTO",
    "UpdateReportStatusInputDTO",
    "ReportOutputDTO",
    # Ports
    "ReportRepository",
    "DocumentReportRepository",
]
