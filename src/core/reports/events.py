"""
Domain Events do Domínio de Denúncias.

Eventos:
- ReportSubmittedEvent: Denúncia válida foi registrada
- ReportAssignedEvent: Denúncia atribuída a membro da equipe
- ReportUnassignedEvent: Atribuição removida
- ReportStatusChangedEvent: Status de revisão alterado
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


class _ReportEvent(DomainEvent):
    @property
    def aggregate_type(self) -> str:
        return "Report"


@dataclass
class ReportSubmittedEvent(_ReportEvent):
    """
    Evento: Denúncia registrada.

    Attributes:
        user_id: Usuário que denunciou
        report_type: Alvo (product/seller)
        reason: Motivo selecionado
    """

    user_id: str = ""
    report_type: str = ""
    reason: str = ""


@dataclass
class ReportAssignedEvent(_ReportEvent):
    """Evento: Denúncia atribuída."""

    staff_id: str = ""
    staff_name: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        data = {"staff_id": self.staff_id}
        if self.staff_name:
            data["staff_name"] = self.staff_name
        return data


@dataclass
class ReportUnassignedEvent(_ReportEvent):
    """Evento: Atribuição removida (status preservado)."""

    previous_staff_id: Optional[str] = None


@dataclass
class ReportStatusChangedEvent(_ReportEvent):
    """
    Evento: Status de revisão alterado.

    Attributes:
        previous_status: Status anterior
        new_status: Novo status
        backward: True quando a denúncia sai de um estado final
    """

    previous_status: str = ""
    new_status: str = ""
    backward: bool = False
