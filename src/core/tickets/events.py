"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketSubmittedEvent: Novo ticket aberto
- TicketAssignedEvent: Ticket atribuído ao suporte
- TicketUnassignedEvent: Atribuição removida (status volta a PENDING)
- TicketEscalatedEvent: Ticket escalonado para desenvolvedor
- TicketStatusChangedEvent: Status alterado (com flag "backward")
- TicketPriorityChangedEvent: Prioridade alterada
- InternalNoteAddedEvent: Nota interna registrada
- TicketResponseRecordedEvent: Resposta da equipe registrada

Uso:
    with uow:
        repo.save(ticket)
        uow.publish_event(TicketEscalatedEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from src.core.shared.events import DomainEvent


class _TicketEvent(DomainEvent):
    @property
    def aggregate_type(self) -> str:
        return "SupportTicket"


@dataclass
class TicketSubmittedEvent(_TicketEvent):
    """
    Evento: Ticket aberto.

    Attributes:
        issue_type: Tipo do problema
        priority: Prioridade inicial (derivada do tipo)
        email: Contato do usuário
    """

    issue_type: str = ""
    priority: str = ""
    email: str = ""


@dataclass
class TicketAssignedEvent(_TicketEvent):
    """Evento: Ticket atribuído a membro do suporte."""

    staff_id: str = ""
    staff_name: Optional[str] = None

    def _get_event_data(self) -> Dict[str, Any]:
        data = {"staff_id": self.staff_id}
        if self.staff_name:
            data["staff_name"] = self.staff_name
        return data


@dataclass
class TicketUnassignedEvent(_TicketEvent):
    """Evento: Atribuição removida."""

    previous_staff_id: Optional[str] = None


@dataclass
class TicketEscalatedEvent(_TicketEvent):
    """
    Evento: Ticket escalonado.

    Attributes:
        developer_id: Desenvolvedor que passa a ser o responsável
        developer_name: Nome de exibição
        reason: Motivo do escalonamento
    """

    developer_id: str = ""
    developer_name: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class TicketStatusChangedEvent(_TicketEvent):
    """
    Evento: Status alterado.

    Transições não são bloqueadas. ``backward`` marca movimentos para
    um estado anterior no fluxo (ex: CLOSED → PENDING), para que
    consumidores possam auditar.
    """

    previous_status: str = ""
    new_status: str = ""
    backward: bool = False


@dataclass
class TicketPriorityChangedEvent(_TicketEvent):
    """Evento: Prioridade alterada."""

    previous_priority: str = ""
    new_priority: str = ""


@dataclass
class InternalNoteAddedEvent(_TicketEvent):
    """Evento: Nota interna adicionada."""

    author_id: str = ""
    author_name: Optional[str] = None


@dataclass
class TicketResponseRecordedEvent(_TicketEvent):
    """Evento: Resposta registrada."""

    response_count: int = 0
    first_response: bool = False
