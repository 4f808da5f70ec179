"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento das entidades para a camada de apresentação.

Tipos de DTOs:
- Input DTOs: Recebem dados de entrada (de APIs)
- Output DTOs: Formatam dados para resposta (JSON)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from .entities import TicketEntity


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class SubmitTicketInputDTO:
    """
    DTO de entrada para abrir ticket.

    Imutável (frozen=True) para garantir que dados recebidos
    não sejam alterados acidentalmente.

    Attributes:
        full_name: Nome do usuário
        email: Email de contato
        issue_type: Tipo do problema (define a prioridade padrão)
        description: Descrição do problema
        priority: Prioridade explícita (opcional, sobrepõe a automática)
        attachments: URLs de anexos
    """

    full_name: str
    email: str
    issue_type: str
    description: str
    account_type: Optional[str] = None
    device_type: Optional[str] = None
    app_version: Optional[str] = None
    date_time: Optional[str] = None
    priority: Optional[str] = None
    attachments: tuple = field(default_factory=tuple)  # tuple para ser hashable

    def to_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "issue_type": self.issue_type,
            "description": self.description,
            "account_type": self.account_type,
            "device_type": self.device_type,
            "app_version": self.app_version,
            "date_time": self.date_time,
            "priority": self.priority,
            "attachments": list(self.attachments),
        }


@dataclass(frozen=True)
class AssignTicketInputDTO:
    """
    DTO de entrada para atribuir ticket ao suporte.

    Attributes:
        ticket_id: ID do ticket
        staff_id: ID do membro do suporte
        staff_name: Nome de exibição
    """

    ticket_id: str
    staff_id: str
    staff_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
        }


@dataclass(frozen=True)
class EscalateTicketInputDTO:
    """DTO de entrada para escalonar ticket a um desenvolvedor."""

    ticket_id: str
    developer_id: str
    developer_name: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "developer_id": self.developer_id,
            "developer_name": self.developer_name,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class AddInternalNoteInputDTO:
    """DTO de entrada para nota interna."""

    ticket_id: str
    author_id: str
    author_name: Optional[str]
    note: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "note": self.note,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class InternalNoteDTO:
    author: str
    author_name: Optional[str]
    note: str
    timestamp: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "author": self.author,
            "author_name": self.author_name,
            "note": self.note,
            "timestamp": _iso(self.timestamp),
        }


@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    Inclui as propriedades derivadas (atraso, responsável atual,
    tempos de resposta/resolução) para que a apresentação renderize
    sem uma segunda consulta.
    """

    id: str
    full_name: str
    email: str
    account_type: Optional[str]
    device_type: Optional[str]
    app_version: Optional[str]
    issue_type: str
    description: str
    date_time: Optional[datetime]
    attachments: List[str]
    status: str
    status_label: str
    priority: str
    assigned_to: Optional[str]
    assigned_to_name: Optional[str]
    assigned_at: Optional[datetime]
    escalated_to: Optional[str]
    escalated_to_name: Optional[str]
    escalated_at: Optional[datetime]
    escalation_reason: Optional[str]
    internal_notes: List[InternalNoteDTO]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    resolved_at: Optional[datetime]
    closed_at: Optional[datetime]
    first_response_at: Optional[datetime]
    last_response_at: Optional[datetime]
    response_count: int
    is_assigned: bool
    is_escalated: bool
    is_resolved: bool
    is_overdue: bool
    response_time_hours: Optional[float]
    resolution_time_hours: Optional[float]
    current_handler: Optional[dict]

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Entidade TicketEntity

        Returns:
            DTO com dados e propriedades derivadas
        """
        handler = entity.current_handler
        return cls(
            id=entity.id,
            full_name=entity.full_name,
            email=entity.email,
            account_type=entity.account_type,
            device_type=entity.device_type,
            app_version=entity.app_version,
            issue_type=entity.issue_type,
            description=entity.description,
            date_time=entity.date_time,
            attachments=list(entity.attachments),
            status=entity.status.value,
            status_label=entity.status.display_name,
            priority=entity.priority.value,
            assigned_to=entity.assigned_to,
            assigned_to_name=entity.assigned_to_name,
            assigned_at=entity.assigned_at,
            escalated_to=entity.escalated_to,
            escalated_to_name=entity.escalated_to_name,
            escalated_at=entity.escalated_at,
            escalation_reason=entity.escalation_reason,
            internal_notes=[
                InternalNoteDTO(
                    author=note.author,
                    author_name=note.author_name,
                    note=note.note,
                    timestamp=note.timestamp,
                )
                for note in entity.internal_notes
            ],
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            resolved_at=entity.resolved_at,
            closed_at=entity.closed_at,
            first_response_at=entity.first_response_at,
            last_response_at=entity.last_response_at,
            response_count=entity.response_count,
            is_assigned=entity.is_assigned,
            is_escalated=entity.is_escalated,
            is_resolved=entity.is_resolved,
            is_overdue=entity.is_overdue,
            response_time_hours=entity.response_time_hours,
            resolution_time_hours=entity.resolution_time_hours,
            current_handler=handler.to_dict() if handler else None,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "account_type": self.account_type,
            "device_type": self.device_type,
            "app_version": self.app_version,
            "issue_type": self.issue_type,
            "description": self.description,
            "date_time": _iso(self.date_time),
            "attachments": list(self.attachments),
            "status": self.status,
            "status_label": self.status_label,
            "priority": self.priority,
            "assigned_to": self.assigned_to,
            "assigned_to_name": self.assigned_to_name,
            "assigned_at": _iso(self.assigned_at),
            "escalated_to": self.escalated_to,
            "escalated_to_name": self.escalated_to_name,
            "escalated_at": _iso(self.escalated_at),
            "escalation_reason": self.escalation_reason,
            "internal_notes": [note.to_dict() for note in self.internal_notes],
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "resolved_at": _iso(self.resolved_at),
            "closed_at": _iso(self.closed_at),
            "first_response_at": _iso(self.first_response_at),
            "last_response_at": _iso(self.last_response_at),
            "response_count": self.response_count,
            "is_assigned": self.is_assigned,
            "is_escalated": self.is_escalated,
            "is_resolved": self.is_resolved,
            "is_overdue": self.is_overdue,
            "response_time_hours": self.response_time_hours,
            "resolution_time_hours": self.resolution_time_hours,
            "current_handler": self.current_handler,
        }
