"""
Domínio de Tickets - Suporte em camadas (suporte → desenvolvedor).

Este módulo contém a lógica de negócio dos tickets de suporte:
- Entidades (TicketEntity, TicketStatus, TicketPriority)
- Domain Events (TicketAssigned, TicketEscalated, ...)
- DTOs (Input/Output)
- Ports (TicketRepository sobre DocumentStore)

Os use cases ficam em ``src.core.tickets.use_cases``.

Características do Domínio:
- Prioridade automática por tipo de problema
- Transições puras (cada operação devolve um novo ticket)
- Status sem grafo de transições; movimentos para trás são auditados
- Atraso após 24h sem resolução
"""

from .entities import (
    TicketEntity,
    TicketStatus,
    TicketPriority,
    InternalNote,
    CurrentHandler,
    ISSUE_TYPE_PRIORITY,
    auto_priority,
)
from .events import (
    TicketSubmittedEvent,
    TicketAssignedEvent,
    TicketUnassignedEvent,
    TicketEscalatedEvent,
    TicketStatusChangedEvent,
    TicketPriorityChangedEvent,
    InternalNoteAddedEvent,
    TicketResponseRecordedEvent,
)
from .dtos import (
    SubmitTicketInputDTO,
    AssignTicketInputDTO,
    EscalateTicketInputDTO,
    AddInternalNoteInputDTO,
    TicketOutputDTO,
)
from .ports import TicketRepository, DocumentTicketRepository

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TicketPriority",
    "InternalNote",
    "CurrentHandler",
    "ISSUE_TYPE_PRIORITY",
    "auto_priority",
    # Events
    "TicketSubmittedEvent",
    "TicketAssignedEvent",
    "TicketUnassignedEvent",
    "TicketEscalatedEvent",
    "TicketStatusChangedEvent",
    "TicketPriorityChangedEvent",
    "InternalNoteAddedEvent",
    "TicketResponseRecordedEvent",
    # DTOs
    "SubmitTicketInputDTO",
    "AssignTicketInputDTO",
    "EscalateTicketInputDTO",
    "AddInternalNoteInputDTO",
    "TicketOutputDTO",
    # Ports
    "TicketRepository",
    "DocumentTicketRepository",
]
