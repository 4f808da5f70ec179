"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
as transições puras do TicketEntity contra o document store.

Use Cases implementados:
- SubmitTicketService: Abre ticket (prioridade automática)
- ListTicketsService: Lista (todos / por status / por responsável)
- ListEscalatedTicketsService: Tickets escalonados
- SearchTicketsService: Busca textual
- GetTicketService: Obtém ticket específico
- AssignTicketService / UnassignTicketService: Atribuição ao suporte
- EscalateTicketService: Escalonamento para desenvolvedor
- UpdateTicketStatusService / BulkUpdateTicketStatusService: Status
- UpdateTicketPriorityService: Prioridade
- AddInternalNoteService: Nota interna
- RecordResponseService: Registro de resposta
- TicketStatsService: Estatísticas de SLA

Responsabilidades dos Use Cases:
- Converter entrada do chamador (strings → enums, estrito)
- Read-modify-write: ler, aplicar transição, regravar documento inteiro
- Disparar eventos de domínio via UoW
- Devolver o ticket relido do store

Princípios:
- Um Use Case = Uma operação de negócio
- Dependências injetadas (DI)
- Nenhuma transição de status é bloqueada
"""

import logging
from typing import List, Optional, Sequence, Tuple

from src.core.metrics.calculators import TicketStatsCalculator
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.timestamps import to_datetime

from .ports import TicketRepository
from .entities import (
    TicketEntity,
    TicketPriority,
    TicketStatus,
    auto_priority,
    is_backward_transition,
)
from .dtos import (
    SubmitTicketInputDTO,
    AssignTicketInputDTO,
    EscalateTicketInputDTO,
    AddInternalNoteInputDTO,
    TicketOutputDTO,
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

logger = logging.getLogger(__name__)


# =============================================================================
# Helpers
# =============================================================================

def load_ticket(ticket_repo: TicketRepository, ticket_id: str) -> TicketEntity:
    """
    Busca ticket ou lança EntityNotFoundError.

    Raises:
        EntityNotFoundError: Se ticket não existe
    """
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="SupportTicket",
            entity_id=ticket_id,
        )
    return ticket


def parse_ticket_status(raw: str) -> TicketStatus:
    status = TicketStatus.lookup(raw)
    if status is None:
        raise ValidationError(f"Status inválido: {raw}", field="status")
    return status


def parse_ticket_priority(raw: str) -> TicketPriority:
    priority = TicketPriority.lookup(raw)
    if priority is None:
        raise ValidationError(f"Prioridade inválida: {raw}", field="priority")
    return priority


def change_status(
    ticket: TicketEntity,
    new_status: TicketStatus,
) -> Tuple[TicketEntity, TicketStatusChangedEvent]:
    """
    Aplica a mudança de status e monta o evento correspondente.

    Transições "para trás" são permitidas, mas registradas em
    WARNING e sinalizadas no evento.
    """
    previous_status = ticket.status
    backward = is_backward_transition(previous_status, new_status)

    if backward:
        logger.warning(
            f"Transição para trás no ticket {ticket.id}: "
            f"{previous_status.value} → {new_status.value}"
        )

    event = TicketStatusChangedEvent(
        aggregate_id=ticket.id,
        previous_status=previous_status.value,
        new_status=new_status.value,
        backward=backward,
    )
    return ticket.update_status(new_status), event


# =============================================================================
# Criação
# =============================================================================

class SubmitTicketService:
    """
    Use Case: Abrir um novo ticket.

    Fluxo:
    1. Validar dados de entrada
    2. Derivar prioridade do tipo de problema (se não informada)
    3. Persistir via repositório
    4. Disparar evento TicketSubmitted
    5. Retornar DTO de saída

    Example:
        service = SubmitTicketService(ticket_repo, uow)
        output = service.execute(SubmitTicketInputDTO(
            full_name="Ana Souza",
            email="ana@example.com",
            issue_type="Payment Issue",
            description="Cobrança em dobro no cartão",
        ))
        output.priority  # "urgent"
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        """
        Inicializa service com dependências injetadas.

        Args:
            ticket_repo: Repositório para persistência
            uow: Unit of Work da operação
        """
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, input_dto: SubmitTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se dados inválidos ou prioridade desconhecida
        """
        priority = (
            parse_ticket_priority(input_dto.priority)
            if input_dto.priority
            else None
        )

        ticket = TicketEntity.submit(
            full_name=input_dto.full_name,
            email=input_dto.email,
            issue_type=input_dto.issue_type,
            description=input_dto.description,
            account_type=input_dto.account_type,
            device_type=input_dto.device_type,
            app_version=input_dto.app_version,
            date_time=to_datetime(input_dto.date_time),
            attachments=tuple(input_dto.attachments),
            priority=priority,
        )

        with self.uow:
            ticket = self.ticket_repo.add(ticket)
            self.uow.publish_event(
                TicketSubmittedEvent(
                    aggregate_id=ticket.id,
                    issue_type=ticket.issue_type,
                    priority=ticket.priority.value,
                    email=ticket.email,
                )
            )

        logger.info(f"Ticket aberto: {ticket.id} ({ticket.priority.value})")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket.id))


# =============================================================================
# Consultas
# =============================================================================

class ListTicketsService:
    """
    Use Case: Listar tickets, mais recentes primeiro.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(
        self,
        status: Optional[str] = None,
        assignee_id: Optional[str] = None,
    ) -> List[TicketOutputDTO]:
        """
        Lista tickets com filtros opcionais (combináveis).

        Args:
            status: Filtrar por status
            assignee_id: Filtrar por membro do suporte

        Raises:
            ValidationError: Se status desconhecido
        """
        if status:
            tickets = self.ticket_repo.list_by_status(parse_ticket_status(status))
        elif assignee_id:
            tickets = self.ticket_repo.list_by_assignee(assignee_id)
        else:
            tickets = self.ticket_repo.list_all()

        if status and assignee_id:
            tickets = [t for t in tickets if t.assigned_to == assignee_id]

        return [TicketOutputDTO.from_entity(t) for t in tickets]


class ListEscalatedTicketsService:
    """Use Case: Tickets escalonados, escalonamento mais recente primeiro."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self) -> List[TicketOutputDTO]:
        return [TicketOutputDTO.from_entity(t) for t in self.ticket_repo.list_escalated()]


class SearchTicketsService:
    """
    Use Case: Busca textual.

    Casa, sem diferenciar maiúsculas, trechos do email, do nome ou
    da descrição. Termo vazio devolve todos os tickets.
    """

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, term: str) -> List[TicketOutputDTO]:
        needle = (term or "").strip().lower()
        tickets = self.ticket_repo.list_all()

        if needle:
            tickets = [
                t for t in tickets
                if needle in (t.email or "").lower()
                or needle in (t.full_name or "").lower()
                or needle in (t.description or "").lower()
            ]

        return [TicketOutputDTO.from_entity(t) for t in tickets]


class GetTicketService:
    """Use Case: Obter detalhes de um ticket específico."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo

    def execute(self, ticket_id: str) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
        """
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))


class TicketStatsService:
    """Use Case: Estatísticas agregadas (contagens, atraso, tempos médios)."""

    def __init__(self, ticket_repo: TicketRepository):
        self.ticket_repo = ticket_repo
        self.calculator = TicketStatsCalculator()

    def execute(self) -> dict:
        return self.calculator.calculate(self.ticket_repo.list_all()).to_dict()


# =============================================================================
# Atribuição / Escalonamento
# =============================================================================

class AssignTicketService:
    """
    Use Case: Atribuir ticket a membro do suporte.

    Fluxo:
    1. Buscar ticket existente
    2. Aplicar assign_to (status → ASSIGNED, escalonamento preservado)
    3. Regravar documento
    4. Disparar evento TicketAssigned
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, input_dto: AssignTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se staff_id vazio
            EntityNotFoundError: Se ticket não existe
        """
        if not input_dto.staff_id:
            raise ValidationError("ID do suporte é obrigatório", field="staff_id")

        with self.uow:
            ticket = load_ticket(self.ticket_repo, input_dto.ticket_id)
            ticket = ticket.assign_to(input_dto.staff_id, input_dto.staff_name)
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketAssignedEvent(
                    aggregate_id=ticket.id,
                    staff_id=input_dto.staff_id,
                    staff_name=input_dto.staff_name,
                )
            )

        logger.info(f"Ticket {ticket.id} atribuído a {input_dto.staff_id}")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket.id))


class UnassignTicketService:
    """
    Use Case: Remover atribuição de ticket.

    Limpa os três campos de atribuição e volta o status para PENDING.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_id: str) -> TicketOutputDTO:
        with self.uow:
            ticket = load_ticket(self.ticket_repo, ticket_id)
            previous_staff_id = ticket.assigned_to
            ticket = ticket.unassign()
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketUnassignedEvent(
                    aggregate_id=ticket.id,
                    previous_staff_id=previous_staff_id,
                )
            )

        logger.info(f"Atribuição removida do ticket {ticket_id}")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))


class EscalateTicketService:
    """
    Use Case: Escalonar ticket para desenvolvedor.

    A atribuição ao suporte é mantida como histórico; o responsável
    atual passa a ser o desenvolvedor.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, input_dto: EscalateTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se developer_id vazio
            EntityNotFoundError: Se ticket não existe
        """
        if not input_dto.developer_id:
            raise ValidationError("ID do desenvolvedor é obrigatório", field="developer_id")

        with self.uow:
            ticket = load_ticket(self.ticket_repo, input_dto.ticket_id)
            ticket = ticket.escalate_to(
                input_dto.developer_id,
                input_dto.developer_name,
                input_dto.reason,
            )
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketEscalatedEvent(
                    aggregate_id=ticket.id,
                    developer_id=input_dto.developer_id,
                    developer_name=input_dto.developer_name,
                    reason=input_dto.reason,
                )
            )

        logger.info(f"Ticket {ticket.id} escalonado para {input_dto.developer_id}")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket.id))


# =============================================================================
# Status / Prioridade
# =============================================================================

class UpdateTicketStatusService:
    """
    Use Case: Alterar status do ticket.

    Não há grafo de transições: qualquer status pode seguir qualquer
    outro. Fechar um ticket já fechado também é aceito.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_id: str, status: str) -> TicketOutputDTO:
        """
        Args:
            ticket_id: ID do ticket
            status: Novo status (valor canônico ou alias)

        Raises:
            ValidationError: Se status desconhecido
            EntityNotFoundError: Se ticket não existe
        """
        new_status = parse_ticket_status(status)

        with self.uow:
            ticket = load_ticket(self.ticket_repo, ticket_id)
            ticket, event = change_status(ticket, new_status)
            self.ticket_repo.save(ticket)
            self.uow.publish_event(event)

        logger.info(f"Ticket {ticket_id}: status {event.previous_status} → {event.new_status}")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))


class BulkUpdateTicketStatusService:
    """
    Use Case: Alterar o status de vários tickets de uma vez.

    Todos os tickets são carregados antes da primeira escrita, de
    forma que um ID inexistente aborta a operação sem gravações parciais.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_ids: Sequence[str], status: str) -> List[TicketOutputDTO]:
        """
        Raises:
            ValidationError: Se status desconhecido ou lista vazia
            EntityNotFoundError: Se algum ticket não existe
        """
        new_status = parse_ticket_status(status)
        if not ticket_ids:
            raise ValidationError("Nenhum ticket informado", field="ticket_ids")

        with self.uow:
            tickets = [load_ticket(self.ticket_repo, ticket_id) for ticket_id in ticket_ids]
            for ticket in tickets:
                updated, event = change_status(ticket, new_status)
                self.ticket_repo.save(updated)
                self.uow.publish_event(event)

        logger.info(f"{len(tickets)} tickets movidos para {new_status.value}")
        return [
            TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))
            for ticket_id in ticket_ids
        ]


class UpdateTicketPriorityService:
    """
    Use Case: Alterar prioridade.

    Com ``priority=None`` recalcula a prioridade automática pelo tipo
    de problema.
    """

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_id: str, priority: Optional[str] = None) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se prioridade desconhecida
            EntityNotFoundError: Se ticket não existe
        """
        new_priority = parse_ticket_priority(priority) if priority else None

        with self.uow:
            ticket = load_ticket(self.ticket_repo, ticket_id)
            previous_priority = ticket.priority
            new_priority = new_priority or auto_priority(ticket.issue_type)

            ticket = ticket.update_priority(new_priority)
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketPriorityChangedEvent(
                    aggregate_id=ticket.id,
                    previous_priority=previous_priority.value,
                    new_priority=new_priority.value,
                )
            )

        logger.info(f"Ticket {ticket_id}: prioridade {previous_priority.value} → {new_priority.value}")
        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))


# =============================================================================
# Comunicação
# =============================================================================

class AddInternalNoteService:
    """Use Case: Acrescentar nota interna (log append-only)."""

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, input_dto: AddInternalNoteInputDTO) -> TicketOutputDTO:
        """
        Raises:
            ValidationError: Se a nota estiver vazia
            EntityNotFoundError: Se ticket não existe
        """
        if input_dto.note is not None and not isinstance(input_dto.note, str):
            raise ValidationError("Nota deve ser texto", field="note")
        if not input_dto.note or not input_dto.note.strip():
            raise ValidationError("Nota não pode ser vazia", field="note")

        with self.uow:
            ticket = load_ticket(self.ticket_repo, input_dto.ticket_id)
            ticket = ticket.add_internal_note(
                input_dto.author_id,
                input_dto.author_name,
                input_dto.note,
            )
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                InternalNoteAddedEvent(
                    aggregate_id=ticket.id,
                    author_id=input_dto.author_id,
                    author_name=input_dto.author_name,
                )
            )

        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket.id))


class RecordResponseService:
    """Use Case: Registrar resposta da equipe ao usuário."""

    def __init__(self, ticket_repo: TicketRepository, uow: UnitOfWork):
        self.ticket_repo = ticket_repo
        self.uow = uow

    def execute(self, ticket_id: str) -> TicketOutputDTO:
        with self.uow:
            ticket = load_ticket(self.ticket_repo, ticket_id)
            first_response = ticket.first_response_at is None
            ticket = ticket.record_response()
            self.ticket_repo.save(ticket)

            self.uow.publish_event(
                TicketResponseRecordedEvent(
                    aggregate_id=ticket.id,
                    response_count=ticket.response_count,
                    first_response=first_response,
                )
            )

        return TicketOutputDTO.from_entity(load_ticket(self.ticket_repo, ticket_id))
