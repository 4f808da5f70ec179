"""
Testes Unitários para Use Cases do Domínio de Tickets.

Estratégia de Teste:
- Repositório real sobre InMemoryDocumentStore
- InMemoryUnitOfWork para capturar eventos publicados
- Testa orquestração, eventos e erros

Coverage:
- Abertura, consultas e busca
- Atribuição, desatribuição e escalonamento
- Status (individual e em lote), prioridade
- Notas internas e respostas
- Estatísticas
"""

import logging
from datetime import timedelta

import pytest

from src.core.shared.exceptions import EntityNotFoundError, ValidationError
from src.core.shared.timestamps import utc_now
from src.core.tickets.dtos import (
    AddInternalNoteInputDTO,
    AssignTicketInputDTO,
    EscalateTicketInputDTO,
    SubmitTicketInputDTO,
)
from src.core.tickets.entities import TicketStatus
from src.core.tickets.events import (
    InternalNoteAddedEvent,
    TicketAssignedEvent,
    TicketEscalatedEvent,
    TicketPriorityChangedEvent,
    TicketResponseRecordedEvent,
    TicketStatusChangedEvent,
    TicketSubmittedEvent,
    TicketUnassignedEvent,
)
from src.core.tickets.ports import TICKETS_COLLECTION
from src.core.tickets.use_cases import (
    AddInternalNoteService,
    AssignTicketService,
    BulkUpdateTicketStatusService,
    EscalateTicketService,
    GetTicketService,
    ListEscalatedTicketsService,
    ListTicketsService,
    RecordResponseService,
    SearchTicketsService,
    SubmitTicketService,
    TicketStatsService,
    UnassignTicketService,
    UpdateTicketPriorityService,
    UpdateTicketStatusService,
)


def submit_input(**overrides) -> SubmitTicketInputDTO:
    data = dict(
        full_name="Ana Souza",
        email="ana@example.com",
        issue_type="Technical Issue",
        description="App fecha ao abrir o carrinho",
    )
    data.update(overrides)
    return SubmitTicketInputDTO(**data)


@pytest.fixture
def submit(ticket_repo, uow):
    """Abre tickets pelo use case."""
    service = SubmitTicketService(ticket_repo, uow)
    return lambda **overrides: service.execute(submit_input(**overrides))


@pytest.fixture
def ticket(submit):
    return submit()


class TestSubmitTicketService:
    """Testes para SubmitTicketService."""

    def test_abrir_ticket(self, submit, uow):
        output = submit(attachments=("https://cdn/print.png",))

        assert output.id
        assert output.status == "pending"
        assert output.priority == "high"
        assert output.attachments == ["https://cdn/print.png"]
        assert output.current_handler is None

        event = uow.published_events[0]
        assert isinstance(event, TicketSubmittedEvent)
        assert event.priority == "high"
        assert event.email == "ana@example.com"

    def test_pagamento_nasce_urgente(self, submit):
        assert submit(issue_type="Payment Issue").priority == "urgent"

    def test_prioridade_informada(self, submit):
        assert submit(priority="medium").priority == "normal"

    def test_prioridade_desconhecida(self, submit):
        with pytest.raises(ValidationError) as exc_info:
            submit(priority="critical")

        assert exc_info.value.field == "priority"

    def test_email_obrigatorio(self, submit, store):
        with pytest.raises(ValidationError) as exc_info:
            submit(email="")

        assert exc_info.value.field == "email"
        assert store.count(TICKETS_COLLECTION) == 0

    def test_date_time_em_iso(self, submit):
        output = submit(date_time="2024-02-28T09:30:00Z")

        assert output.date_time.day == 28
        assert output.date_time.hour == 9


class TestTicketQueries:
    """Testes para consultas e busca."""

    def test_listar_por_status_com_valor_legado(self, store, ticket_repo):
        legacy_id = store.create(TICKETS_COLLECTION, {"fullName": "Bia", "status": "open"})
        store.create(TICKETS_COLLECTION, {"fullName": "Caio", "status": "closed"})

        pending = ListTicketsService(ticket_repo).execute(status="pending")

        assert [t.id for t in pending] == [legacy_id]

    def test_listar_status_desconhecido(self, ticket_repo):
        with pytest.raises(ValidationError):
            ListTicketsService(ticket_repo).execute(status="archived")

    def test_listar_por_responsavel(self, ticket_repo, uow, ticket, submit):
        submit(full_name="Outro")
        AssignTicketService(ticket_repo, uow).execute(
            AssignTicketInputDTO(ticket_id=ticket.id, staff_id="staff-1")
        )

        mine = ListTicketsService(ticket_repo).execute(assignee_id="staff-1")

        assert [t.id for t in mine] == [ticket.id]

    def test_listar_por_status_e_responsavel(self, ticket_repo, uow, ticket, submit):
        other = submit(full_name="Outro")
        assign = AssignTicketService(ticket_repo, uow)
        assign.execute(AssignTicketInputDTO(ticket_id=ticket.id, staff_id="staff-1"))
        assign.execute(AssignTicketInputDTO(ticket_id=other.id, staff_id="staff-2"))

        mine = ListTicketsService(ticket_repo).execute(status="assigned", assignee_id="staff-1")
        pending = ListTicketsService(ticket_repo).execute(status="pending", assignee_id="staff-1")

        assert [t.id for t in mine] == [ticket.id]
        assert pending == []

    def test_listar_escalonados_mais_recente_primeiro(self, store, ticket_repo):
        old_id = store.create(TICKETS_COLLECTION, {
            "status": "escalated",
            "escalatedAt": "2024-03-01T10:00:00Z",
        })
        new_id = store.create(TICKETS_COLLECTION, {
            "status": "escalated",
            "escalatedAt": "2024-03-02T10:00:00Z",
        })
        store.create(TICKETS_COLLECTION, {"status": "assigned"})

        escalated = ListEscalatedTicketsService(ticket_repo).execute()

        assert [t.id for t in escalated] == [new_id, old_id]

    def test_busca_sem_diferenciar_maiusculas(self, ticket_repo, submit):
        ana = submit()
        bruno = submit(full_name="Bruno Lima", email="bruno@example.com", description="Pix recusado")

        search = SearchTicketsService(ticket_repo)

        assert [t.id for t in search.execute("ANA@")] == [ana.id]
        assert [t.id for t in search.execute("bruno lima")] == [bruno.id]
        assert [t.id for t in search.execute("pix")] == [bruno.id]
        assert search.execute("inexistente") == []

    def test_busca_vazia_devolve_todos(self, ticket_repo, submit):
        submit()
        submit()

        assert len(SearchTicketsService(ticket_repo).execute("  ")) == 2

    def test_obter_inexistente(self, ticket_repo):
        with pytest.raises(EntityNotFoundError) as exc_info:
            GetTicketService(ticket_repo).execute("nao-existe")

        assert exc_info.value.entity_type == "SupportTicket"


class TestAssignmentAndEscalation:
    """Testes para atribuição e escalonamento."""

    def test_atribuir(self, ticket_repo, uow, ticket):
        output = AssignTicketService(ticket_repo, uow).execute(
            AssignTicketInputDTO(ticket_id=ticket.id, staff_id="staff-1", staff_name="Maria")
        )

        assert output.status == "assigned"
        assert output.current_handler == {"uid": "staff-1", "name": "Maria", "type": "support"}
        assert isinstance(uow.published_events[-1], TicketAssignedEvent)

    def test_atribuir_sem_suporte(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError) as exc_info:
            AssignTicketService(ticket_repo, uow).execute(
                AssignTicketInputDTO(ticket_id=ticket.id, staff_id="")
            )

        assert exc_info.value.field == "staff_id"

    def test_desatribuir_volta_para_pending(self, ticket_repo, uow, ticket):
        AssignTicketService(ticket_repo, uow).execute(
            AssignTicketInputDTO(ticket_id=ticket.id, staff_id="staff-1")
        )

        output = UnassignTicketService(ticket_repo, uow).execute(ticket.id)

        assert output.status == "pending"
        assert output.assigned_to is None
        assert output.assigned_at is None

        event = uow.published_events[-1]
        assert isinstance(event, TicketUnassignedEvent)
        assert event.previous_staff_id == "staff-1"

    def test_escalonar_pagamento(self, ticket_repo, uow, submit):
        ticket = submit(issue_type="Payment Issue")
        AssignTicketService(ticket_repo, uow).execute(
            AssignTicketInputDTO(ticket_id=ticket.id, staff_id="staff-1")
        )

        output = EscalateTicketService(ticket_repo, uow).execute(
            EscalateTicketInputDTO(
                ticket_id=ticket.id,
                developer_id="dev1",
                developer_name="Dev One",
                reason="fraude suspeita",
            )
        )

        assert output.priority == "urgent"
        assert output.status == "escalated"
        assert output.is_escalated
        assert output.assigned_to == "staff-1"
        assert output.current_handler == {"uid": "dev1", "name": "Dev One", "type": "developer"}

        event = uow.published_events[-1]
        assert isinstance(event, TicketEscalatedEvent)
        assert event.reason == "fraude suspeita"

    def test_escalonar_sem_desenvolvedor(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError):
            EscalateTicketService(ticket_repo, uow).execute(
                EscalateTicketInputDTO(ticket_id=ticket.id, developer_id="")
            )

    def test_escalonar_inexistente(self, ticket_repo, uow):
        with pytest.raises(EntityNotFoundError):
            EscalateTicketService(ticket_repo, uow).execute(
                EscalateTicketInputDTO(ticket_id="nao-existe", developer_id="dev1")
            )


class TestStatusAndPriority:
    """Testes para status e prioridade."""

    def test_resolver(self, ticket_repo, uow, ticket):
        output = UpdateTicketStatusService(ticket_repo, uow).execute(ticket.id, "resolved")

        assert output.status == "resolved"
        assert output.resolved_at is not None
        assert output.is_resolved
        assert not output.is_overdue

        event = uow.published_events[-1]
        assert isinstance(event, TicketStatusChangedEvent)
        assert event.previous_status == "pending"
        assert event.backward is False

    def test_reabrir_fechado_e_permitido_com_aviso(self, ticket_repo, uow, ticket, caplog):
        service = UpdateTicketStatusService(ticket_repo, uow)
        service.execute(ticket.id, "closed")

        with caplog.at_level(logging.WARNING, logger="src.core.tickets.use_cases"):
            output = service.execute(ticket.id, "pending")

        assert output.status == "pending"
        assert output.closed_at is not None
        assert uow.published_events[-1].backward is True
        assert any("para trás" in record.getMessage() for record in caplog.records)

    def test_alias_na_entrada(self, ticket_repo, uow, ticket):
        output = UpdateTicketStatusService(ticket_repo, uow).execute(ticket.id, "inprogress")

        assert output.status == "in_progress"

    def test_status_desconhecido_nao_grava(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError):
            UpdateTicketStatusService(ticket_repo, uow).execute(ticket.id, "archived")

        assert GetTicketService(ticket_repo).execute(ticket.id).status == "pending"

    def test_lote(self, ticket_repo, uow, submit):
        ids = [submit().id, submit().id]

        outputs = BulkUpdateTicketStatusService(ticket_repo, uow).execute(ids, "closed")

        assert [o.status for o in outputs] == ["closed", "closed"]
        assert uow.events_by_type() == {
            "TicketSubmittedEvent": 2,
            "TicketStatusChangedEvent": 2,
        }

    def test_lote_com_id_inexistente_nao_grava_nada(self, ticket_repo, uow, ticket):
        with pytest.raises(EntityNotFoundError):
            BulkUpdateTicketStatusService(ticket_repo, uow).execute(
                [ticket.id, "nao-existe"], "closed"
            )

        assert GetTicketService(ticket_repo).execute(ticket.id).status == "pending"
        assert uow.rolled_back

    def test_lote_vazio(self, ticket_repo, uow):
        with pytest.raises(ValidationError) as exc_info:
            BulkUpdateTicketStatusService(ticket_repo, uow).execute([], "closed")

        assert exc_info.value.field == "ticket_ids"

    def test_alterar_prioridade(self, ticket_repo, uow, ticket):
        output = UpdateTicketPriorityService(ticket_repo, uow).execute(ticket.id, "low")

        assert output.priority == "low"

        event = uow.published_events[-1]
        assert isinstance(event, TicketPriorityChangedEvent)
        assert event.previous_priority == "high"
        assert event.new_priority == "low"

    def test_prioridade_none_recalcula_automatica(self, ticket_repo, uow, ticket):
        service = UpdateTicketPriorityService(ticket_repo, uow)
        service.execute(ticket.id, "low")

        output = service.execute(ticket.id, None)

        assert output.priority == "high"

    def test_prioridade_desconhecida(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError):
            UpdateTicketPriorityService(ticket_repo, uow).execute(ticket.id, "critical")


class TestCommunication:
    """Testes para notas internas e respostas."""

    def test_adicionar_nota(self, ticket_repo, uow, ticket):
        service = AddInternalNoteService(ticket_repo, uow)
        service.execute(AddInternalNoteInputDTO(
            ticket_id=ticket.id, author_id="staff-1", author_name="Maria", note="Primeira",
        ))

        output = service.execute(AddInternalNoteInputDTO(
            ticket_id=ticket.id, author_id="dev1", author_name=None, note="Segunda",
        ))

        assert [n.note for n in output.internal_notes] == ["Primeira", "Segunda"]
        assert output.internal_notes[0].author == "staff-1"
        assert isinstance(uow.published_events[-1], InternalNoteAddedEvent)

    def test_nota_em_branco(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError) as exc_info:
            AddInternalNoteService(ticket_repo, uow).execute(AddInternalNoteInputDTO(
                ticket_id=ticket.id, author_id="staff-1", author_name=None, note="   ",
            ))

        assert exc_info.value.field == "note"

    def test_nota_que_nao_e_texto(self, ticket_repo, uow, ticket):
        with pytest.raises(ValidationError) as exc_info:
            AddInternalNoteService(ticket_repo, uow).execute(AddInternalNoteInputDTO(
                ticket_id=ticket.id, author_id="staff-1", author_name=None, note=5,
            ))

        assert exc_info.value.field == "note"
        assert uow.published_events == []

    def test_registrar_respostas(self, ticket_repo, uow, ticket):
        service = RecordResponseService(ticket_repo, uow)

        first = service.execute(ticket.id)
        first_event = uow.published_events[-1]
        second = service.execute(ticket.id)
        second_event = uow.published_events[-1]

        assert second.response_count == 2
        assert second.first_response_at == first.first_response_at
        assert second.last_response_at >= first.last_response_at

        assert isinstance(second_event, TicketResponseRecordedEvent)
        assert first_event.first_response is True
        assert second_event.first_response is False
        assert second_event.response_count == 2


class TestTicketStatsService:
    """Testes para estatísticas."""

    def test_estatisticas(self, store, ticket_repo, uow, submit):
        long_ago = (utc_now() - timedelta(hours=30)).isoformat()
        store.create(TICKETS_COLLECTION, {"status": "pending", "createdAt": long_ago})

        assigned = submit()
        AssignTicketService(ticket_repo, uow).execute(
            AssignTicketInputDTO(ticket_id=assigned.id, staff_id="staff-1")
        )
        escalated = submit()
        EscalateTicketService(ticket_repo, uow).execute(
            EscalateTicketInputDTO(ticket_id=escalated.id, developer_id="dev1")
        )

        stats = TicketStatsService(ticket_repo).execute()

        assert stats["total"] == 3
        assert stats["by_status"][TicketStatus.PENDING.value] == 1
        assert stats["by_status"]["assigned"] == 1
        assert stats["by_status"]["escalated"] == 1
        assert stats["by_status"]["closed"] == 0
        assert stats["assigned"] == 1
        assert stats["unassigned"] == 2
        assert stats["escalated"] == 1
        assert stats["overdue"] == 1
        assert stats["avg_response_time_hours"] == 0
        assert stats["avg_resolution_time_hours"] == 0
