"""
Testes Unitários para Use Cases do Domínio de Denúncias.

Estratégia de Teste:
- InMemoryDocumentStore + DocumentReportRepository reais
- InMemoryUnitOfWork para verificar eventos publicados
- Documentos legados gravados direto no store

Coverage:
- SubmitReportService
- ListReportsService / GetReportService
- AssignReportService / UnassignReportService
- UpdateReportStatusService
- ReportStatsService
"""

import logging

import pytest

from src.core.reports.dtos import (
    AssignReportInputDTO,
    SubmitReportInputDTO,
    UpdateReportStatusInputDTO,
)
from src.core.reports.entities import ReportEntity, ReportType
from src.core.reports.events import (
    ReportAssignedEvent,
    ReportStatusChangedEvent,
    ReportSubmittedEvent,
    ReportUnassignedEvent,
)
from src.core.reports.ports import REPORTS_COLLECTION
from src.core.reports.use_cases import (
    AssignReportService,
    GetReportService,
    ListReportsService,
    ReportStatsService,
    SubmitReportService,
    UnassignReportService,
    UpdateReportStatusService,
)
from src.core.shared.exceptions import (
    EntityNotFoundError,
    ReportValidationError,
    ValidationError,
)


def submit_input(**overrides) -> SubmitReportInputDTO:
    data = dict(
        user_id="user-1",
        type="seller",
        reason="No Delivery / Ghost Seller",
        documents=("https://cdn/doc.pdf",),
        photos=("https://cdn/photo.jpg",),
    )
    data.update(overrides)
    return SubmitReportInputDTO(**data)


@pytest.fixture
def sample_report(report_repo):
    """Denúncia pendente já persistida."""
    return report_repo.add(ReportEntity(
        user_id="user-1",
        type=ReportType.PRODUCT,
        reason="Selling Fake or Counterfeit Products",
        documents=("doc",),
        photos=("photo",),
    ))


class TestSubmitReportService:
    """Testes para SubmitReportService."""

    def test_registrar_denuncia_sucesso(self, report_repo, uow):
        output = SubmitReportService(report_repo, uow).execute(submit_input())

        assert output.id
        assert output.status == "pending"
        assert output.type == "seller"
        assert output.is_valid
        assert output.total_evidence_count == 2
        assert output.created_at is not None

        events = uow.published_events
        assert len(events) == 1
        assert isinstance(events[0], ReportSubmittedEvent)
        assert events[0].aggregate_id == output.id

    def test_denuncia_invalida_nao_e_gravada(self, store, report_repo, uow):
        with pytest.raises(ReportValidationError) as exc_info:
            SubmitReportService(report_repo, uow).execute(
                submit_input(documents=(), reason="Overpriced or Hidden Charges")
            )

        assert exc_info.value.errors == ["Document evidence is required"]
        assert store.count(REPORTS_COLLECTION) == 0
        assert uow.published_events == []

    def test_tipo_vazio_e_rejeitado(self, report_repo, uow):
        with pytest.raises(ReportValidationError) as exc_info:
            SubmitReportService(report_repo, uow).execute(submit_input(type=""))

        assert exc_info.value.errors == ["Report type is required"]


class TestListAndGetReports:
    """Testes para consultas."""

    def test_listar_mais_recentes_primeiro(self, store, report_repo):
        old_id = store.create(REPORTS_COLLECTION, {"userId": "u1", "createdAt": "2024-03-01T10:00:00Z"})
        new_id = store.create(REPORTS_COLLECTION, {"userId": "u2", "createdAt": "2024-03-02T10:00:00Z"})

        reports = ListReportsService(report_repo).execute()

        assert [r.id for r in reports] == [new_id, old_id]

    def test_filtrar_por_status_inclui_valores_legados(self, store, report_repo):
        legacy_id = store.create(REPORTS_COLLECTION, {
            "userId": "u1",
            "reason": "No Delivery / Ghost Seller",
            "status": "resolved",
        })
        store.create(REPORTS_COLLECTION, {"userId": "u2", "status": "pending"})

        approved = ListReportsService(report_repo).execute(status="approved")

        assert [r.id for r in approved] == [legacy_id]
        assert approved[0].status == "approved"

    def test_filtrar_por_status_desconhecido(self, report_repo):
        with pytest.raises(ValidationError) as exc_info:
            ListReportsService(report_repo).execute(status="archived")

        assert exc_info.value.field == "status"

    def test_filtrar_por_responsavel(self, report_repo, uow, sample_report):
        AssignReportService(report_repo, uow).execute(
            AssignReportInputDTO(report_id=sample_report.id, staff_id="staff-1")
        )

        mine = ListReportsService(report_repo).execute(assignee_id="staff-1")
        others = ListReportsService(report_repo).execute(assignee_id="staff-2")

        assert [r.id for r in mine] == [sample_report.id]
        assert others == []

    def test_filtrar_por_status_e_responsavel(self, report_repo, uow, sample_report):
        AssignReportService(report_repo, uow).execute(
            AssignReportInputDTO(report_id=sample_report.id, staff_id="staff-1")
        )

        pending = ListReportsService(report_repo).execute(status="pending", assignee_id="staff-1")
        approved = ListReportsService(report_repo).execute(status="approved", assignee_id="staff-1")
        others = ListReportsService(report_repo).execute(status="pending", assignee_id="staff-2")

        assert [r.id for r in pending] == [sample_report.id]
        assert approved == []
        assert others == []

    def test_obter_inexistente(self, report_repo):
        with pytest.raises(EntityNotFoundError):
            GetReportService(report_repo).execute("nao-existe")


class TestAssignment:
    """Testes para atribuição e desatribuição."""

    def test_atribuir(self, report_repo, uow, sample_report):
        output = AssignReportService(report_repo, uow).execute(
            AssignReportInputDTO(report_id=sample_report.id, staff_id="staff-1", staff_name="Maria")
        )

        assert output.assigned_to == "staff-1"
        assert output.assigned_to_name == "Maria"
        assert output.assigned_at is not None
        assert output.status == "pending"
        assert isinstance(uow.published_events[-1], ReportAssignedEvent)

    def test_atribuir_sem_responsavel(self, report_repo, uow, sample_report):
        with pytest.raises(ValidationError):
            AssignReportService(report_repo, uow).execute(
                AssignReportInputDTO(report_id=sample_report.id, staff_id="")
            )

    def test_atribuir_inexistente(self, report_repo, uow):
        with pytest.raises(EntityNotFoundError):
            AssignReportService(report_repo, uow).execute(
                AssignReportInputDTO(report_id="nao-existe", staff_id="staff-1")
            )

        assert uow.rolled_back

    def test_unassign_preserva_status(self, report_repo, uow, sample_report):
        UpdateReportStatusService(report_repo, uow).execute(
            UpdateReportStatusInputDTO(report_id=sample_report.id, status="rejected")
        )
        AssignReportService(report_repo, uow).execute(
            AssignReportInputDTO(report_id=sample_report.id, staff_id="staff-1", staff_name="Maria")
        )

        output = UnassignReportService(report_repo, uow).execute(sample_report.id)

        assert output.assigned_to is None
        assert output.assigned_to_name is None
        assert output.assigned_at is None
        assert output.status == "rejected"

        event = uow.published_events[-1]
        assert isinstance(event, ReportUnassignedEvent)
        assert event.previous_staff_id == "staff-1"


class TestUpdateReportStatusService:
    """Testes para mudança de status."""

    def test_aprovar_sem_notas(self, report_repo, uow, sample_report):
        output = UpdateReportStatusService(report_repo, uow).execute(
            UpdateReportStatusInputDTO(report_id=sample_report.id, status="approved")
        )

        assert output.status == "approved"
        assert output.resolution_details == "Report approved by admin"

        event = uow.published_events[-1]
        assert isinstance(event, ReportStatusChangedEvent)
        assert event.previous_status == "pending"
        assert event.new_status == "approved"
        assert event.backward is False

    def test_alias_legado_na_entrada(self, report_repo, uow, sample_report):
        output = UpdateReportStatusService(report_repo, uow).execute(
            UpdateReportStatusInputDTO(report_id=sample_report.id, status="resolved", notes="Vendedor banido")
        )

        assert output.status == "approved"
        assert output.admin_notes == "Vendedor banido"
        assert output.resolution_details == "Vendedor banido"

    def test_status_desconhecido(self, report_repo, uow, sample_report):
        with pytest.raises(ValidationError):
            UpdateReportStatusService(report_repo, uow).execute(
                UpdateReportStatusInputDTO(report_id=sample_report.id, status="archived")
            )

        assert GetReportService(report_repo).execute(sample_report.id).status == "pending"

    def test_reabrir_decisao_final_e_permitido_com_aviso(self, report_repo, uow, sample_report, caplog):
        service = UpdateReportStatusService(report_repo, uow)
        service.execute(UpdateReportStatusInputDTO(report_id=sample_report.id, status="approved"))

        with caplog.at_level(logging.WARNING, logger="src.core.reports.use_cases"):
            output = service.execute(
                UpdateReportStatusInputDTO(report_id=sample_report.id, status="pending")
            )

        assert output.status == "pending"
        assert uow.published_events[-1].backward is True
        assert any(record.levelno == logging.WARNING for record in caplog.records)


class TestReportStatsService:
    """Testes para estatísticas."""

    def test_estatisticas(self, report_repo, uow, sample_report):
        SubmitReportService(report_repo, uow).execute(submit_input())
        AssignReportService(report_repo, uow).execute(
            AssignReportInputDTO(report_id=sample_report.id, staff_id="staff-1")
        )
        UpdateReportStatusService(report_repo, uow).execute(
            UpdateReportStatusInputDTO(report_id=sample_report.id, status="rejected")
        )

        stats = ReportStatsService(report_repo).execute()

        assert stats == {
            "total": 2,
            "by_status": {"pending": 1, "approved": 0, "rejected": 1},
            "assigned": 1,
            "unassigned": 1,
        }
