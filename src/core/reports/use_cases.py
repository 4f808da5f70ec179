"""
Use Cases (Application Services) do Domínio de Denúncias.

Use Cases implementados:
- SubmitReportService: Registra denúncia validada
- ListReportsService: Lista (todas / por status / por responsável)
- GetReportService: Obtém denúncia específica
- AssignReportService: Atribui denúncia a membro da equipe
- UnassignReportService: Remove atribuição (status preservado)
- UpdateReportStatusService: Altera status com notas opcionais
- ReportStatsService: Estatísticas agregadas

Toda mutação segue o mesmo roteiro: ler o estado atual do store,
aplicar a transição pura, regravar o documento completo e devolver
a entidade relida do store.
"""

import logging
from typing import List, Optional

from src.core.metrics.calculators import ReportStatsCalculator
from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    EntityNotFoundError,
    ReportValidationError,
    ValidationError,
)
from src.core.shared.timestamps import utc_now

from .ports import ReportRepository
from .entities import ReportEntity, ReportStatus, ReportType
from .dtos import (
    SubmitReportInputDTO,
    AssignReportInputDTO,
    UpdateReportStatusInputDTO,
    ReportOutputDTO,
)
from .events import (
    ReportSubmittedEvent,
    ReportAssignedEvent,
    ReportUnassignedEvent,
    ReportStatusChangedEvent,
)

logger = logging.getLogger(__name__)


def load_report(report_repo: ReportRepository, report_id: str) -> ReportEntity:
    """
    Busca denúncia ou lança EntityNotFoundError.

    Raises:
        EntityNotFoundError: Se a denúncia não existe
    """
    report = report_repo.get_by_id(report_id)
    if not report:
        raise EntityNotFoundError(
            f"Denúncia {report_id} não encontrada",
            entity_type="Report",
            entity_id=report_id,
        )
    return report


def parse_report_status(raw: str) -> ReportStatus:
    """Converte status informado pelo chamador (estrito)."""
    status = ReportStatus.lookup(raw)
    if status is None:
        raise ValidationError(f"Status inválido: {raw}", field="status")
    return status


class SubmitReportService:
    """
    Use Case: Registrar denúncia.

    Fluxo:
    1. Montar entidade a partir do DTO
    2. Validar (todas as mensagens de uma vez)
    3. Persistir com status PENDING
    4. Disparar evento ReportSubmitted

    Example:
        service = SubmitReportService(report_repo, uow)
        output = service.execute(SubmitReportInputDTO(
            user_id="user-1",
            type="seller",
            reason="No Delivery / Ghost Seller",
            documents=("https://cdn/doc.pdf",),
            photos=("https://cdn/photo.jpg",),
        ))
    """

    def __init__(self, report_repo: ReportRepository, uow: UnitOfWork):
        self.report_repo = report_repo
        self.uow = uow

    def execute(self, input_dto: SubmitReportInputDTO) -> ReportOutputDTO:
        """
        Raises:
            ReportValidationError: Se a denúncia não passa na validação
        """
        now = utc_now()
        report = ReportEntity(
            user_id=input_dto.user_id,
            type=ReportType.from_string(input_dto.type) if input_dto.type else None,
            reason=input_dto.reason,
            description=input_dto.description,
            issue_report=input_dto.issue_report,
            additional_details=input_dto.additional_details,
            documents=tuple(input_dto.documents),
            photos=tuple(input_dto.photos),
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
        )

        errors = report.validate()
        if errors:
            logger.info(f"Denúncia rejeitada na validação: {errors}")
            raise ReportValidationError(errors)

        with self.uow:
            report = self.report_repo.add(report)
            self.uow.publish_event(
                ReportSubmittedEvent(
                    aggregate_id=report.id,
                    user_id=report.user_id,
                    report_type=report.type.value,
                    reason=report.reason,
                )
            )

        logger.info(f"Denúncia registrada: {report.id}")
        return ReportOutputDTO.from_entity(load_report(self.report_repo, report.id))


class ListReportsService:
    """
    Use Case: Listar denúncias, mais recentes primeiro.

    Não usa UoW pois é operação de leitura.
    """

    def __init__(self, report_repo: ReportRepository):
        self.report_repo = report_repo

    def execute(
        self,
        status: Optional[str] = None,
        assignee_id: Optional[str] = None,
    ) -> List[ReportOutputDTO]:
        """
        Args:
            status: Filtrar por status (valor canônico ou alias)
            assignee_id: Filtrar por responsável

        Raises:
            ValidationError: Se status desconhecido
        """
        if status:
            reports = self.report_repo.list_by_status(parse_report_status(status))
        elif assignee_id:
            reports = self.report_repo.list_by_assignee(assignee_id)
        else:
            reports = self.report_repo.list_all()

        if status and assignee_id:
            reports = [r for r in reports if r.assigned_to == assignee_id]

        return [ReportOutputDTO.from_entity(report) for report in reports]


class GetReportService:
    """Use Case: Obter denúncia por ID."""

    def __init__(self, report_repo: ReportRepository):
        self.report_repo = report_repo

    def execute(self, report_id: str) -> ReportOutputDTO:
        return ReportOutputDTO.from_entity(load_report(self.report_repo, report_id))


class AssignReportService:
    """
    Use Case: Atribuir denúncia.

    Reatribuir sobrescreve o responsável anterior. Status não muda.
    """

    def __init__(self, report_repo: ReportRepository, uow: UnitOfWork):
        self.report_repo = report_repo
        self.uow = uow

    def execute(self, input_dto: AssignReportInputDTO) -> ReportOutputDTO:
        """
        Raises:
            ValidationError: Se staff_id vazio
            EntityNotFoundError: Se denúncia não existe
        """
        if not input_dto.staff_id:
            raise ValidationError("ID do responsável é obrigatório", field="staff_id")

        with self.uow:
            report = load_report(self.report_repo, input_dto.report_id)
            report = report.assign_to(input_dto.staff_id, input_dto.staff_name)
            self.report_repo.save(report)

            self.uow.publish_event(
                ReportAssignedEvent(
                    aggregate_id=report.id,
                    staff_id=input_dto.staff_id,
                    staff_name=input_dto.staff_name,
                )
            )

        logger.info(f"Denúncia {report.id} atribuída a {input_dto.staff_id}")
        return ReportOutputDTO.from_entity(load_report(self.report_repo, report.id))


class UnassignReportService:
    """
    Use Case: Remover atribuição de denúncia.

    Diferente dos tickets, o status de revisão é preservado.
    """

    def __init__(self, report_repo: ReportRepository, uow: UnitOfWork):
        self.report_repo = report_repo
        self.uow = uow

    def execute(self, report_id: str) -> ReportOutputDTO:
        with self.uow:
            report = load_report(self.report_repo, report_id)
            previous_staff_id = report.assigned_to
            report = report.unassign()
            self.report_repo.save(report)

            self.uow.publish_event(
                ReportUnassignedEvent(
                    aggregate_id=report.id,
                    previous_staff_id=previous_staff_id,
                )
            )

        logger.info(f"Atribuição removida da denúncia {report_id}")
        return ReportOutputDTO.from_entity(load_report(self.report_repo, report_id))


class UpdateReportStatusService:
    """
    Use Case: Alterar status de revisão.

    A transição nunca é bloqueada. Sair de um estado final
    (APPROVED/REJECTED) gera log de warning e evento com backward=True.
    """

    def __init__(self, report_repo: ReportRepository, uow: UnitOfWork):
        self.report_repo = report_repo
        self.uow = uow

    def execute(self, input_dto: UpdateReportStatusInputDTO) -> ReportOutputDTO:
        """
        Raises:
            ValidationError: Se status desconhecido
            EntityNotFoundError: Se denúncia não existe
        """
        new_status = parse_report_status(input_dto.status)

        with self.uow:
            report = load_report(self.report_repo, input_dto.report_id)
            previous_status = report.status
            backward = previous_status.is_final and new_status != previous_status

            if backward:
                logger.warning(
                    f"Denúncia {report.id} saiu do estado final "
                    f"{previous_status.value} para {new_status.value}"
                )

            report = report.change_status(new_status, input_dto.notes)
            self.report_repo.save(report)

            self.uow.publish_event(
                ReportStatusChangedEvent(
                    aggregate_id=report.id,
                    previous_status=previous_status.value,
                    new_status=new_status.value,
                    backward=backward,
                )
            )

        logger.info(f"Denúncia {report.id}: status {previous_status.value} → {new_status.value}")
        return ReportOutputDTO.from_entity(load_report(self.report_repo, report.id))


class ReportStatsService:
    """Use Case: Estatísticas agregadas de denúncias."""

    def __init__(self, report_repo: ReportRepository):
        self.report_repo = report_repo
        self.calculator = ReportStatsCalculator()

    def execute(self) -> dict:
        return self.calculator.calculate(self.report_repo.list_all()).to_dict()
