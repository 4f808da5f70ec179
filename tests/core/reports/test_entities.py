"""
Testes Unitários para Entidades do Domínio de Denúncias.

Coverage:
- ReportStatus / ReportType: conversão estrita e tolerante (aliases legados)
- ReportEntity.validate(): mensagens e ordem
- Propriedades de evidência
- Transições puras (assign_to, unassign, change_status)
- Mapper: documento ⇄ entidade
"""

from datetime import datetime, timezone

import pytest

from src.core.reports.entities import (
    DEFAULT_APPROVAL_DETAILS,
    OTHER_REASON,
    VALID_REASONS,
    ReportEntity,
    ReportStatus,
    ReportType,
)
from src.core.reports.mappers import ReportDocumentMapper


def make_report(**overrides) -> ReportEntity:
    data = dict(
        user_id="user-1",
        type=ReportType.SELLER,
        reason="No Delivery / Ghost Seller",
        documents=("https://cdn/doc.pdf",),
        photos=("https://cdn/photo.jpg",),
    )
    data.update(overrides)
    return ReportEntity(**data)


class TestReportStatus:
    """Testes para conversão de status."""

    @pytest.mark.parametrize("raw,expected", [
        ("pending", ReportStatus.PENDING),
        ("approved", ReportStatus.APPROVED),
        ("rejected", ReportStatus.REJECTED),
        ("resolved", ReportStatus.APPROVED),
        ("under_review", ReportStatus.PENDING),
        ("underReview", ReportStatus.PENDING),
        ("APPROVED", ReportStatus.APPROVED),
    ])
    def test_aliases(self, raw, expected):
        assert ReportStatus.from_string(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "archived", 42])
    def test_from_string_nunca_falha(self, raw):
        assert ReportStatus.from_string(raw) == ReportStatus.PENDING

    def test_lookup_estrito(self):
        assert ReportStatus.lookup("archived") is None
        assert ReportStatus.lookup("resolved") == ReportStatus.APPROVED

    def test_estados_finais(self):
        assert not ReportStatus.PENDING.is_final
        assert ReportStatus.APPROVED.is_final
        assert ReportStatus.REJECTED.is_final

    def test_display_name(self):
        assert ReportStatus.APPROVED.display_name == "Approved"


class TestReportType:
    """Testes para conversão de tipo."""

    def test_desconhecido_vira_produto(self):
        assert ReportType.from_string("store") == ReportType.PRODUCT
        assert ReportType.from_string(None) == ReportType.PRODUCT

    def test_seller(self):
        assert ReportType.from_string("Seller") == ReportType.SELLER
        assert ReportType.SELLER.display_name == "Seller"


class TestReportValidation:
    """Testes para ReportEntity.validate()."""

    def test_denuncia_valida(self):
        report = make_report()

        assert report.validate() == []
        assert report.is_valid

    @pytest.mark.parametrize("reason", VALID_REASONS[:-1])
    def test_todos_os_motivos_da_lista_sao_aceitos(self, reason):
        assert make_report(reason=reason).is_valid

    def test_sem_documento(self):
        report = make_report(
            documents=(),
            photos=("url",),
            reason="Overpriced or Hidden Charges",
        )

        assert report.validate() == ["Document evidence is required"]

    def test_sem_foto(self):
        assert make_report(photos=()).validate() == ["Image evidence is required"]

    def test_motivo_fora_da_lista(self):
        assert make_report(reason="Bad vibes").validate() == ["Invalid reason selected"]

    def test_motivo_vazio(self):
        assert make_report(reason="  ").validate() == ["Reason is required"]

    def test_other_exige_descricao(self):
        report = make_report(reason=OTHER_REASON, description="   ")

        assert report.validate() == ['Description is required for "Other" reports']

    def test_other_com_descricao(self):
        assert make_report(reason=OTHER_REASON, description="Loja fechou").is_valid

    def test_urls_em_branco(self):
        report = make_report(documents=("ok", " "), photos=("",))

        assert report.validate() == [
            "Evidence file URLs cannot be empty",
            "Evidence photo URLs cannot be empty",
        ]

    def test_todas_as_mensagens_na_ordem(self):
        report = ReportEntity(user_id="", type=None, reason="", documents=(), photos=())

        assert report.validate() == [
            "User ID is required",
            "Report type is required",
            "Reason is required",
            "Document evidence is required",
            "Image evidence is required",
        ]


class TestReportEvidence:
    """Testes para propriedades de evidência."""

    def test_contagem(self):
        report = make_report(documents=("a", "b"), photos=("c",))

        assert report.total_evidence_count == 3
        assert report.has_evidence
        assert report.has_required_evidence

    def test_so_foto(self):
        report = make_report(documents=())

        assert report.has_evidence
        assert not report.has_required_evidence

    def test_all_evidence_urls_ignora_vazias(self):
        report = make_report(documents=("a", ""), photos=("c",))

        assert report.all_evidence_urls == ["a", "c"]

    def test_is_other_type_report(self):
        assert make_report(reason=OTHER_REASON).is_other_type_report
        assert not make_report().is_other_type_report


class TestReportTransitions:
    """Testes para transições puras."""

    def test_assign_nao_altera_status(self, now):
        report = make_report(status=ReportStatus.APPROVED)

        assigned = report.assign_to("staff-1", "Maria", now=now)

        assert assigned.assigned_to == "staff-1"
        assert assigned.assigned_to_name == "Maria"
        assert assigned.assigned_at == now
        assert assigned.status == ReportStatus.APPROVED
        assert report.assigned_to is None  # original intacto

    def test_assign_seguido_de_unassign_preserva_status(self, now):
        report = make_report(status=ReportStatus.REJECTED)

        result = report.assign_to("staff-1", "Maria", now=now).unassign(now=now)

        assert result.assigned_to is None
        assert result.assigned_to_name is None
        assert result.assigned_at is None
        assert result.status == ReportStatus.REJECTED

    def test_aprovar_sem_notas_usa_texto_padrao(self, now):
        approved = make_report().change_status(ReportStatus.APPROVED, now=now)

        assert approved.status == ReportStatus.APPROVED
        assert approved.resolution_details == DEFAULT_APPROVAL_DETAILS
        assert approved.admin_notes is None
        assert approved.updated_at == now

    def test_aprovar_com_notas(self):
        approved = make_report().change_status(ReportStatus.APPROVED, "Evidência conferida")

        assert approved.admin_notes == "Evidência conferida"
        assert approved.resolution_details == "Evidência conferida"

    def test_rejeitar_preserva_resolution_details(self):
        report = make_report(resolution_details="anterior")

        rejected = report.change_status(ReportStatus.REJECTED, "Sem provas")

        assert rejected.admin_notes == "Sem provas"
        assert rejected.resolution_details == "anterior"

    def test_notas_em_branco_nao_sobrescrevem(self):
        report = make_report(admin_notes="nota antiga")

        assert report.change_status(ReportStatus.PENDING, "  ").admin_notes == "nota antiga"

    def test_copy_with_aceita_none(self):
        report = make_report(assigned_to="staff-1")

        assert report.copy_with(assigned_to=None).assigned_to is None

    def test_copy_with_campo_invalido(self):
        with pytest.raises(TypeError):
            make_report().copy_with(nao_existe=1)


class TestReportDocumentMapper:
    """Testes para o mapper de documentos."""

    def test_documento_usa_nomes_do_store(self, now):
        report = make_report(created_at=now).assign_to("staff-1", "Maria", now=now)

        document = ReportDocumentMapper.to_document(report)

        assert document["userId"] == "user-1"
        assert document["type"] == "seller"
        assert document["evidenceFiles"] == ["https://cdn/doc.pdf"]
        assert document["evidencePhotos"] == ["https://cdn/photo.jpg"]
        assert document["assignedTo"] == "staff-1"
        assert document["createdAt"] == now
        assert "id" not in document

    def test_ida_e_volta(self, now):
        report = make_report(
            id="r1",
            created_at=now,
            updated_at=now,
            status=ReportStatus.APPROVED,
            admin_notes="ok",
            resolution_details="ok",
        )

        rebuilt = ReportDocumentMapper.to_entity("r1", ReportDocumentMapper.to_document(report))

        assert rebuilt == report

    def test_documento_legado(self):
        rebuilt = ReportDocumentMapper.to_entity("r1", {
            "userId": "u1",
            "type": "unknown",
            "reason": "No Delivery / Ghost Seller",
            "status": "resolved",
            "createdAt": "2024-03-01T10:00:00Z",
        })

        assert rebuilt.type == ReportType.PRODUCT
        assert rebuilt.status == ReportStatus.APPROVED
        assert rebuilt.created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
        assert rebuilt.documents == ()
