"""
Data Transfer Objects (DTOs) do Domínio de Denúncias.

Tipos de DTOs:
- Input DTOs: dados de entrada vindos da camada de apresentação
- Output DTOs: dados prontos para renderização/serialização JSON
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .entities import ReportEntity


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class SubmitReportInputDTO:
    """
    DTO de entrada para registrar denúncia.

    Attributes:
        user_id: Usuário que denuncia
        type: Alvo ("product" ou "seller")
        reason: Motivo da lista fixa
        documents: URLs de documentos de evidência
        photos: URLs de fotos de evidência
    """

    user_id: str
    type: str
    reason: str
    description: Optional[str] = None
    issue_report: Optional[str] = None
    additional_details: Optional[str] = None
    documents: tuple = field(default_factory=tuple)
    photos: tuple = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "type": self.type,
            "reason": self.reason,
            "description": self.description,
            "issue_report": self.issue_report,
            "additional_details": self.additional_details,
            "documents": list(self.documents),
            "photos": list(self.photos),
        }


@dataclass(frozen=True)
class AssignReportInputDTO:
    """DTO de entrada para atribuir denúncia."""

    report_id: str
    staff_id: str
    staff_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
        }


@dataclass(frozen=True)
class UpdateReportStatusInputDTO:
    """
    DTO de entrada para alterar status de denúncia.

    Attributes:
        report_id: ID da denúncia
        status: Novo status (valor canônico ou alias legado)
        notes: Notas opcionais da equipe
    """

    report_id: str
    status: str
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "status": self.status,
            "notes": self.notes,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class ReportOutputDTO:
    """DTO de saída completo de uma denúncia."""

    id: str
    user_id: str
    type: str
    type_label: str
    reason: str
    description: Optional[str]
    issue_report: Optional[str]
    additional_details: Optional[str]
    documents: List[str]
    photos: List[str]
    status: str
    status_label: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    admin_notes: Optional[str]
    resolution_details: Optional[str]
    assigned_to: Optional[str]
    assigned_to_name: Optional[str]
    assigned_at: Optional[datetime]
    is_valid: bool
    total_evidence_count: int

    @classmethod
    def from_entity(cls, entity: ReportEntity) -> "ReportOutputDTO":
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            type=entity.type.value if entity.type else "",
            type_label=entity.type.display_name if entity.type else "",
            reason=entity.reason,
            description=entity.description,
            issue_report=entity.issue_report,
            additional_details=entity.additional_details,
            documents=list(entity.documents),
            photos=list(entity.photos),
            status=entity.status.value,
            status_label=entity.status.display_name,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            admin_notes=entity.admin_notes,
            resolution_details=entity.resolution_details,
            assigned_to=entity.assigned_to,
            assigned_to_name=entity.assigned_to_name,
            assigned_at=entity.assigned_at,
            is_valid=entity.is_valid,
            total_evidence_count=entity.total_evidence_count,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "type": self.type,
            "type_label": self.type_label,
            "reason": self.reason,
            "description": self.description,
            "issue_report": self.issue_report,
            "additional_details": self.additional_details,
            "documents": list(self.documents),
            "photos": list(self.photos),
            "status": self.status,
            "status_label": self.status_label,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
            "admin_notes": self.admin_notes,
            "resolution_details": self.resolution_details,
            "assigned_to": self.assigned_to,
            "assigned_to_name": self.assigned_to_name,
            "assigned_at": _iso(self.assigned_at),
            "is_valid": self.is_valid,
            "total_evidence_count": self.total_evidence_count,
        }
