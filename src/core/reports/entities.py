"""
Entidades do Domínio de Denúncias (Reports).

Uma denúncia é enviada por um usuário do app contra um produto ou
vendedor e só é acionável quando traz evidência dupla (documento +
foto). A equipe do back office atribui, desatribui e decide o status.

Entidades:
- ReportEntity: Valor imutável da denúncia + validador
- ReportType: Alvo da denúncia (produto ou vendedor)
- ReportStatus: Estados da revisão (pendente, aprovada, rejeitada)

Regras de Negócio Encapsuladas:
- Motivo precisa pertencer à lista fixa VALID_REASONS
- Motivo "Other" exige descrição preenchida
- Documento E foto são obrigatórios, sem URLs em branco
- Normalização centralizada de valores legados de status
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.core.shared.timestamps import utc_now


# =============================================================================
# Motivos
# =============================================================================

OTHER_REASON = "Other (Please describe below)"

VALID_REASONS: Tuple[str, ...] = (
    "Selling Fake or Counterfeit Products",
    "Misleading Business or Contact Information",
    "Used Expired or Unsafe Products",
    "Unprofessional or Inappropriate Behavior",
    "Fake or Incorrect Business Location",
    "Overpriced or Hidden Charges",
    "No Delivery / Ghost Seller",
    OTHER_REASON,
)

DEFAULT_APPROVAL_DETAILS = "Report approved by admin"


# =============================================================================
# Enums
# =============================================================================

def _normalize_key(value) -> str:
    return str(value).strip().lower().replace("-", "_").replace(" ", "_")


class ReportType(str, Enum):
    """
    Alvo da denúncia.

    Valores desconhecidos ou ausentes são normalizados para PRODUCT.
    """

    PRODUCT = "product"
    SELLER = "seller"

    @classmethod
    def lookup(cls, value) -> Optional["ReportType"]:
        """Conversão estrita: None para valores não reconhecidos."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        return _REPORT_TYPE_ALIASES.get(_normalize_key(value))

    @classmethod
    def from_string(cls, value) -> "ReportType":
        """Conversão tolerante: nunca falha, default PRODUCT."""
        return cls.lookup(value) or cls.PRODUCT

    @property
    def display_name(self) -> str:
        return REPORT_TYPE_DISPLAY[self]["label"]


class ReportStatus(str, Enum):
    """
    Estados de revisão de uma denúncia.

    Não há ordem entre os estados: PENDING é o único não-terminal,
    APPROVED e REJECTED são finais.

    Valores legados:
        "resolved" → APPROVED
        "under_review" / "underReview" → PENDING
        qualquer outro valor ou ausência → PENDING
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def lookup(cls, value) -> Optional["ReportStatus"]:
        """
        Conversão estrita, usada para entrada do chamador.

        Returns:
            ReportStatus correspondente ou None se desconhecido
        """
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        return _REPORT_STATUS_ALIASES.get(_normalize_key(value))

    @classmethod
    def from_string(cls, value) -> "ReportStatus":
        """
        Conversão tolerante, usada para valores lidos do store.

        Nunca lança exceção: tudo que não é reconhecido vira PENDING.
        """
        return cls.lookup(value) or cls.PENDING

    @property
    def is_final(self) -> bool:
        return self in (ReportStatus.APPROVED, ReportStatus.REJECTED)

    @property
    def display_name(self) -> str:
        return REPORT_STATUS_DISPLAY[self]["label"]


# Tabelas de aliases: um novo valor legado é uma linha a mais aqui.
_REPORT_TYPE_ALIASES: Dict[str, ReportType] = {
    "product": ReportType.PRODUCT,
    "seller": ReportType.SELLER,
}

_REPORT_STATUS_ALIASES: Dict[str, ReportStatus] = {
    "pending": ReportStatus.PENDING,
    "under_review": ReportStatus.PENDING,
    "underreview": ReportStatus.PENDING,
    "approved": ReportStatus.APPROVED,
    "resolved": ReportStatus.APPROVED,
    "rejected": ReportStatus.REJECTED,
}

# Metadados de apresentação (não usados pelas regras de workflow)
REPORT_TYPE_DISPLAY: Dict[ReportType, Dict[str, str]] = {
    ReportType.PRODUCT: {"label": "Product", "icon": "📦"},
    ReportType.SELLER: {"label": "Seller", "icon": "🏪"},
}

REPORT_STATUS_DISPLAY: Dict[ReportStatus, Dict[str, str]] = {
    ReportStatus.PENDING: {"label": "Pending", "color": "bg-yellow-100 text-yellow-800"},
    ReportStatus.APPROVED: {"label": "Approved", "color": "bg-green-100 text-green-800"},
    ReportStatus.REJECTED: {"label": "Rejected", "color": "bg-red-100 text-red-800"},
}


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


# =============================================================================
# Entidade
# =============================================================================

@dataclass(frozen=True)
class ReportEntity:
    """
    Entidade de Domínio: Denúncia.

    Valor imutável: toda mutação devolve uma nova instância via
    ``copy_with``. O store é o dono do documento; o motor apenas
    lê, aplica a transição e grava o estado completo de volta.

    Attributes:
        id: ID opaco atribuído pelo store (None antes da criação)
        user_id: Usuário que enviou a denúncia
        type: Alvo (produto ou vendedor)
        reason: Motivo, da lista VALID_REASONS
        description: Texto livre (obrigatório para o motivo "Other")
        issue_report: Relato do problema
        additional_details: Detalhes adicionais
        documents: URLs de documentos de evidência
        photos: URLs de fotos de evidência
        status: Estado da revisão
        admin_notes: Notas da equipe
        resolution_details: Texto de resolução
        assigned_to / assigned_to_name / assigned_at: Atribuição atual

    Example:
        report = ReportEntity(
            user_id="user-1",
            type=ReportType.SELLER,
            reason="No Delivery / Ghost Seller",
            documents=("https://cdn/doc.pdf",),
            photos=("https://cdn/photo.jpg",),
        )
        assert report.is_valid
    """

    id: Optional[str] = None
    user_id: str = ""
    type: Optional[ReportType] = ReportType.PRODUCT
    reason: str = ""
    description: Optional[str] = None
    issue_report: Optional[str] = None
    additional_details: Optional[str] = None
    documents: Tuple[str, ...] = field(default_factory=tuple)
    photos: Tuple[str, ...] = field(default_factory=tuple)
    status: ReportStatus = ReportStatus.PENDING
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    admin_notes: Optional[str] = None
    resolution_details: Optional[str] = None
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_at: Optional[datetime] = None

    # -------------------------------------------------------------------------
    # Validação
    # -------------------------------------------------------------------------

    def validate(self) -> List[str]:
        """
        Valida a denúncia.

        Checagens, nesta ordem:
        1. usuário presente
        2. tipo presente
        3. motivo presente e pertencente à lista fixa
        4. motivo "Other" exige descrição não vazia
        5. pelo menos um documento
        6. pelo menos uma foto
        7. nenhuma URL em branco nas duas coleções

        Returns:
            Lista de mensagens; vazia se e somente se a denúncia é válida
        """
        errors: List[str] = []

        if _is_blank(self.user_id):
            errors.append("User ID is required")

        if self.type is None:
            errors.append("Report type is required")

        if _is_blank(self.reason):
            errors.append("Reason is required")
        elif self.reason not in VALID_REASONS:
            errors.append("Invalid reason selected")

        if self.is_other_type_report and _is_blank(self.description):
            errors.append('Description is required for "Other" reports')

        if not self.documents:
            errors.append("Document evidence is required")

        if not self.photos:
            errors.append("Image evidence is required")

        if any(_is_blank(url) for url in self.documents):
            errors.append("Evidence file URLs cannot be empty")

        if any(_is_blank(url) for url in self.photos):
            errors.append("Evidence photo URLs cannot be empty")

        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validate()

    # -------------------------------------------------------------------------
    # Evidências
    # -------------------------------------------------------------------------

    @property
    def has_evidence(self) -> bool:
        """Pelo menos uma das coleções de evidência tem itens."""
        return bool(self.documents) or bool(self.photos)

    @property
    def total_evidence_count(self) -> int:
        return len(self.documents) + len(self.photos)

    @property
    def has_required_evidence(self) -> bool:
        """Documento E foto presentes (caso obrigatório)."""
        return bool(self.documents) and bool(self.photos)

    @property
    def all_evidence_urls(self) -> List[str]:
        """Documentos seguidos de fotos, sem entradas em branco."""
        return [url for url in (*self.documents, *self.photos) if not _is_blank(url)]

    @property
    def is_other_type_report(self) -> bool:
        return self.reason == OTHER_REASON

    # -------------------------------------------------------------------------
    # Estado
    # -------------------------------------------------------------------------

    @property
    def is_pending(self) -> bool:
        return self.status == ReportStatus.PENDING

    @property
    def is_approved(self) -> bool:
        return self.status == ReportStatus.APPROVED

    @property
    def is_rejected(self) -> bool:
        return self.status == ReportStatus.REJECTED

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)

    # -------------------------------------------------------------------------
    # Transições (puras)
    # -------------------------------------------------------------------------

    def copy_with(self, **changes) -> "ReportEntity":
        """
        Nova denúncia com os campos informados sobrescritos.

        Diferente de um merge "se não nulo", ``None`` é um valor válido
        de sobrescrita (usado para limpar a atribuição).

        Raises:
            TypeError: Se algum nome de campo não existir
        """
        return replace(self, **changes)

    def assign_to(
        self,
        staff_id: str,
        staff_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "ReportEntity":
        """Atribui a denúncia a um membro da equipe. Status não muda."""
        now = now or utc_now()
        return self.copy_with(
            assigned_to=staff_id,
            assigned_to_name=staff_name,
            assigned_at=now,
            updated_at=now,
        )

    def unassign(self, now: Optional[datetime] = None) -> "ReportEntity":
        """Limpa os três campos de atribuição, preservando o status."""
        return self.copy_with(
            assigned_to=None,
            assigned_to_name=None,
            assigned_at=None,
            updated_at=now or utc_now(),
        )

    def change_status(
        self,
        status: ReportStatus,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "ReportEntity":
        """
        Altera o status da revisão.

        Regras:
        - Notas não vazias substituem ``admin_notes``
        - Aprovação grava ``resolution_details`` com as notas, ou com
          o texto padrão quando não há notas
        - Nenhuma transição é bloqueada

        Args:
            status: Novo status
            notes: Notas opcionais da equipe
            now: Relógio explícito (testes)
        """
        changes = {"status": status, "updated_at": now or utc_now()}

        if not _is_blank(notes):
            changes["admin_notes"] = notes

        if status == ReportStatus.APPROVED:
            changes["resolution_details"] = (
                notes if not _is_blank(notes) else DEFAULT_APPROVAL_DETAILS
            )

        return self.copy_with(**changes)

    def __repr__(self) -> str:
        return (
            f"ReportEntity("
            f"id={self.id}, "
            f"user_id={self.user_id}, "
            f"type={self.type.value if self.type else None}, "
            f"status={self.status.value}"
            f")"
        )
