"""
Entidades do Domínio de Tickets de Suporte.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas a tickets de suporte.

Entidades:
- TicketEntity: Agregado principal (valor imutável)
- TicketStatus: Estados possíveis de um ticket
- TicketPriority: Níveis de prioridade
- InternalNote: Entrada do log interno (append-only)
- CurrentHandler: Quem está com o ticket agora

Regras de Negócio Encapsuladas:
- Prioridade automática pelo tipo de problema
- Transições puras: cada operação devolve um novo ticket
- Transições de status não são bloqueadas (apenas classificadas
  como "para trás" para telemetria)
- Atraso: ticket não resolvido com mais de 24h desde a criação
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Optional, Tuple

from src.core.shared.exceptions import ValidationError
from src.core.shared.timestamps import utc_now, hours_between


OVERDUE_THRESHOLD = timedelta(hours=24)


def _normalize_key(value) -> str:
    return str(value).strip().lower().replace("-", "_").replace(" ", "_")


class TicketStatus(str, Enum):
    """
    Estados possíveis de um ticket.

    Fluxo usual:
        PENDING → ASSIGNED → IN_PROGRESS → RESOLVED → CLOSED
                      ↓            ↓
                      └──→ ESCALATED ──┘

    Qualquer status pode seguir qualquer outro; o rank só serve para
    detectar transições "para trás" (ex: CLOSED → PENDING).
    """

    PENDING = "pending"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    ESCALATED = "escalated"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @classmethod
    def lookup(cls, value) -> Optional["TicketStatus"]:
        """Conversão estrita: None para valores não reconhecidos."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        return _TICKET_STATUS_ALIASES.get(_normalize_key(value))

    @classmethod
    def from_string(cls, value) -> "TicketStatus":
        """Conversão tolerante para valores lidos do store (default PENDING)."""
        return cls.lookup(value) or cls.PENDING

    @property
    def rank(self) -> int:
        return _TICKET_STATUS_RANK[self]

    @property
    def is_resolved(self) -> bool:
        return self in (TicketStatus.RESOLVED, TicketStatus.CLOSED)

    @property
    def display_name(self) -> str:
        return TICKET_STATUS_DISPLAY[self]["label"]


class TicketPriority(str, Enum):
    """
    Níveis de prioridade.

    A prioridade inicial vem do tipo de problema (ISSUE_TYPE_PRIORITY);
    a equipe pode alterá-la depois.
    """

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def lookup(cls, value) -> Optional["TicketPriority"]:
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        return _TICKET_PRIORITY_ALIASES.get(_normalize_key(value))

    @classmethod
    def from_string(cls, value) -> "TicketPriority":
        return cls.lookup(value) or cls.NORMAL

    @property
    def display_name(self) -> str:
        return TICKET_PRIORITY_DISPLAY[self]["label"]


_TICKET_STATUS_ALIASES: Dict[str, TicketStatus] = {
    "pending": TicketStatus.PENDING,
    "open": TicketStatus.PENDING,
    "assigned": TicketStatus.ASSIGNED,
    "in_progress": TicketStatus.IN_PROGRESS,
    "inprogress": TicketStatus.IN_PROGRESS,
    "escalated": TicketStatus.ESCALATED,
    "resolved": TicketStatus.RESOLVED,
    "closed": TicketStatus.CLOSED,
}

_TICKET_STATUS_RANK: Dict[TicketStatus, int] = {
    TicketStatus.PENDING: 0,
    TicketStatus.ASSIGNED: 1,
    TicketStatus.IN_PROGRESS: 2,
    TicketStatus.ESCALATED: 3,
    TicketStatus.RESOLVED: 4,
    TicketStatus.CLOSED: 5,
}

_TICKET_PRIORITY_ALIASES: Dict[str, TicketPriority] = {
    "low": TicketPriority.LOW,
    "normal": TicketPriority.NORMAL,
    "medium": TicketPriority.NORMAL,
    "high": TicketPriority.HIGH,
    "urgent": TicketPriority.URGENT,
}

TICKET_STATUS_DISPLAY: Dict[TicketStatus, Dict[str, str]] = {
    TicketStatus.PENDING: {"label": "Pending", "color": "bg-yellow-100 text-yellow-800"},
    TicketStatus.ASSIGNED: {"label": "Assigned", "color": "bg-gray-100 text-gray-800"},
    TicketStatus.IN_PROGRESS: {"label": "In Progress", "color": "bg-blue-100 text-blue-800"},
    TicketStatus.ESCALATED: {"label": "Escalated", "color": "bg-gray-100 text-gray-800"},
    TicketStatus.RESOLVED: {"label": "Resolved", "color": "bg-green-100 text-green-800"},
    TicketStatus.CLOSED: {"label": "Closed", "color": "bg-gray-100 text-gray-800"},
}

TICKET_PRIORITY_DISPLAY: Dict[TicketPriority, Dict[str, str]] = {
    TicketPriority.LOW: {"label": "Low"},
    TicketPriority.NORMAL: {"label": "Normal"},
    TicketPriority.HIGH: {"label": "High"},
    TicketPriority.URGENT: {"label": "Urgent"},
}

# Tipo de problema → prioridade padrão
ISSUE_TYPE_PRIORITY: Dict[str, TicketPriority] = {
    "Technical Issue": TicketPriority.HIGH,
    "Account Problem": TicketPriority.HIGH,
    "Payment Issue": TicketPriority.URGENT,
    "Feature Request": TicketPriority.LOW,
    "Other": TicketPriority.NORMAL,
}


def auto_priority(issue_type: Optional[str]) -> TicketPriority:
    """Prioridade padrão para o tipo de problema (NORMAL se desconhecido)."""
    return ISSUE_TYPE_PRIORITY.get(issue_type or "", TicketPriority.NORMAL)


def is_backward_transition(old: TicketStatus, new: TicketStatus) -> bool:
    """True quando o novo status tem rank menor que o atual."""
    return new.rank < old.rank


@dataclass(frozen=True)
class InternalNote:
    """Entrada do log interno do ticket. Nunca editada nem removida."""

    author: str
    author_name: Optional[str]
    note: str
    timestamp: datetime


@dataclass(frozen=True)
class CurrentHandler:
    """
    Responsável atual pelo ticket.

    Attributes:
        uid: ID do desenvolvedor ou do membro do suporte
        name: Nome de exibição
        type: "developer" (escalonado) ou "support" (atribuído)
    """

    uid: Optional[str]
    name: Optional[str]
    type: str

    def to_dict(self) -> dict:
        return {"uid": self.uid, "name": self.name, "type": self.type}


@dataclass(frozen=True)
class TicketEntity:
    """
    Entidade de Domínio: Ticket de Suporte.

    Valor imutável. As transições (assign_to, escalate_to, ...) são
    funções puras que devolvem um novo ticket; a persistência é feita
    pelos use cases com read-modify-write no store.

    Invariantes:
    - Escalonado ⇔ tem alvo de escalonamento OU status ESCALATED
    - Responsável atual: desenvolvedor se escalonado, senão o suporte
      atribuído, senão ninguém
    - internal_notes é append-only
    - response_count só cresce; first_response_at é gravado uma vez

    Example:
        ticket = TicketEntity.submit(
            full_name="Ana Souza",
            email="ana@example.com",
            issue_type="Payment Issue",
            description="Cobrança em dobro",
        )
        assert ticket.priority == TicketPriority.URGENT

        ticket = ticket.escalate_to("dev1", "Dev One", "fraude suspeita")
        assert ticket.current_handler.type == "developer"
    """

    id: Optional[str] = None

    # Contato
    full_name: str = ""
    email: str = ""
    account_type: Optional[str] = None
    device_type: Optional[str] = None
    app_version: Optional[str] = None

    # Problema
    issue_type: str = ""
    description: str = ""
    date_time: Optional[datetime] = None
    attachments: Tuple[str, ...] = field(default_factory=tuple)

    # Estado
    status: TicketStatus = TicketStatus.PENDING
    priority: TicketPriority = TicketPriority.NORMAL

    # Atribuição (suporte)
    assigned_to: Optional[str] = None
    assigned_to_name: Optional[str] = None
    assigned_at: Optional[datetime] = None

    # Escalonamento (desenvolvedor)
    escalated_to: Optional[str] = None
    escalated_to_name: Optional[str] = None
    escalated_at: Optional[datetime] = None
    escalation_reason: Optional[str] = None

    internal_notes: Tuple[InternalNote, ...] = field(default_factory=tuple)

    # Timestamps
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    # Respostas
    first_response_at: Optional[datetime] = None
    last_response_at: Optional[datetime] = None
    response_count: int = 0

    # =========================================================================
    # Criação
    # =========================================================================

    @classmethod
    def submit(
        cls,
        full_name: str,
        email: str,
        issue_type: str,
        description: str,
        account_type: Optional[str] = None,
        device_type: Optional[str] = None,
        app_version: Optional[str] = None,
        date_time: Optional[datetime] = None,
        attachments: Optional[Tuple[str, ...]] = None,
        priority: Optional[TicketPriority] = None,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Factory method para abrir ticket com validações.

        Status inicial PENDING, sem atribuição nem escalonamento.
        A prioridade vem do tipo de problema quando não informada.

        Raises:
            ValidationError: Se contato, tipo ou descrição estiverem vazios
        """
        cls._require(full_name, "full_name", "Nome é obrigatório")
        cls._require(email, "email", "Email é obrigatório")
        cls._require(issue_type, "issue_type", "Tipo de problema é obrigatório")
        cls._require(description, "description", "Descrição é obrigatória")

        now = now or utc_now()
        return cls(
            full_name=full_name.strip(),
            email=email.strip(),
            account_type=account_type,
            device_type=device_type,
            app_version=app_version,
            issue_type=issue_type.strip(),
            description=description.strip(),
            date_time=date_time,
            attachments=tuple(attachments or ()),
            status=TicketStatus.PENDING,
            priority=priority or auto_priority(issue_type.strip()),
            created_at=now,
            updated_at=now,
        )

    @staticmethod
    def _require(value: Optional[str], field_name: str, message: str) -> None:
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field_name} deve ser texto", field=field_name)
        if not value or not value.strip():
            raise ValidationError(message, field=field_name)

    # =========================================================================
    # Transições (puras)
    # =========================================================================

    def assign_to(
        self,
        staff_id: str,
        staff_name: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Atribui ao suporte e força status ASSIGNED.

        Não limpa o escalonamento. Chamar de novo com outro membro
        sobrescreve a atribuição.
        """
        now = now or utc_now()
        return replace(
            self,
            assigned_to=staff_id,
            assigned_to_name=staff_name,
            assigned_at=now,
            status=TicketStatus.ASSIGNED,
            updated_at=now,
        )

    def unassign(self, now: Optional[datetime] = None) -> "TicketEntity":
        """Limpa a atribuição e volta o status para PENDING."""
        return replace(
            self,
            assigned_to=None,
            assigned_to_name=None,
            assigned_at=None,
            status=TicketStatus.PENDING,
            updated_at=now or utc_now(),
        )

    def escalate_to(
        self,
        developer_id: str,
        developer_name: Optional[str] = None,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Escalona para um desenvolvedor e força status ESCALATED.

        A atribuição ao suporte é mantida como histórico, mas o
        responsável atual passa a ser o desenvolvedor.
        """
        now = now or utc_now()
        return replace(
            self,
            escalated_to=developer_id,
            escalated_to_name=developer_name,
            escalated_at=now,
            escalation_reason=reason,
            status=TicketStatus.ESCALATED,
            updated_at=now,
        )

    def add_internal_note(
        self,
        author_id: str,
        author_name: Optional[str],
        text: str,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        """Acrescenta uma nota ao fim do log interno."""
        now = now or utc_now()
        note = InternalNote(author=author_id, author_name=author_name, note=text, timestamp=now)
        return replace(self, internal_notes=self.internal_notes + (note,), updated_at=now)

    def update_status(
        self,
        new_status: TicketStatus,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        """
        Define o status sem checar a transição.

        RESOLVED grava resolved_at e CLOSED grava closed_at, ambos só
        se ainda não estiverem preenchidos.
        """
        now = now or utc_now()
        changes = {"status": new_status, "updated_at": now}
        if new_status == TicketStatus.RESOLVED and self.resolved_at is None:
            changes["resolved_at"] = now
        elif new_status == TicketStatus.CLOSED and self.closed_at is None:
            changes["closed_at"] = now
        return replace(self, **changes)

    def update_priority(
        self,
        priority: TicketPriority,
        now: Optional[datetime] = None,
    ) -> "TicketEntity":
        return replace(self, priority=priority, updated_at=now or utc_now())

    def record_response(self, now: Optional[datetime] = None) -> "TicketEntity":
        """
        Registra uma resposta da equipe.

        first_response_at só na primeira vez; last_response_at sempre;
        response_count +1.
        """
        now = now or utc_now()
        return replace(
            self,
            first_response_at=self.first_response_at or now,
            last_response_at=now,
            response_count=self.response_count + 1,
            updated_at=now,
        )

    # =========================================================================
    # Propriedades derivadas
    # =========================================================================

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)

    @property
    def is_escalated(self) -> bool:
        return bool(self.escalated_to) or self.status == TicketStatus.ESCALATED

    @property
    def is_resolved(self) -> bool:
        return self.status.is_resolved

    @property
    def is_overdue(self) -> bool:
        """Não resolvido e criado há mais de 24 horas."""
        return self.is_overdue_at(utc_now())

    def is_overdue_at(self, now: datetime) -> bool:
        """Mesma regra de ``is_overdue`` com relógio explícito."""
        if self.is_resolved or self.created_at is None:
            return False
        return now - self.created_at > OVERDUE_THRESHOLD

    @property
    def response_time_hours(self) -> Optional[float]:
        return hours_between(self.created_at, self.first_response_at)

    @property
    def resolution_time_hours(self) -> Optional[float]:
        return hours_between(self.created_at, self.resolved_at)

    @property
    def current_handler(self) -> Optional[CurrentHandler]:
        if self.is_escalated:
            return CurrentHandler(
                uid=self.escalated_to,
                name=self.escalated_to_name,
                type="developer",
            )
        if self.is_assigned:
            return CurrentHandler(
                uid=self.assigned_to,
                name=self.assigned_to_name,
                type="support",
            )
        return None

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id}, "
            f"issue_type='{self.issue_type}', "
            f"status={self.status.value}, "
            f"priority={self.priority.value}"
            f")"
        )
