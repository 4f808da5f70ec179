"""
Mapper entre TicketEntity e o documento da coleção "support_tickets".

Responsabilidades:
- Converter TicketEntity → campos do documento (camelCase)
- Converter documento → TicketEntity (normalizando enums e timestamps)

Mappers são stateless e não contêm lógica de negócio.
"""

from typing import Any, Dict, List, Tuple

from src.core.shared.timestamps import to_datetime

from .entities import TicketEntity, TicketStatus, TicketPriority, InternalNote


class TicketDocumentMapper:
    """
    Conversão TicketEntity ⇄ documento.

    - to_document(): Entity → campos
    - to_entity(): (ID, campos) → Entity
    """

    @staticmethod
    def note_to_document(note: InternalNote) -> Dict[str, Any]:
        return {
            "author": note.author,
            "authorName": note.author_name,
            "note": note.note,
            "timestamp": note.timestamp,
        }

    @staticmethod
    def note_to_entity(data: Dict[str, Any]) -> InternalNote:
        return InternalNote(
            author=data.get("author") or "",
            author_name=data.get("authorName"),
            note=data.get("note") or "",
            timestamp=to_datetime(data.get("timestamp")),
        )

    @staticmethod
    def to_document(entity: TicketEntity) -> Dict[str, Any]:
        """
        Converte entidade para os campos persistidos.

        Note:
            O ID não é gravado nos campos; é a chave do documento.
        """
        return {
            "fullName": entity.full_name,
            "email": entity.email,
            "accountType": entity.account_type,
            "deviceType": entity.device_type,
            "appVersion": entity.app_version,
            "issueType": entity.issue_type,
            "description": entity.description,
            "dateTime": entity.date_time,
            "attachments": list(entity.attachments),
            "status": entity.status.value,
            "priority": entity.priority.value,
            "assignedTo": entity.assigned_to,
            "assignedToName": entity.assigned_to_name,
            "assignedAt": entity.assigned_at,
            "escalatedTo": entity.escalated_to,
            "escalatedToName": entity.escalated_to_name,
            "escalatedAt": entity.escalated_at,
            "escalationReason": entity.escalation_reason,
            "internalNotes": [
                TicketDocumentMapper.note_to_document(note)
                for note in entity.internal_notes
            ],
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
            "resolvedAt": entity.resolved_at,
            "closedAt": entity.closed_at,
            "firstResponseAt": entity.first_response_at,
            "lastResponseAt": entity.last_response_at,
            "responseCount": entity.response_count,
        }

    @staticmethod
    def to_entity(doc_id: str, data: Dict[str, Any]) -> TicketEntity:
        """
        Reconstrói entidade a partir do documento.

        Note:
            Bypassa as validações de ``TicketEntity.submit``: documentos
            já gravados são aceitos como estão.
        """
        return TicketEntity(
            id=doc_id,
            full_name=data.get("fullName") or "",
            email=data.get("email") or "",
            account_type=data.get("accountType"),
            device_type=data.get("deviceType"),
            app_version=data.get("appVersion"),
            issue_type=data.get("issueType") or "",
            description=data.get("description") or "",
            date_time=to_datetime(data.get("dateTime")),
            attachments=tuple(data.get("attachments") or ()),
            status=TicketStatus.from_string(data.get("status")),
            priority=TicketPriority.from_string(data.get("priority")),
            assigned_to=data.get("assignedTo"),
            assigned_to_name=data.get("assignedToName"),
            assigned_at=to_datetime(data.get("assignedAt")),
            escalated_to=data.get("escalatedTo"),
            escalated_to_name=data.get("escalatedToName"),
            escalated_at=to_datetime(data.get("escalatedAt")),
            escalation_reason=data.get("escalationReason"),
            internal_notes=tuple(
                TicketDocumentMapper.note_to_entity(note)
                for note in data.get("internalNotes") or ()
            ),
            created_at=to_datetime(data.get("createdAt")),
            updated_at=to_datetime(data.get("updatedAt")),
            resolved_at=to_datetime(data.get("resolvedAt")),
            closed_at=to_datetime(data.get("closedAt")),
            first_response_at=to_datetime(data.get("firstResponseAt")),
            last_response_at=to_datetime(data.get("lastResponseAt")),
            response_count=int(data.get("responseCount") or 0),
        )

    @staticmethod
    def to_entity_list(rows: List[Tuple[str, Dict[str, Any]]]) -> List[TicketEntity]:
        return [TicketDocumentMapper.to_entity(doc_id, data) for doc_id, data in rows]
