"""
Mapper entre ReportEntity e o documento persistido na coleção "reports".

Os nomes de campo do documento são o contrato com o store
(camelCase); a entidade usa snake_case. Leitura é tolerante:
enums passam pela normalização legada e timestamps aceitam tanto o
tipo nativo quanto strings ISO-8601.
"""

from typing import Any, Dict, List, Tuple

from src.core.shared.timestamps import to_datetime

from .entities import ReportEntity, ReportType, ReportStatus


class ReportDocumentMapper:
    """
    Conversão ReportEntity ⇄ documento.

    - to_document(): Entity → campos do documento (sem o ID)
    - to_entity(): (ID, campos) → Entity
    """

    @staticmethod
    def to_document(entity: ReportEntity) -> Dict[str, Any]:
        """
        Converte entidade para os campos persistidos.

        Note:
            O ID não faz parte dos campos: ele é a chave do documento.
        """
        return {
            "userId": entity.user_id,
            "type": entity.type.value if entity.type else None,
            "reason": entity.reason,
            "description": entity.description,
            "issueReport": entity.issue_report,
            "additionalDetails": entity.additional_details,
            "evidenceFiles": list(entity.documents),
            "evidencePhotos": list(entity.photos),
            "status": entity.status.value,
            "createdAt": entity.created_at,
            "updatedAt": entity.updated_at,
            "adminNotes": entity.admin_notes,
            "resolutionDetails": entity.resolution_details,
            "assignedTo": entity.assigned_to,
            "assignedToName": entity.assigned_to_name,
            "assignedAt": entity.assigned_at,
        }

    @staticmethod
    def to_entity(doc_id: str, data: Dict[str, Any]) -> ReportEntity:
        """
        Reconstrói entidade a partir do documento.

        Args:
            doc_id: ID do documento no store
            data: Campos persistidos

        Returns:
            ReportEntity com enums e timestamps normalizados
        """
        return ReportEntity(
            id=doc_id,
            user_id=data.get("userId") or "",
            type=ReportType.from_string(data.get("type")),
            reason=data.get("reason") or "",
            description=data.get("description"),
            issue_report=data.get("issueReport"),
            additional_details=data.get("additionalDetails"),
            documents=tuple(data.get("evidenceFiles") or ()),
            photos=tuple(data.get("evidencePhotos") or ()),
            status=ReportStatus.from_string(data.get("status")),
            created_at=to_datetime(data.get("createdAt")),
            updated_at=to_datetime(data.get("updatedAt")),
            admin_notes=data.get("adminNotes"),
            resolution_details=data.get("resolutionDetails"),
            assigned_to=data.get("assignedTo"),
            assigned_to_name=data.get("assignedToName"),
            assigned_at=to_datetime(data.get("assignedAt")),
        )

    @staticmethod
    def to_entity_list(rows: List[Tuple[str, Dict[str, Any]]]) -> List[ReportEntity]:
        return [ReportDocumentMapper.to_entity(doc_id, data) for doc_id, data in rows]
