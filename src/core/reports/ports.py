"""
Ports (Interfaces) do Domínio de Denúncias.

Define o contrato de repositório usado pelos use cases e a
implementação padrão sobre o DocumentStore genérico.

Princípio:
    Core define interfaces → Adapters implementam
    O repositório não conhece a tecnologia do store; recebe
    qualquer objeto que satisfaça o protocolo DocumentStore.
"""

import logging
from typing import List, Optional, Protocol, runtime_checkable

from src.core.shared.interfaces import DocumentStore

from .entities import ReportEntity, ReportStatus
from .mappers import ReportDocumentMapper

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"
NEWEST_FIRST = "-createdAt"


@runtime_checkable
class ReportRepository(Protocol):
    """
    Interface para persistência de denúncias.

    Methods:
        add: Cria documento e devolve a entidade com ID
        save: Grava o estado completo de uma denúncia existente
        get_by_id: Busca por ID
        list_all: Todas, mais recentes primeiro
        list_by_status: Filtra por status
        list_by_assignee: Filtra por responsável
    """

    def add(self, report: ReportEntity) -> ReportEntity:
        ...

    def save(self, report: ReportEntity) -> None:
        ...

    def get_by_id(self, report_id: str) -> Optional[ReportEntity]:
        ...

    def list_all(self) -> List[ReportEntity]:
        ...

    def list_by_status(self, status: ReportStatus) -> List[ReportEntity]:
        ...

    def list_by_assignee(self, staff_id: str) -> List[ReportEntity]:
        ...


class DocumentReportRepository:
    """
    Repositório de denúncias sobre um DocumentStore.

    Cada ``save`` é um read-modify-write completo: o documento inteiro
    é regravado, sem patch incremental.

    Example:
        repo = DocumentReportRepository(InMemoryDocumentStore())
        created = repo.add(report)
        repo.get_by_id(created.id)
    """

    collection = REPORTS_COLLECTION

    def __init__(self, store: DocumentStore):
        self.store = store

    def add(self, report: ReportEntity) -> ReportEntity:
        doc_id = self.store.create(self.collection, ReportDocumentMapper.to_document(report))
        logger.debug(f"Denúncia criada: {doc_id}")
        return report.copy_with(id=doc_id)

    def save(self, report: ReportEntity) -> None:
        self.store.update(self.collection, report.id, ReportDocumentMapper.to_document(report))

    def get_by_id(self, report_id: str) -> Optional[ReportEntity]:
        data = self.store.get(self.collection, report_id)
        if data is None:
            return None
        return ReportDocumentMapper.to_entity(report_id, data)

    def list_all(self) -> List[ReportEntity]:
        rows = self.store.query(self.collection, order_by=NEWEST_FIRST)
        return ReportDocumentMapper.to_entity_list(rows)

    def list_by_status(self, status: ReportStatus) -> List[ReportEntity]:
        # Documentos legados ("resolved", "under_review"...) não casam por
        # igualdade com o valor canônico; a filtragem é feita após normalizar.
        return [report for report in self.list_all() if report.status == status]

    def list_by_assignee(self, staff_id: str) -> List[ReportEntity]:
        rows = self.store.query(
            self.collection,
            where={"assignedTo": staff_id},
            order_by=NEWEST_FIRST,
        )
        return ReportDocumentMapper.to_entity_list(rows)
