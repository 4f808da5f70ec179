"""
Document store e Event Store usando Django ORM.

São DRIVEN ADAPTERS: implementam os ports DocumentStore e
EventStore definidos em src/core/shared/interfaces.py.

Responsabilidades:
- Persistir documentos de qualquer coleção como JSON
- Filtrar por igualdade de campos (lookup data__<campo>)
- Converter falhas do banco em StoreUnavailableError

A ordenação é feita em memória com a mesma regra do store em
memória, de forma que timestamps gravados como ISO-8601 ordenem
cronologicamente em qualquer banco.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from django.db import DatabaseError

from src.core.shared.documents import order_documents
from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import EntityNotFoundError, StoreUnavailableError
from src.core.shared.interfaces import Document, EventStore

from .models import DomainEventModel, StoredDocument

logger = logging.getLogger(__name__)


class DjangoDocumentStore:
    """
    Implementação Django do DocumentStore.

    Example:
        store = DjangoDocumentStore()
        doc_id = store.create("support_tickets", {"status": "pending"})
        store.query("support_tickets", where={"status": "pending"})
    """

    def create(self, collection: str, fields: Document) -> str:
        try:
            document = StoredDocument.objects.create(collection=collection, data=fields)
        except DatabaseError as e:
            raise self._unavailable("create", collection, e)

        logger.debug(f"Documento criado: {collection}/{document.id}")
        return document.id

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        try:
            document = (
                StoredDocument.objects
                .filter(collection=collection, pk=doc_id)
                .first()
            )
        except DatabaseError as e:
            raise self._unavailable("get", collection, e)

        return dict(document.data) if document else None

    def query(
        self,
        collection: str,
        where: Optional[Document] = None,
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Document]]:
        lookups = {f"data__{key}": value for key, value in (where or {}).items()}

        try:
            rows = [
                (document.id, dict(document.data))
                for document in (
                    StoredDocument.objects
                    .filter(collection=collection, **lookups)
                    .order_by('created_at')
                )
            ]
        except DatabaseError as e:
            raise self._unavailable("query", collection, e)

        return order_documents(rows, order_by)

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        try:
            document = (
                StoredDocument.objects
                .filter(collection=collection, pk=doc_id)
                .first()
            )
            if document is None:
                raise EntityNotFoundError(
                    f"Documento {collection}/{doc_id} não encontrado",
                    entity_type=collection,
                    entity_id=doc_id,
                )

            document.data = {**document.data, **fields}
            document.save(update_fields=['data', 'updated_at'])
        except DatabaseError as e:
            raise self._unavailable("update", collection, e)

        logger.debug(f"Documento atualizado: {collection}/{doc_id}")

    @staticmethod
    def _unavailable(operation: str, collection: str, error: Exception) -> StoreUnavailableError:
        logger.error(f"Falha no store ({operation} {collection}): {error}")
        return StoreUnavailableError(
            f"Document store indisponível: {error}",
            operation=operation,
            collection=collection,
        )


class DjangoEventStore(EventStore):
    """
    Event Store usando Django ORM.

    Persiste Domain Events para auditoria. Chamado pelo
    DjangoUnitOfWork dentro da mesma transação dos documentos.
    """

    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento de domínio
            sequence: Posição do evento dentro da operação
        """
        DomainEventModel.objects.create(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event.to_dict(),
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
        )

        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def get_events_for_aggregate(self, aggregate_id: str) -> List[Dict[str, Any]]:
        events = (
            DomainEventModel.objects
            .filter(aggregate_id=aggregate_id)
            .order_by('recorded_at', 'sequence')
        )

        return [
            {
                'event_id': e.event_id,
                'event_type': e.event_type,
                'aggregate_type': e.aggregate_type,
                'aggregate_id': e.aggregate_id,
                'event_data': e.event_data,
                'sequence': e.sequence,
                'occurred_at': e.occurred_at,
            }
            for e in events
        ]
