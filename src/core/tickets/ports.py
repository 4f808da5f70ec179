"""
Ports (Interfaces) do Domínio de Tickets.

Define o contrato de repositório usado pelos use cases e a
implementação sobre o DocumentStore genérico.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Example:
    repo = DocumentTicketRepository(store)
    ticket = repo.add(TicketEntity.submit(...))
    repo.save(ticket.assign_to("staff-1", "Maria"))
"""

import logging
from dataclasses import replace
from typing import List, Optional, Protocol, runtime_checkable

from src.core.shared.interfaces import DocumentStore

from .entities import TicketEntity, TicketStatus
from .mappers import TicketDocumentMapper

logger = logging.getLogger(__name__)

TICKETS_COLLECTION = "support_tickets"
NEWEST_FIRST = "-createdAt"


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DocumentTicketRepository (qualquer DocumentStore)

    Methods:
        add: Cria documento e devolve a entidade com ID
        save: Regrava o estado completo de um ticket existente
        get_by_id: Busca por ID
        list_all: Todos, mais recentes primeiro
        list_by_status: Filtra por status
        list_by_assignee: Filtra por suporte atribuído
        list_escalated: Escalonados, escalonamento mais recente primeiro
    """

    def add(self, ticket: TicketEntity) -> TicketEntity:
        ...

    def save(self, ticket: TicketEntity) -> None:
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ...

    def list_all(self) -> List[TicketEntity]:
        ...

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        ...

    def list_by_assignee(self, staff_id: str) -> List[TicketEntity]:
        ...

    def list_escalated(self) -> List[TicketEntity]:
        ...


class DocumentTicketRepository:
    """
    Repositório de tickets sobre um DocumentStore.

    Não guarda cópias em memória entre chamadas: toda leitura
    reconstrói a entidade a partir do store.
    """

    collection = TICKETS_COLLECTION

    def __init__(self, store: DocumentStore):
        self.store = store

    def add(self, ticket: TicketEntity) -> TicketEntity:
        doc_id = self.store.create(self.collection, TicketDocumentMapper.to_document(ticket))
        logger.debug(f"Ticket criado: {doc_id}")
        return replace(ticket, id=doc_id)

    def save(self, ticket: TicketEntity) -> None:
        self.store.update(self.collection, ticket.id, TicketDocumentMapper.to_document(ticket))

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        data = self.store.get(self.collection, ticket_id)
        if data is None:
            return None
        return TicketDocumentMapper.to_entity(ticket_id, data)

    def list_all(self) -> List[TicketEntity]:
        rows = self.store.query(self.collection, order_by=NEWEST_FIRST)
        return TicketDocumentMapper.to_entity_list(rows)

    def list_by_status(self, status: TicketStatus) -> List[TicketEntity]:
        # "open", "inprogress"... só casam depois de normalizados
        return [ticket for ticket in self.list_all() if ticket.status == status]

    def list_by_assignee(self, staff_id: str) -> List[TicketEntity]:
        rows = self.store.query(
            self.collection,
            where={"assignedTo": staff_id},
            order_by=NEWEST_FIRST,
        )
        return TicketDocumentMapper.to_entity_list(rows)

    def list_escalated(self) -> List[TicketEntity]:
        rows = self.store.query(
            self.collection,
            where={"status": TicketStatus.ESCALATED.value},
            order_by="-escalatedAt",
        )
        return TicketDocumentMapper.to_entity_list(rows)
