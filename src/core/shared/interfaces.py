"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Este módulo define as interfaces que os Adapters devem implementar.
São os "Ports" da Arquitetura Hexagonal.

Ports:
- DocumentStore: store genérico de documentos (create/get/query/update)
- UnitOfWork: delimita a operação e bufferiza eventos
- EventPublisher: entrega eventos para consumidores
- EventStore: trilha de auditoria dos eventos publicados

Princípio: Core define interfaces; Adapters implementam.
O fluxo de dependência sempre aponta para o Core.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from .events import DomainEvent


Document = Dict[str, Any]


@runtime_checkable
class DocumentStore(Protocol):
    """
    Store genérico de documentos organizados em coleções.

    O motor não conhece a tecnologia por trás do store. Cada escrita
    de documento é atômica por si só; não há travas nem token de versão
    (modelo last-writer-wins).

    Implementações:
    - InMemoryDocumentStore (core, testes e desenvolvimento)
    - DjangoDocumentStore (JSONField via ORM)

    Falhas do backend devem ser lançadas como StoreUnavailableError.
    """

    def create(self, collection: str, fields: Document) -> str:
        """
        Cria documento e retorna o ID gerado pelo store.

        Args:
            collection: Nome da coleção (ex: "reports")
            fields: Campos do documento

        Returns:
            ID opaco do novo documento
        """
        ...

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """
        Busca documento por ID.

        Returns:
            Cópia dos campos ou None se não existir
        """
        ...

    def query(
        self,
        collection: str,
        where: Optional[Document] = None,
        order_by: Optional[str] = None,
    ) -> List[Tuple[str, Document]]:
        """
        Consulta documentos por igualdade de campos.

        Args:
            collection: Nome da coleção
            where: Filtros campo -> valor (igualdade)
            order_by: Campo de ordenação; prefixo "-" para decrescente

        Returns:
            Lista de pares (id, campos)
        """
        ...

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """
        Sobrescreve os campos informados de um documento existente.

        Raises:
            EntityNotFoundError: Se o documento não existe
        """
        ...


class UnitOfWork(ABC):
    """
    Unit of Work - delimita uma operação do motor.

    Pattern: Context Manager
        with uow:
            repo.save(entity)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Responsabilidades:
    - Gerenciar início/fim de transação (quando o backend tiver)
    - Enfileirar eventos para publicação pós-commit
    - Descartar eventos se a operação falhar
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Confirma a operação e publica eventos.

        Note:
            Eventos só são publicados após commit bem-sucedido.
            Se commit falhar, eventos são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz a operação e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Example:
        class CeleryEventPublisher(EventPublisher):
            def publish(self, event):
                dispatch_domain_event.delay(event.event_type, event.to_dict())
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos em batch."""
        raise NotImplementedError


class EventStore(ABC):
    """
    Trilha de auditoria dos eventos de domínio.

    Append-only: eventos gravados nunca são alterados.
    """

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Posição do evento dentro da operação
        """
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str) -> List[Dict[str, Any]]:
        """
        Recupera eventos de um agregado, em ordem de gravação.

        Returns:
            Lista de eventos serializados
        """
        raise NotImplementedError


# Type alias para facilitar tipagem
UoW = UnitOfWork
