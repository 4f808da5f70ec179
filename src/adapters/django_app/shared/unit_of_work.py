"""
Unit of Work - Implementação Django.

Delimita uma operação do motor (ler, transicionar, regravar)
dentro de uma transação do banco.

Responsabilidades:
- Abrir/fechar transação (django.db.transaction.atomic)
- Persistir eventos no Event Store junto com os documentos
- Publicar eventos somente após commit bem-sucedido

Não há travas nem versão nos documentos: duas operações
concorrentes sobre o mesmo documento seguem last-writer-wins.
"""

from typing import Dict, List, Optional
import logging

from django.db import transaction

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa ``transaction.atomic`` (aninhável, inclusive dentro dos
    testes do pytest-django). Eventos são gravados no Event Store
    antes do commit e publicados depois dele.

    Example:
        with DjangoUnitOfWork(event_store=DjangoEventStore()) as uow:
            repo.save(ticket)
            uow.publish_event(TicketAssignedEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(ticket)
            raise StoreUnavailableError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (Celery, logging...)
            event_store: Store para persistência de eventos
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Persiste eventos, confirma a transação e publica.

        Ordem de execução:
        1. Persistir eventos no Event Store (dentro da transação)
        2. Commit
        3. Publicar eventos para consumidores
        """
        if self._atomic is None:
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception:
            logger.error("Falha ao gravar eventos; revertendo operação")
            self.rollback()
            raise

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        self._committed = True
        logger.debug("Transaction committed")

        self._publish_events()

    def rollback(self) -> None:
        """Desfaz a transação e descarta eventos."""
        self.clear_events()
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(RuntimeError, RuntimeError("rollback"), None)
        self._rolled_back = True
        logger.debug("Transaction rolled back")

    def _persist_events(self) -> None:
        for sequence, event in enumerate(self._events, start=1):
            self._event_store.append(event, sequence=sequence)

    def _publish_events(self) -> None:
        events, self._events = list(self._events), []
        for event in events:
            logger.debug(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )
            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work sem transação real.

    Usado com o InMemoryDocumentStore (STORE_BACKEND=memory) e nos
    testes. Cada escrita do store em memória já é atômica; aqui só
    se controla a fila de eventos.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        events, self._events = list(self._events), []
        self._committed = True
        self._published_events.extend(events)

        if self._event_publisher:
            for event in events:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event: {e}")

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events

    def events_by_type(self) -> Dict[str, int]:
        """Contagem de eventos publicados por tipo."""
        counts: Dict[str, int] = {}
        for event in self._published_events:
            counts[event.event_type] = counts.get(event.event_type, 0) + 1
        return counts
