"""
Testes do container de Dependency Injection.
"""

import pytest

from src.adapters.django_app.events.publishers import (
    InMemoryEventPublisher,
    LoggingEventPublisher,
)
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork, InMemoryUnitOfWork
from src.config.container import (
    build_container,
    default_config,
    get_container,
    reset_container,
    set_container,
)
from src.core.shared.documents import InMemoryDocumentStore
from src.core.tickets.use_cases import EscalateTicketService


class TestContainer:

    def test_config_lida_do_settings(self):
        assert default_config() == {
            'store_backend': 'memory',
            'event_publisher_mode': 'memory',
        }

    def test_backend_memoria(self):
        container = build_container(store_backend='memory', event_publisher_mode='logging')

        assert isinstance(container.document_store(), InMemoryDocumentStore)
        assert isinstance(container.unit_of_work(), InMemoryUnitOfWork)
        assert isinstance(container.event_publisher(), LoggingEventPublisher)

    def test_backend_django(self):
        container = build_container(store_backend='django')

        assert isinstance(container.unit_of_work(), DjangoUnitOfWork)

    def test_repositorios_compartilham_o_store(self):
        container = build_container()

        assert container.ticket_repository().store is container.report_repository().store

    def test_uow_nova_a_cada_service(self):
        container = build_container()

        first = container.escalate_ticket_service()
        second = container.escalate_ticket_service()

        assert isinstance(first, EscalateTicketService)
        assert first.uow is not second.uow
        assert first.ticket_repo is second.ticket_repo

    def test_container_global(self):
        container = build_container(event_publisher_mode='memory')
        set_container(container)

        assert get_container() is container
        assert isinstance(get_container().event_publisher(), InMemoryEventPublisher)

        reset_container()
        assert get_container() is not container
