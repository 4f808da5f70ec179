"""
Configurações globais do Pytest para o Back Office.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures compartilhadas.
"""

from datetime import datetime, timezone

import pytest

from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.config.container import reset_container
from src.core.reports.ports import DocumentReportRepository
from src.core.shared.documents import InMemoryDocumentStore
from src.core.tickets.ports import DocumentTicketRepository


VALID_REASON = "No Delivery / Ghost Seller"


@pytest.fixture
def now():
    """Relógio fixo para transições determinísticas."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store():
    """Document store em memória."""
    return InMemoryDocumentStore()


@pytest.fixture
def report_repo(store):
    return DocumentReportRepository(store)


@pytest.fixture
def ticket_repo(store):
    return DocumentTicketRepository(store)


@pytest.fixture
def uow():
    """Unit of Work em memória; eventos ficam em uow.published_events."""
    return InMemoryUnitOfWork()


@pytest.fixture(autouse=True)
def reset_global_container():
    """Cada teste começa sem container global."""
    reset_container()
    yield
    reset_container()
