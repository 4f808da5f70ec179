"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda app (stores, repositories)
- Factory: Nova instância por chamada (services, UoW)
- Selector: Implementação escolhida por configuração (STORE_BACKEND)

Adapters Django são importados sob demanda, de forma que o
container funcione com STORE_BACKEND=memory sem banco configurado.
"""

from importlib import import_module
from typing import Any, Dict, Optional
import os

from dependency_injector import containers, providers

from src.core.reports.ports import DocumentReportRepository
from src.core.reports.use_cases import (
    AssignReportService,
    GetReportService,
    ListReportsService,
    ReportStatsService,
    SubmitReportService,
    UnassignReportService,
    UpdateReportStatusService,
)
from src.core.shared.documents import InMemoryDocumentStore
from src.core.tickets.ports import DocumentTicketRepository
from src.core.tickets.use_cases import (
    AddInternalNoteService,
    AssignTicketService,
    BulkUpdateTicketStatusService,
    EscalateTicketService,
    GetTicketService,
    ListEscalatedTicketsService,
    ListTicketsService,
    RecordResponseService,
    SearchTicketsService,
    SubmitTicketService,
    TicketStatsService,
    UnassignTicketService,
    UpdateTicketPriorityService,
    UpdateTicketStatusService,
)


def _lazy(module: str, name: str):
    """Callable que importa ``module.name`` só na primeira chamada."""
    def build(*args, **kwargs):
        return getattr(import_module(module), name)(*args, **kwargs)
    build.__name__ = name
    return build


_STORE_MODULE = 'src.adapters.django_app.backoffice.store'
_UOW_MODULE = 'src.adapters.django_app.shared.unit_of_work'
_PUBLISHERS_MODULE = 'src.adapters.django_app.events.publishers'


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: store_backend, event_publisher_mode
    - Infrastructure: document store, event store, publisher
    - Repositories: persistência de denúncias e tickets
    - Unit of Work: uma por operação
    - Services: Use Cases

    Example:
        container = Container()
        container.config.from_dict({
            'store_backend': 'memory',
            'event_publisher_mode': 'logging',
        })

        service = container.escalate_ticket_service()
        result = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        _lazy(_PUBLISHERS_MODULE, 'get_event_publisher'),
        mode=config.event_publisher_mode,
    )

    document_store = providers.Selector(
        config.store_backend,
        django=providers.Singleton(_lazy(_STORE_MODULE, 'DjangoDocumentStore')),
        memory=providers.Singleton(InMemoryDocumentStore),
    )

    event_store = providers.Singleton(_lazy(_STORE_MODULE, 'DjangoEventStore'))

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    report_repository = providers.Singleton(
        DocumentReportRepository,
        store=document_store,
    )

    ticket_repository = providers.Singleton(
        DocumentTicketRepository,
        store=document_store,
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Selector(
        config.store_backend,
        django=providers.Factory(
            _lazy(_UOW_MODULE, 'DjangoUnitOfWork'),
            event_publisher=event_publisher,
            event_store=event_store,
        ),
        memory=providers.Factory(
            _lazy(_UOW_MODULE, 'InMemoryUnitOfWork'),
            event_publisher=event_publisher,
        ),
    )

    # =========================================================================
    # Services - Denúncias
    # =========================================================================

    submit_report_service = providers.Factory(
        SubmitReportService,
        report_repo=report_repository,
        uow=unit_of_work,
    )

    list_reports_service = providers.Factory(
        ListReportsService,
        report_repo=report_repository,
    )

    get_report_service = providers.Factory(
        GetReportService,
        report_repo=report_repository,
    )

    assign_report_service = providers.Factory(
        AssignReportService,
        report_repo=report_repository,
        uow=unit_of_work,
    )

    unassign_report_service = providers.Factory(
        UnassignReportService,
        report_repo=report_repository,
        uow=unit_of_work,
    )

    update_report_status_service = providers.Factory(
        UpdateReportStatusService,
        report_repo=report_repository,
        uow=unit_of_work,
    )

    report_stats_service = providers.Factory(
        ReportStatsService,
        report_repo=report_repository,
    )

    # =========================================================================
    # Services - Tickets
    # =========================================================================

    submit_ticket_service = providers.Factory(
        SubmitTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    list_tickets_service = providers.Factory(
        ListTicketsService,
        ticket_repo=ticket_repository,
    )

    list_escalated_tickets_service = providers.Factory(
        ListEscalatedTicketsService,
        ticket_repo=ticket_repository,
    )

    search_tickets_service = providers.Factory(
        SearchTicketsService,
        ticket_repo=ticket_repository,
    )

    get_ticket_service = providers.Factory(
        GetTicketService,
        ticket_repo=ticket_repository,
    )

    assign_ticket_service = providers.Factory(
        AssignTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    unassign_ticket_service = providers.Factory(
        UnassignTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    escalate_ticket_service = providers.Factory(
        EscalateTicketService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    update_ticket_status_service = providers.Factory(
        UpdateTicketStatusService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    bulk_update_ticket_status_service = providers.Factory(
        BulkUpdateTicketStatusService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    update_ticket_priority_service = providers.Factory(
        UpdateTicketPriorityService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    add_internal_note_service = providers.Factory(
        AddInternalNoteService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    record_response_service = providers.Factory(
        RecordResponseService,
        ticket_repo=ticket_repository,
        uow=unit_of_work,
    )

    ticket_stats_service = providers.Factory(
        TicketStatsService,
        ticket_repo=ticket_repository,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def default_config() -> Dict[str, Any]:
    """
    Lê a configuração do settings do Django.

    Sem Django configurado (scripts, testes do core), usa as
    variáveis de ambiente e o store em memória.
    """
    from django.conf import settings

    if not settings.configured:
        return {
            'store_backend': os.getenv('STORE_BACKEND', 'memory'),
            'event_publisher_mode': os.getenv('EVENT_PUBLISHER_MODE', 'logging'),
        }

    return {
        'store_backend': getattr(settings, 'STORE_BACKEND', 'django'),
        'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'logging'),
    }


def build_container(**overrides: Any) -> Container:
    """
    Cria container configurado.

    Args:
        overrides: Chaves de configuração (ex: store_backend='memory')
    """
    container = Container()
    container.config.from_dict({**default_config(), **overrides})
    return container


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).
    """
    global _container

    if _container is None:
        _container = build_container()

    return _container


def set_container(container: Container) -> None:
    """Substitui o container global (testes)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None
