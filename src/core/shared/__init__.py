"""
Shared Domain Components.

Contém componentes compartilhados entre denúncias e tickets:
- Exceções de domínio
- Interfaces (Ports), incluindo o DocumentStore
- Base classes para Domain Events
- Normalização de timestamps
"""

from .exceptions import (
    DomainException,
    ValidationError,
    ReportValidationError,
    EntityNotFoundError,
    StoreUnavailableError,
)
from .events import DomainEvent
from .interfaces import DocumentStore, UnitOfWork, EventPublisher, EventStore
from .documents import InMemoryDocumentStore
from .timestamps import utc_now, to_datetime

__all__ = [
    "DomainException",
    "ValidationError",
    "ReportValidationError",
    "EntityNotFoundError",
    "StoreUnavailableError",
    "DomainEvent",
    "DocumentStore",
    "UnitOfWork",
    "EventPublisher",
    "EventStore",
    "InMemoryDocumentStore",
    "utc_now",
    "to_datetime",
]
