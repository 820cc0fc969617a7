"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports)
- Base classes para Domain Events
- Relógio (UTC)
"""

from .exceptions import (
    ConflictError,
    DomainException,
    ForbiddenError,
    NotFoundError,
    PartialMergeError,
    StorageError,
    ValidationError,
)
from .events import DomainEvent
from .interfaces import EventPublisher, UnitOfWork

__all__ = [
    "DomainException",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "ConflictError",
    "StorageError",
    "PartialMergeError",
    "DomainEvent",
    "EventPublisher",
    "UnitOfWork",
]
