"""
Domínio de Tickets - ciclo de vida de chamados de suporte.

Este módulo contém a lógica de negócio relacionada a tickets:
- Entidades (TicketEntity e enums de classificação)
- Domain Events (TicketCreated, TicketUpdated, TicketMerged, ...)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)
- Use Cases (helpdesk.core.tickets.use_cases)

Características do Domínio:
- Prazo (due_by) derivado da prioridade pela SLAPolicy
- Toda mudança relevante registrada no Audit Log
- Merge fecha o duplicado e referencia o ticket canônico
"""

from .entities import (
    TicketCategory,
    TicketEntity,
    TicketPriority,
    TicketSentiment,
    TicketStatus,
)
from .events import (
    CommentAddedEvent,
    TicketCreatedEvent,
    TicketDeletedEvent,
    TicketMergedEvent,
    TicketOverdueEvent,
    TicketUpdatedEvent,
)
from .dtos import (
    UNSET,
    CreateTicketInputDTO,
    ListTicketsQueryDTO,
    MergeTicketsInputDTO,
    TicketOutputDTO,
    TicketStatsDTO,
    UpdateTicketInputDTO,
)
from .ports import InMemoryTicketRepository, TicketRepository

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TicketPriority",
    "TicketCategory",
    "TicketSentiment",
    # Events
    "TicketCreatedEvent",
    "TicketUpdatedEvent",
    "TicketMergedEvent",
    "TicketDeletedEvent",
    "TicketOverdueEvent",
    "CommentAddedEvent",
    # DTOs
    "UNSET",
    "CreateTicketInputDTO",
    "UpdateTicketInputDTO",
    "MergeTicketsInputDTO",
    "ListTicketsQueryDTO",
    "TicketOutputDTO",
    "TicketStatsDTO",
    # Ports
    "TicketRepository",
    "InMemoryTicketRepository",
]
