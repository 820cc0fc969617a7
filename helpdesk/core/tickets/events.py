"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCreatedEvent: Novo ticket foi criado
- TicketUpdatedEvent: Campos de um ticket foram alterados
- TicketMergedEvent: Ticket foi mesclado em outro
- TicketDeletedEvent: Ticket foi excluído (com comentários e histórico)
- CommentAddedEvent: Comentário foi adicionado ao ticket
- TicketOverdueEvent: Ticket passou do prazo sem resolução

Uso:
    with uow:
        ticket = ticket_repo.add(ticket)
        uow.publish_event(TicketCreatedEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from helpdesk.core.shared.events import DomainEvent


@dataclass
class TicketCreatedEvent(DomainEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Notificar equipe de suporte
    - Alertar plantão para prioridade crítica
    """

    number: Optional[int] = None
    created_by: str = ""
    subject: str = ""
    priority: str = ""
    category: str = ""
    due_by: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketUpdatedEvent(DomainEvent):
    """
    Evento: Ticket foi alterado.

    Attributes:
        changed_fields: Nomes dos campos cujo valor mudou
        actor_id: Quem alterou
        assigned_to: Técnico atual (para notificação de atribuição)
        status: Status atual
    """

    changed_fields: List[str] = field(default_factory=list)
    actor_id: str = ""
    assigned_to: Optional[str] = None
    status: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "changed_fields": list(self.changed_fields),
            "actor_id": self.actor_id,
            "assigned_to": self.assigned_to,
            "status": self.status,
        }


@dataclass
class TicketMergedEvent(DomainEvent):
    """Evento: ticket (aggregate_id) foi mesclado em target_id."""

    target_id: str = ""
    actor_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketDeletedEvent(DomainEvent):
    """Evento: ticket foi excluído em cascata."""

    actor_id: str = ""
    comments_removed: int = 0
    activity_removed: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class CommentAddedEvent(DomainEvent):
    """
    Evento: Comentário foi adicionado ao ticket (aggregate_id).

    Attributes:
        comment_id: ID do comentário
        author_id: ID do autor
        is_internal: Se é nota interna (não notificar o solicitante)
        content_preview: Primeiros 100 caracteres
    """

    comment_id: str = ""
    author_id: str = ""
    is_internal: bool = False
    content_preview: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketOverdueEvent(DomainEvent):
    """
    Evento: Ticket passou do prazo sem ser resolvido.

    Emitido pela verificação periódica (Celery beat).
    """

    due_by: str = ""
    hours_overdue: float = 0.0
    priority: str = ""
    assigned_to: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"
