"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Entity → Model (para persistência)
- Model → Entity (para uso no Core)
- Tradução de grafia dos enums: o Core usa hífen (in-progress),
  as tabelas usam underscore (in_progress)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
"""

from typing import Iterable, List

from helpdesk.core.activity.entities import ActivityAction, ActivityEntry
from helpdesk.core.comments.entities import CommentEntity
from helpdesk.core.tickets.entities import (
    TicketCategory,
    TicketEntity,
    TicketPriority,
    TicketSentiment,
    TicketStatus,
)

from .models import TicketActivityModel, TicketCommentModel, TicketModel


class TicketMapper:
    """
    Mapper entre TicketEntity e TicketModel.

    - to_fields(): Entity → dict de colunas (para update_or_create)
    - to_model(): Entity → Model
    - to_entity(): Model → Entity
    """

    @staticmethod
    def to_fields(entity: TicketEntity) -> dict:
        """Colunas do ticket, exceto `id` e `number`."""
        return {
            'subject': entity.subject,
            'description': entity.description or '',
            'category': entity.category.storage_value,
            'priority': entity.priority.storage_value,
            'status': entity.status.storage_value,
            'sentiment': entity.sentiment.storage_value,
            'employee_name': entity.employee_name or '',
            'department': entity.department or '',
            'ticket_date': entity.ticket_date,
            'resolution_notes': entity.resolution_notes,
            'internal_notes': entity.internal_notes,
            'attachment_url': entity.attachment_url,
            'created_by': entity.created_by,
            'assigned_to': entity.assigned_to,
            'merged_into': entity.merged_into,
            'created_at': entity.created_at,
            'updated_at': entity.updated_at,
            'due_by': entity.due_by,
        }

    @classmethod
    def to_model(cls, entity: TicketEntity) -> TicketModel:
        """
        Converte TicketEntity para TicketModel.

        Note:
            Não chama .save() - deixa isso para o Repository
        """
        return TicketModel(id=entity.id, number=entity.number, **cls.to_fields(entity))

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory .create(), pois os dados
            já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            number=model.number,
            subject=model.subject,
            description=model.description or '',
            category=TicketCategory.from_string(model.category),
            priority=TicketPriority.from_string(model.priority),
            status=TicketStatus.from_string(model.status),
            sentiment=TicketSentiment.from_string(model.sentiment),
            employee_name=model.employee_name or '',
            department=model.department or '',
            ticket_date=model.ticket_date,
            resolution_notes=model.resolution_notes,
            internal_notes=model.internal_notes,
            attachment_url=model.attachment_url,
            created_by=model.created_by,
            assigned_to=model.assigned_to,
            merged_into=model.merged_into,
            created_at=model.created_at,
            updated_at=model.updated_at,
            due_by=model.due_by,
        )

    @classmethod
    def to_entity_list(cls, models: Iterable[TicketModel]) -> List[TicketEntity]:
        return [cls.to_entity(model) for model in models]


class CommentMapper:
    """Mapper entre CommentEntity e TicketCommentModel."""

    @staticmethod
    def to_model(entity: CommentEntity) -> TicketCommentModel:
        return TicketCommentModel(
            id=entity.id,
            ticket_id=entity.ticket_id,
            author_id=entity.author_id,
            author_name=entity.author_name,
            content=entity.content,
            is_internal=entity.is_internal,
            created_at=entity.created_at,
        )

    @staticmethod
    def to_entity(model: TicketCommentModel) -> CommentEntity:
        return CommentEntity(
            id=model.id,
            ticket_id=model.ticket_id,
            author_id=model.author_id,
            author_name=model.author_name,
            content=model.content,
            is_internal=model.is_internal,
            created_at=model.created_at,
        )


class ActivityMapper:
    """Mapper entre ActivityEntry e TicketActivityModel."""

    @staticmethod
    def to_model(entry: ActivityEntry) -> TicketActivityModel:
        """Sem `id`: o banco atribui a sequência no insert."""
        return TicketActivityModel(
            ticket_id=entry.ticket_id,
            action=entry.action.value,
            metadata=dict(entry.metadata),
            actor_id=entry.actor_id,
            created_at=entry.created_at,
        )

    @staticmethod
    def to_entity(model: TicketActivityModel) -> ActivityEntry:
        return ActivityEntry(
            id=model.id,
            ticket_id=model.ticket_id,
            action=ActivityAction.from_string(model.action),
            metadata={str(k): str(v) for k, v in (model.metadata or {}).items()},
            actor_id=model.actor_id,
            created_at=model.created_at,
        )
